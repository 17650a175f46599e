"""HTTP infrastructure module."""
from .hosting_client import HostingClient

__all__ = [
    'HostingClient'
]
