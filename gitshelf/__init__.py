"""gitshelf - browse, download and manage repositories from a catalog."""

__version__ = "0.1.0"
