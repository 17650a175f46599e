"""gitshelf command-line interface."""

from gitshelf import __version__

__all__ = ["__version__"]
