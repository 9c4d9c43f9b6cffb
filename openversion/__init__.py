"""openversion - next-version computation service for branch-based release numbering."""
from openversion.version import __version__

__all__ = ["__version__"]
