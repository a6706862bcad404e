"""reviewchain — sequential multi-agent review pipeline."""

from reviewchain.version import __version__

__all__ = ["__version__"]
