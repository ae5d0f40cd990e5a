"""DropDesk keeps a history of files and folders dropped on it."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dropdesk")
except PackageNotFoundError:
    # Running from a source checkout without an installed distribution.
    __version__ = "0.0.0"

__all__ = ["__version__"]
