"""Split working-tree changes into atomic, hunk-level commits."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("hunksplit")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
