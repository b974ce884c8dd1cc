"""iacguard package metadata."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("iacguard")
except PackageNotFoundError:
    __version__ = "0.0.1"
