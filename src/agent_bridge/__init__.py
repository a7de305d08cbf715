"""agent-bridge - uniform execution layer for CLI AI coding agents."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("agent-bridge")
except PackageNotFoundError:
    __version__ = "0.0.0"  # Fallback for development/testing

__all__ = ["__version__"]
