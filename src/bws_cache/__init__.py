"""Read-through caching proxy for a remote secrets store."""

__version__ = "0.1.0"

__all__ = ["__version__"]
