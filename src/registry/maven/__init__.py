"""Maven registry package."""

from .client import MavenClient

__all__ = ["MavenClient"]
