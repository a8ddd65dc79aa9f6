"""PyPI registry package."""

from .client import PyPIClient, select_distribution

__all__ = ["PyPIClient", "select_distribution"]
