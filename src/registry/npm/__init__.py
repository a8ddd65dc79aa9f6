"""NPM registry package."""

from .client import NpmClient

__all__ = ["NpmClient"]
