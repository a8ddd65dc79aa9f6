"""Shared helpers: logging, HTTP, errors and the operation context."""
