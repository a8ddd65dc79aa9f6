"""Dependency descriptors, parsing, the historical version store and the resolver."""
