"""Ecosystem adapters.

- base.py: the DependenciesSyncer capability interface
- jvm.py, npm.py, python.py: one adapter per ecosystem
- factory.py: ecosystem -> adapter registry, wired once at startup
"""
