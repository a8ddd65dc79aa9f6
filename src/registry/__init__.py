"""Registry clients, one package per ecosystem.

- maven: Maven-layout repositories (POM existence, sources and bytecode jars)
- npm: npm registry version documents and tarballs
- pypi: PyPI JSON API release listings and distributions
"""
