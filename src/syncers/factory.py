"""Adapter registry: maps each ecosystem to its syncer, built once at startup."""

from typing import Callable, Dict, Mapping

from config import SyncConfig
from constants import PackageManagers
from common.errors import DependencyParseError
from registry.maven.client import MavenClient
from registry.npm.client import NpmClient
from registry.pypi.client import PyPIClient
from vcs.dependencies_syncer import VCSDependenciesSyncer
from versioning.parser import repo_path
from versioning.store import DependenciesStore
from .jvm import JVMPackagesSyncer
from .npm import NpmPackagesSyncer
from .python import PythonPackagesSyncer


def new_jvm_packages_syncer(config: SyncConfig, store: DependenciesStore) -> VCSDependenciesSyncer:
    client = MavenClient(repositories=config.maven.repositories, jdk_source_url=config.maven.jdk_source_url)
    return VCSDependenciesSyncer(JVMPackagesSyncer(client), config.maven.dependencies, store)


def new_npm_packages_syncer(config: SyncConfig, store: DependenciesStore) -> VCSDependenciesSyncer:
    client = NpmClient(registry=config.npm.registry, credentials=config.npm.credentials)
    return VCSDependenciesSyncer(NpmPackagesSyncer(client), config.npm.dependencies, store)


def new_python_packages_syncer(config: SyncConfig, store: DependenciesStore) -> VCSDependenciesSyncer:
    client = PyPIClient(urls=config.python.urls)
    return VCSDependenciesSyncer(PythonPackagesSyncer(client), config.python.dependencies, store)


SYNCER_FACTORIES: Dict[str, Callable[[SyncConfig, DependenciesStore], VCSDependenciesSyncer]] = {
    PackageManagers.MAVEN.value: new_jvm_packages_syncer,
    PackageManagers.NPM.value: new_npm_packages_syncer,
    PackageManagers.PYPI.value: new_python_packages_syncer,
}

# First path segment of a synthetic repo name -> ecosystem.
REPO_PREFIXES = {
    "maven": PackageManagers.MAVEN.value,
    "npm": PackageManagers.NPM.value,
    "python": PackageManagers.PYPI.value,
}


def build_syncers(config: SyncConfig, store: DependenciesStore) -> Dict[str, VCSDependenciesSyncer]:
    """One syncer per supported ecosystem, keyed by ecosystem tag."""
    return {ecosystem: factory(config, store) for ecosystem, factory in SYNCER_FACTORIES.items()}


def syncer_for_repo(repo_name: str, syncers: Mapping[str, VCSDependenciesSyncer]) -> VCSDependenciesSyncer:
    """Select the syncer responsible for ``repo_name`` (e.g. ``npm/left-pad``)."""
    prefix = repo_path(repo_name).split("/", 1)[0]
    ecosystem = REPO_PREFIXES.get(prefix)
    if ecosystem is None or ecosystem not in syncers:
        raise DependencyParseError(f"{repo_name!r} is not a package repository")
    return syncers[ecosystem]
