"""npm packages adapter."""

import logging
import tempfile

from constants import Constants, DependencySchemes
from common.context import SyncContext
from registry.npm.client import NpmClient
from syncers.base import DependenciesSyncer
from vcs.archive import unpack_archive
from versioning.models import NpmDependency, PackageDependency
from versioning.parser import parse_npm_dependency, parse_npm_package_from_repo_name

logger = logging.getLogger(__name__)


class NpmPackagesSyncer(DependenciesSyncer):
    """Adapter for an npm registry.

    Tarballs nest everything under a single ``package/`` directory, which is
    stripped so ``package.json`` lands at the repository root.
    """

    type = "npm_packages"
    scheme = DependencySchemes.NPM_PACKAGES.value
    placeholder = Constants.PLACEHOLDER_NPM_DEPENDENCY

    def __init__(self, client: NpmClient):
        self.client = client

    def parse_dependency(self, dependency: str) -> NpmDependency:
        return parse_npm_dependency(dependency)

    def parse_dependency_from_repo_name(self, repo_name: str) -> NpmDependency:
        return NpmDependency(package=parse_npm_package_from_repo_name(repo_name), version="")

    def get(self, ctx: SyncContext, name: str, version: str) -> NpmDependency:
        dependency = self.parse_dependency(f"{name}@{version}")
        self.client.get_dependency_info(ctx, dependency)
        return dependency

    def download(self, ctx: SyncContext, dest_dir: str, dependency: PackageDependency) -> None:
        if not isinstance(dependency, NpmDependency):
            raise TypeError(f"expected an NpmDependency, got {type(dependency).__name__}")
        with tempfile.TemporaryDirectory(prefix="npm-") as scratch_dir:
            tarball = self.client.fetch_tarball(ctx, dependency, scratch_dir)
            written = unpack_archive(tarball, dest_dir, strip_components=1)
        logger.debug("Unpacked %d files of %s", written, dependency)
