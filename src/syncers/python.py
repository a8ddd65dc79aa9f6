"""Python packages adapter."""

import logging
import tempfile

from constants import Constants, DependencySchemes
from common.context import SyncContext
from common.errors import NoSourcesError
from registry.pypi.client import SDIST, PyPIClient
from syncers.base import DependenciesSyncer
from vcs.archive import unpack_archive
from versioning.models import PackageDependency, PythonDependency
from versioning.parser import parse_python_dependency, parse_python_package_from_repo_name

logger = logging.getLogger(__name__)


class PythonPackagesSyncer(DependenciesSyncer):
    """Adapter for PyPI-compatible indexes.

    Source distributions are preferred and have their ``name-version/``
    top-level directory stripped; wheels are unpacked as they are.
    """

    type = "python_packages"
    scheme = DependencySchemes.PYTHON_PACKAGES.value
    placeholder = Constants.PLACEHOLDER_PYTHON_DEPENDENCY

    def __init__(self, client: PyPIClient):
        self.client = client

    def parse_dependency(self, dependency: str) -> PythonDependency:
        return parse_python_dependency(dependency)

    def parse_dependency_from_repo_name(self, repo_name: str) -> PythonDependency:
        return PythonDependency(name=parse_python_package_from_repo_name(repo_name), version="")

    def get(self, ctx: SyncContext, name: str, version: str) -> PythonDependency:
        dependency = self.parse_dependency(f"{name}=={version}")
        self.client.release_files(ctx, dependency.name, version)
        return dependency

    def download(self, ctx: SyncContext, dest_dir: str, dependency: PackageDependency) -> None:
        if not isinstance(dependency, PythonDependency):
            raise TypeError(f"expected a PythonDependency, got {type(dependency).__name__}")
        with tempfile.TemporaryDirectory(prefix="python-") as scratch_dir:
            entry = self.client.fetch_release(ctx, dependency, scratch_dir)
            if entry is None:
                raise NoSourcesError(dependency.package_manager_syntax())
            strip = 1 if entry.get("packagetype") == SDIST else 0
            written = unpack_archive(entry["path"], dest_dir, strip_components=strip)
        logger.debug("Unpacked %d files of %s", written, dependency)
