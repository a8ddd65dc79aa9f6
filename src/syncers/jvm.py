"""JVM packages (Maven) adapter.

Besides the unpacked sources jar, every JVM package repository carries an
``lsif-java.json`` file at its root, for three reasons:

1. The indexer must be launched with a specific JDK, and the only reliable
   source of that version at sync time is the bytecode of the artifact.
2. The file tells the indexer whether the repository holds JDK sources or a
   regular Maven artifact.
3. Its presence marks the repository as a JVM package repo so indexing
   configuration can be inferred; JVM source repos lack it.

None of these apply to npm or Python packages, which is why their adapters
write no such file. Field names and presence are relied on downstream.
"""

import json
import logging
import os
import tempfile
from typing import Any, Dict

from constants import Constants, DependencySchemes
from common.context import SyncContext
from registry.maven.client import MavenClient
from syncers.base import DependenciesSyncer
from vcs.archive import unpack_archive
from vcs.classfile import infer_jvm_version_from_jar
from versioning.models import MavenDependency, PackageDependency
from versioning.parser import parse_maven_dependency, parse_maven_module

logger = logging.getLogger(__name__)


def lsif_java_json(dependency: MavenDependency, jvm_version: str) -> Dict[str, Any]:
    """Contents of ``lsif-java.json``; key order is part of the file format."""
    return {
        "kind": dependency.module.lsif_java_kind(),
        "jvm": jvm_version,
        "dependencies": dependency.lsif_java_dependencies(),
    }


class JVMPackagesSyncer(DependenciesSyncer):
    """Maven Central (or any Maven-layout repository) backed adapter."""

    type = "jvm_packages"
    scheme = DependencySchemes.JVM_PACKAGES.value
    placeholder = Constants.PLACEHOLDER_MAVEN_DEPENDENCY

    def __init__(self, client: MavenClient):
        self.client = client

    def parse_dependency(self, dependency: str) -> MavenDependency:
        return parse_maven_dependency(dependency)

    def parse_dependency_from_repo_name(self, repo_name: str) -> MavenDependency:
        return MavenDependency(module=parse_maven_module(repo_name), version="")

    def get(self, ctx: SyncContext, name: str, version: str) -> MavenDependency:
        dependency = self.parse_dependency(f"{name}:{version}")
        self.client.exists(ctx, dependency)
        return dependency

    def infer_jvm_version(self, ctx: SyncContext, dependency: MavenDependency, scratch_dir: str) -> str:
        """JVM release needed to compile ``dependency``; the JDK's own version for the JDK."""
        if dependency.is_jdk():
            return dependency.version
        jar_path = self.client.fetch_bytecode(ctx, dependency, scratch_dir)
        return infer_jvm_version_from_jar(jar_path)

    def download(self, ctx: SyncContext, dest_dir: str, dependency: PackageDependency) -> None:
        if not isinstance(dependency, MavenDependency):
            raise TypeError(f"expected a MavenDependency, got {type(dependency).__name__}")
        with tempfile.TemporaryDirectory(prefix="maven-") as scratch_dir:
            sources_jar = self.client.fetch_sources(ctx, dependency, scratch_dir)
            unpack_archive(sources_jar, dest_dir)
            jvm_version = self.infer_jvm_version(ctx, dependency, scratch_dir)

        contents = lsif_java_json(dependency, jvm_version)
        with open(os.path.join(dest_dir, Constants.LSIF_JAVA_JSON), "w", encoding="utf-8") as fh:
            fh.write(json.dumps(contents, separators=(",", ":")))
        logger.debug("Wrote %s for %s: %s", Constants.LSIF_JAVA_JSON, dependency, contents)
