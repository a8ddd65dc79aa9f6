"""Data models for package dependencies and their synthetic-repo projections."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from constants import Constants, DependencySchemes


class PackageDependency(ABC):
    """A package at one version, as seen by a synthetic repository.

    Implementations are immutable; equality is exact coordinate + version.
    """

    @property
    @abstractmethod
    def scheme(self) -> str:
        """Version store scheme for this ecosystem."""

    @abstractmethod
    def package_syntax(self) -> str:
        """Package identity without a version, e.g. ``junit:junit``."""

    @abstractmethod
    def package_version(self) -> str:
        """Version string exactly as published."""

    @abstractmethod
    def package_manager_syntax(self) -> str:
        """Human readable ``name+version`` form used in commit and tag messages."""

    @abstractmethod
    def repo_name(self) -> str:
        """Path of the synthetic repository that hosts this package."""

    def git_tag_from_version(self) -> str:
        """Canonical tag name for this version."""
        return "v" + self.package_version()

    def __str__(self) -> str:
        return self.package_manager_syntax()


@dataclass(frozen=True)
class MavenModule:
    """A Maven ``groupId:artifactId`` pair."""
    group_id: str
    artifact_id: str

    def is_jdk(self) -> bool:
        return self.group_id == Constants.JDK_GROUP_ID and self.artifact_id == Constants.JDK_ARTIFACT_ID

    def package_syntax(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    def repo_name(self) -> str:
        if self.is_jdk():
            return "maven/jdk"
        return f"maven/{self.group_id}/{self.artifact_id}"

    def lsif_java_kind(self) -> str:
        return "jdk" if self.is_jdk() else "maven"


@dataclass(frozen=True)
class MavenDependency(PackageDependency):
    """A Maven module at one version."""
    module: MavenModule
    version: str

    @property
    def scheme(self) -> str:
        return DependencySchemes.JVM_PACKAGES.value

    def is_jdk(self) -> bool:
        return self.module.is_jdk()

    def package_syntax(self) -> str:
        return self.module.package_syntax()

    def package_version(self) -> str:
        return self.version

    def package_manager_syntax(self) -> str:
        return f"{self.module.package_syntax()}:{self.version}"

    def repo_name(self) -> str:
        return self.module.repo_name()

    def lsif_java_dependencies(self) -> List[str]:
        """Coordinates the indexer needs on its classpath; none for the JDK itself."""
        if self.is_jdk():
            return []
        return [self.package_manager_syntax()]


@dataclass(frozen=True)
class NpmPackage:
    """An npm package name with optional scope (without the leading ``@``)."""
    name: str
    scope: Optional[str] = None

    def package_syntax(self) -> str:
        if self.scope:
            return f"@{self.scope}/{self.name}"
        return self.name

    def repo_name(self) -> str:
        if self.scope:
            return f"npm/{self.scope}/{self.name}"
        return f"npm/{self.name}"


@dataclass(frozen=True)
class NpmDependency(PackageDependency):
    """An npm package at one version."""
    package: NpmPackage
    version: str

    @property
    def scheme(self) -> str:
        return DependencySchemes.NPM_PACKAGES.value

    def package_syntax(self) -> str:
        return self.package.package_syntax()

    def package_version(self) -> str:
        return self.version

    def package_manager_syntax(self) -> str:
        return f"{self.package.package_syntax()}@{self.version}"

    def repo_name(self) -> str:
        return self.package.repo_name()


@dataclass(frozen=True)
class PythonDependency(PackageDependency):
    """A Python distribution at one version; ``name`` is PEP 503 normalized."""
    name: str
    version: str

    @property
    def scheme(self) -> str:
        return DependencySchemes.PYTHON_PACKAGES.value

    def package_syntax(self) -> str:
        return self.name

    def package_version(self) -> str:
        return self.version

    def package_manager_syntax(self) -> str:
        return f"{self.name}=={self.version}"

    def repo_name(self) -> str:
        return f"python/{self.name}"
