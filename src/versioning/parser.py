"""Parsing of configured dependency strings and synthetic repository names."""

import re
from typing import Optional, Tuple
from urllib.parse import urlsplit

import semantic_version
from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name

from common.errors import DependencyParseError
from .models import (
    MavenDependency,
    MavenModule,
    NpmDependency,
    NpmPackage,
    PythonDependency,
)

_NPM_NAME = r"[a-z0-9\-~][a-z0-9\-._~]*"
_NPM_PACKAGE_RE = re.compile(rf"^(?:@(?P<scope>{_NPM_NAME})/)?(?P<name>{_NPM_NAME})$")
_NPM_DEPENDENCY_RE = re.compile(rf"^(?P<package>(?:@{_NPM_NAME}/)?{_NPM_NAME})@(?P<version>.+)$")


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, spec or None) using the rightmost-colon rule.

    Does not assume ecosystem-specific syntax.
    """
    s = s.strip()
    if ':' not in s:
        return s, None
    parts = s.rsplit(':', 1)
    identifier = parts[0].strip()
    spec_part = parts[1].strip() if len(parts) > 1 else ''
    spec = spec_part if spec_part else None
    return identifier, spec


def repo_path(remote: str) -> str:
    """Reduce a remote identity (repo name or URL) to its repo path."""
    remote = remote.strip()
    if "://" in remote:
        remote = urlsplit(remote).path
    return remote.strip("/")


def parse_maven_dependency(dependency: str) -> MavenDependency:
    """Parse ``groupId:artifactId:version``."""
    identifier, version = tokenize_rightmost_colon(dependency)
    if version is None or identifier.count(':') != 1:
        raise DependencyParseError(
            f"dependency {dependency!r} must have the form groupId:artifactId:version"
        )
    group_id, artifact_id = (part.strip() for part in identifier.split(':'))
    if not group_id or not artifact_id:
        raise DependencyParseError(f"dependency {dependency!r} has an empty groupId or artifactId")
    return MavenDependency(module=MavenModule(group_id, artifact_id), version=version)


def parse_maven_module(path: str) -> MavenModule:
    """Parse ``maven/<groupId>/<artifactId>`` (or ``maven/jdk``) into a module."""
    trimmed = repo_path(path)
    if trimmed.startswith("maven/"):
        trimmed = trimmed[len("maven/"):]
    if trimmed == "jdk":
        return MavenModule("jdk", "jdk")
    parts = trimmed.split("/")
    if len(parts) != 2 or not all(parts):
        raise DependencyParseError(f"failed to parse a maven module from the path {path!r}")
    return MavenModule(group_id=parts[0], artifact_id=parts[1])


def parse_npm_package(name: str) -> NpmPackage:
    """Parse ``name`` or ``@scope/name``."""
    match = _NPM_PACKAGE_RE.match(name.strip())
    if not match:
        raise DependencyParseError(f"{name!r} is not a valid npm package name")
    return NpmPackage(name=match.group("name"), scope=match.group("scope"))


def parse_npm_dependency(dependency: str) -> NpmDependency:
    """Parse ``name@version`` or ``@scope/name@version``.

    npm requires published versions to be valid SemVer, so anything else
    (ranges, dist-tags such as ``latest``) is rejected.
    """
    match = _NPM_DEPENDENCY_RE.match(dependency.strip())
    if not match:
        raise DependencyParseError(f"dependency {dependency!r} must have the form name@version")
    version = match.group("version")
    try:
        semantic_version.Version(version)
    except ValueError as exc:
        raise DependencyParseError(f"dependency {dependency!r} has a non-semver version") from exc
    return NpmDependency(package=parse_npm_package(match.group("package")), version=version)


def parse_npm_package_from_repo_name(path: str) -> NpmPackage:
    """Parse ``npm/<name>`` or ``npm/<scope>/<name>``."""
    trimmed = repo_path(path)
    if not trimmed.startswith("npm/"):
        raise DependencyParseError(f"{path!r} is not an npm package repository")
    parts = trimmed[len("npm/"):].split("/")
    if len(parts) == 1:
        return parse_npm_package(parts[0])
    if len(parts) == 2:
        return parse_npm_package(f"@{parts[0]}/{parts[1]}")
    raise DependencyParseError(f"failed to parse an npm package from the path {path!r}")


def parse_python_dependency(dependency: str) -> PythonDependency:
    """Parse a pinned requirement ``name==version``."""
    try:
        req = Requirement(dependency.strip())
    except InvalidRequirement as exc:
        raise DependencyParseError(f"dependency {dependency!r} is not a valid requirement") from exc
    specs = list(req.specifier)
    if req.extras or req.marker or req.url or len(specs) != 1 or specs[0].operator != "==":
        raise DependencyParseError(f"dependency {dependency!r} must have the form name==version")
    version = specs[0].version
    if "*" in version:
        raise DependencyParseError(f"dependency {dependency!r} must pin an exact version")
    return PythonDependency(name=canonicalize_name(req.name), version=version)


def parse_python_package_from_repo_name(path: str) -> str:
    """Parse ``python/<name>`` into a normalized distribution name."""
    trimmed = repo_path(path)
    if not trimmed.startswith("python/"):
        raise DependencyParseError(f"{path!r} is not a python package repository")
    name = trimmed[len("python/"):]
    if not name or "/" in name:
        raise DependencyParseError(f"failed to parse a python package from the path {path!r}")
    return canonicalize_name(name)
