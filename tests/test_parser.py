"""Tests for dependency string and repository name parsing."""

import pytest

from common.errors import DependencyParseError
from versioning.models import MavenDependency, MavenModule, NpmDependency, NpmPackage, PythonDependency
from versioning.parser import (
    parse_maven_dependency,
    parse_maven_module,
    parse_npm_dependency,
    parse_npm_package_from_repo_name,
    parse_python_dependency,
    parse_python_package_from_repo_name,
    repo_path,
    tokenize_rightmost_colon,
)


class TestTokenizeRightmostColon:
    """Test the rightmost-colon tokenizer."""

    def test_splits_on_last_colon(self):
        assert tokenize_rightmost_colon("g:a:1.0") == ("g:a", "1.0")

    def test_no_colon(self):
        assert tokenize_rightmost_colon("left-pad") == ("left-pad", None)

    def test_empty_spec(self):
        assert tokenize_rightmost_colon("g:a:") == ("g:a", None)


class TestRepoPath:
    """Test reduction of remotes to repository paths."""

    def test_plain_name(self):
        assert repo_path("/npm/left-pad/") == "npm/left-pad"

    def test_url(self):
        assert repo_path("https://host/maven/junit/junit") == "maven/junit/junit"


class TestParseMaven:
    """Test Maven coordinates."""

    def test_parses_coordinates(self):
        dep = parse_maven_dependency("junit:junit:4.13.2")
        assert dep == MavenDependency(MavenModule("junit", "junit"), "4.13.2")
        assert dep.package_manager_syntax() == "junit:junit:4.13.2"
        assert dep.git_tag_from_version() == "v4.13.2"
        assert dep.repo_name() == "maven/junit/junit"

    @pytest.mark.parametrize("raw", ["junit:junit", "junit", "a:b:c:d", ":junit:1.0"])
    def test_rejects_malformed(self, raw):
        with pytest.raises(DependencyParseError):
            parse_maven_dependency(raw)

    def test_module_from_repo_name(self):
        assert parse_maven_module("maven/org.scala-lang/scala-library") == MavenModule(
            "org.scala-lang", "scala-library"
        )

    def test_jdk_module(self):
        module = parse_maven_module("maven/jdk")
        assert module.is_jdk()
        assert module.repo_name() == "maven/jdk"
        assert module.lsif_java_kind() == "jdk"

    def test_module_rejects_extra_segments(self):
        with pytest.raises(DependencyParseError):
            parse_maven_module("maven/a/b/c")


class TestParseNpm:
    """Test npm names and versions."""

    def test_unscoped(self):
        dep = parse_npm_dependency("left-pad@1.3.0")
        assert dep == NpmDependency(NpmPackage("left-pad"), "1.3.0")
        assert str(dep) == "left-pad@1.3.0"
        assert dep.repo_name() == "npm/left-pad"

    def test_scoped(self):
        dep = parse_npm_dependency("@types/node@20.1.0")
        assert dep.package == NpmPackage("node", scope="types")
        assert dep.package_syntax() == "@types/node"
        assert dep.repo_name() == "npm/types/node"

    @pytest.mark.parametrize("raw", ["left-pad", "left-pad@latest", "left-pad@^1.0.0", "Left-Pad@1.0.0"])
    def test_rejects_non_exact(self, raw):
        with pytest.raises(DependencyParseError):
            parse_npm_dependency(raw)

    def test_package_from_repo_name(self):
        assert parse_npm_package_from_repo_name("npm/types/node") == NpmPackage("node", scope="types")
        assert parse_npm_package_from_repo_name("npm/left-pad") == NpmPackage("left-pad")

    def test_package_from_foreign_repo_name(self):
        with pytest.raises(DependencyParseError):
            parse_npm_package_from_repo_name("python/requests")


class TestParsePython:
    """Test pinned Python requirements."""

    def test_normalizes_name(self):
        dep = parse_python_dependency("Flask_SQLAlchemy==3.0.0")
        assert dep == PythonDependency("flask-sqlalchemy", "3.0.0")
        assert dep.package_manager_syntax() == "flask-sqlalchemy==3.0.0"
        assert dep.repo_name() == "python/flask-sqlalchemy"

    @pytest.mark.parametrize(
        "raw",
        ["requests", "requests>=2.0", "requests==2.*", "requests[socks]==2.31.0", "requests==2.0,!=2.1", "==1.0"],
    )
    def test_rejects_unpinned(self, raw):
        with pytest.raises(DependencyParseError):
            parse_python_dependency(raw)

    def test_package_from_repo_name(self):
        assert parse_python_package_from_repo_name("python/Django") == "django"

    def test_package_from_bad_repo_name(self):
        with pytest.raises(DependencyParseError):
            parse_python_package_from_repo_name("python/a/b")
