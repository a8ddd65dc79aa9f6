"""Tests for the historical store and the desired-version resolver."""

import json
from unittest.mock import MagicMock

import pytest

from common.errors import ConfigError, StoreError
from versioning.parser import parse_npm_dependency
from versioning.resolver import DependencyVersionResolver
from versioning.store import DependencyRepo, InMemoryDependenciesStore, load_store_file


class TestInMemoryDependenciesStore:
    """Test the insertion-ordered store."""

    def test_filters_by_scheme_and_name(self):
        store = InMemoryDependenciesStore([
            DependencyRepo("npm", "left-pad", "1.0.0"),
            DependencyRepo("python", "left-pad", "9.9.9"),
            DependencyRepo("npm", "right-pad", "1.0.0"),
            DependencyRepo("npm", "left-pad", "1.1.0"),
        ])
        versions = [r.version for r in store.list_dependency_repos(scheme="npm", name="left-pad")]
        assert versions == ["1.0.0", "1.1.0"]

    def test_newest_first(self):
        store = InMemoryDependenciesStore([
            DependencyRepo("npm", "left-pad", "1.0.0"),
            DependencyRepo("npm", "left-pad", "1.1.0"),
        ])
        records = store.list_dependency_repos(scheme="npm", name="left-pad", newest_first=True)
        assert [r.version for r in records] == ["1.1.0", "1.0.0"]

    def test_python_names_are_normalized(self):
        store = InMemoryDependenciesStore([
            DependencyRepo("python", "Flask_SQLAlchemy", "3.0.0"),
            DependencyRepo("npm", "Left-Pad", "1.0.0"),
        ])
        assert [r.version for r in store.list_dependency_repos(scheme="python", name="flask-sqlalchemy")] == ["3.0.0"]
        assert store.list_dependency_repos(scheme="npm", name="left-pad") == []

    def test_upsert_ignores_duplicates(self):
        store = InMemoryDependenciesStore()
        assert store.upsert(DependencyRepo("npm", "a", "1.0.0")) is True
        assert store.upsert(DependencyRepo("npm", "a", "1.0.0")) is False
        assert len(store) == 1


class TestLoadStoreFile:
    """Test loading records from disk."""

    def test_yaml_records(self, tmp_path):
        path = tmp_path / "store.yml"
        path.write_text(
            "records:\n"
            "  - {scheme: npm, name: left-pad, version: 1.0.0}\n"
            "  - {scheme: npm, name: left-pad, version: 1.1.0}\n",
            encoding="utf-8",
        )
        store = load_store_file(str(path))
        assert len(store) == 2

    def test_json_list(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(json.dumps([{"scheme": "python", "name": "six", "version": "1.16.0"}]), encoding="utf-8")
        store = load_store_file(str(path))
        assert store.list_dependency_repos(scheme="python", name="six")[0].version == "1.16.0"

    def test_missing_key(self, tmp_path):
        path = tmp_path / "store.yml"
        path.write_text("- {scheme: npm, name: left-pad}\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_store_file(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_store_file(str(tmp_path / "nope.yml"))


class TestDependencyVersionResolver:
    """Test merging of configured and stored versions."""

    def test_configured_then_stored_newest_first(self):
        store = InMemoryDependenciesStore([
            DependencyRepo("npm", "left-pad", "1.0.0"),
            DependencyRepo("npm", "left-pad", "1.1.0"),
        ])
        resolver = DependencyVersionResolver(
            scheme="npm",
            config_dependencies=["left-pad@1.3.0", "other@2.0.0", "left-pad@1.2.0"],
            parse_dependency=parse_npm_dependency,
            store=store,
        )
        assert resolver.versions("left-pad") == ["1.3.0", "1.2.0", "1.1.0", "1.0.0"]

    def test_malformed_configuration_is_skipped(self, caplog):
        resolver = DependencyVersionResolver(
            scheme="npm",
            config_dependencies=["left-pad", "left-pad@1.3.0"],
            parse_dependency=parse_npm_dependency,
            store=InMemoryDependenciesStore(),
        )
        assert resolver.versions("left-pad") == ["1.3.0"]
        assert "skipping malformed dependency" in caplog.text

    def test_store_failure(self):
        store = MagicMock()
        store.list_dependency_repos.side_effect = RuntimeError("database is down")
        resolver = DependencyVersionResolver("npm", [], parse_npm_dependency, store)
        with pytest.raises(StoreError) as excinfo:
            resolver.versions("left-pad")
        assert isinstance(excinfo.value.__cause__, RuntimeError)
