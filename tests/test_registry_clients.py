"""Tests for the Maven, npm and PyPI registry clients."""

from unittest.mock import MagicMock, patch

import pytest

from common.context import SyncContext
from common.errors import DownloadError, NoSourcesError, NotFoundError, RegistryError
from registry.maven.client import MavenClient
from registry.npm.client import NpmClient
from registry.pypi.client import PyPIClient, select_distribution
from versioning.parser import parse_maven_dependency, parse_npm_dependency, parse_python_dependency


def _status(code):
    res = MagicMock()
    res.status_code = code
    return res


class TestMavenClient:
    """Test Maven repository lookups."""

    def test_artifact_path(self):
        dep = parse_maven_dependency("org.scala-lang:scala-library:2.13.12")
        assert MavenClient.artifact_path(dep, ".pom") == (
            "org/scala-lang/scala-library/2.13.12/scala-library-2.13.12.pom"
        )

    @patch("registry.maven.client.safe_head")
    def test_exists_tries_repositories_in_order(self, mock_head):
        mock_head.side_effect = [_status(404), _status(200)]
        client = MavenClient(repositories=["https://a.example/", "https://b.example"])
        client.exists(SyncContext(), parse_maven_dependency("junit:junit:4.13.2"))
        urls = [call.args[0] for call in mock_head.call_args_list]
        assert urls == [
            "https://a.example/junit/junit/4.13.2/junit-4.13.2.pom",
            "https://b.example/junit/junit/4.13.2/junit-4.13.2.pom",
        ]

    @patch("registry.maven.client.safe_head")
    def test_exists_not_found(self, mock_head):
        mock_head.return_value = _status(404)
        with pytest.raises(NotFoundError):
            MavenClient().exists(SyncContext(), parse_maven_dependency("junit:junit:0.0.0"))

    @patch("registry.maven.client.safe_head")
    def test_exists_unexpected_status(self, mock_head):
        mock_head.return_value = _status(500)
        with pytest.raises(RegistryError):
            MavenClient().exists(SyncContext(), parse_maven_dependency("junit:junit:4.13.2"))

    @patch("registry.maven.client.safe_head")
    def test_jdk_without_source_url(self, mock_head):
        with pytest.raises(NotFoundError):
            MavenClient().exists(SyncContext(), parse_maven_dependency("jdk:jdk:11"))
        mock_head.assert_not_called()

    @patch("registry.maven.client.safe_head")
    def test_jdk_with_source_url(self, mock_head):
        mock_head.return_value = _status(200)
        client = MavenClient(jdk_source_url="https://jdk.example/src-{version}.zip")
        client.exists(SyncContext(), parse_maven_dependency("jdk:jdk:17"))
        assert mock_head.call_args.args[0] == "https://jdk.example/src-17.zip"

    @patch("registry.maven.client.fetch_to_file", return_value=False)
    def test_missing_sources_jar(self, _mock_fetch, tmp_path):
        with pytest.raises(NoSourcesError):
            MavenClient().fetch_sources(SyncContext(), parse_maven_dependency("a:b:1.0"), str(tmp_path))

    @patch("registry.maven.client.fetch_to_file", return_value=False)
    def test_missing_bytecode_jar(self, _mock_fetch, tmp_path):
        assert MavenClient().fetch_bytecode(SyncContext(), parse_maven_dependency("a:b:1.0"), str(tmp_path)) is None

    @patch("registry.maven.client.fetch_to_file")
    def test_jdk_has_no_bytecode(self, mock_fetch, tmp_path):
        assert MavenClient().fetch_bytecode(SyncContext(), parse_maven_dependency("jdk:jdk:11"), str(tmp_path)) is None
        mock_fetch.assert_not_called()


class TestNpmClient:
    """Test npm registry lookups."""

    @patch("registry.npm.client.get_json")
    def test_version_document(self, mock_get_json):
        mock_get_json.return_value = (200, {"dist": {"tarball": "https://r.example/t.tgz"}})
        client = NpmClient(registry="https://r.example", credentials="s3cret")
        info = client.get_dependency_info(SyncContext(), parse_npm_dependency("@types/node@20.1.0"))
        assert info["dist"]["tarball"] == "https://r.example/t.tgz"
        assert mock_get_json.call_args.args[0] == "https://r.example/@types/node/20.1.0"
        assert mock_get_json.call_args.kwargs["headers"]["Authorization"] == "Bearer s3cret"

    @patch("registry.npm.client.get_json", return_value=(404, None))
    def test_not_found(self, _mock_get_json):
        with pytest.raises(NotFoundError):
            NpmClient().get_dependency_info(SyncContext(), parse_npm_dependency("left-pad@9.9.9"))

    @patch("registry.npm.client.get_json", return_value=(500, None))
    def test_server_error(self, _mock_get_json):
        with pytest.raises(RegistryError):
            NpmClient().get_dependency_info(SyncContext(), parse_npm_dependency("left-pad@1.3.0"))

    @patch("registry.npm.client.get_json", return_value=(200, {"name": "left-pad"}))
    def test_tarball_missing_from_document(self, _mock_get_json, tmp_path):
        with pytest.raises(DownloadError):
            NpmClient().fetch_tarball(SyncContext(), parse_npm_dependency("left-pad@1.3.0"), str(tmp_path))

    @patch("registry.npm.client.fetch_to_file", return_value=True)
    @patch("registry.npm.client.get_json")
    def test_fetch_tarball(self, mock_get_json, mock_fetch, tmp_path):
        mock_get_json.return_value = (200, {"dist": {"tarball": "https://r.example/t.tgz"}})
        path = NpmClient().fetch_tarball(SyncContext(), parse_npm_dependency("left-pad@1.3.0"), str(tmp_path))
        assert path == str(tmp_path / "package.tgz")
        assert mock_fetch.call_args.args[0] == "https://r.example/t.tgz"


class TestPyPIClient:
    """Test PyPI JSON API lookups."""

    def test_select_prefers_sdist(self):
        files = [
            {"packagetype": "bdist_wheel", "url": "https://f.example/a.whl"},
            {"packagetype": "sdist", "url": "https://f.example/a.tar.gz"},
        ]
        assert select_distribution(files)["packagetype"] == "sdist"

    def test_select_falls_back_to_wheel(self):
        files = [
            {"packagetype": "bdist_egg", "url": "https://f.example/a.egg"},
            {"packagetype": "bdist_wheel", "url": "https://f.example/a.whl"},
        ]
        assert select_distribution(files)["packagetype"] == "bdist_wheel"
        assert select_distribution(files[:1]) is None

    @patch("registry.pypi.client.get_json")
    def test_release_files_tries_indexes(self, mock_get_json):
        mock_get_json.side_effect = [(404, None), (200, {"urls": [{"packagetype": "sdist"}]})]
        client = PyPIClient(urls=["https://mirror.example/pypi", "https://pypi.org/pypi/"])
        files = client.release_files(SyncContext(), "six", "1.16.0")
        assert files == [{"packagetype": "sdist"}]
        assert mock_get_json.call_args.args[0] == "https://pypi.org/pypi/six/1.16.0/json"

    @patch("registry.pypi.client.get_json", return_value=(404, None))
    def test_release_not_found(self, _mock_get_json):
        with pytest.raises(NotFoundError):
            PyPIClient().release_files(SyncContext(), "six", "0.0.0")

    @patch("registry.pypi.client.fetch_to_file", return_value=True)
    @patch("registry.pypi.client.get_json")
    def test_fetch_release(self, mock_get_json, _mock_fetch, tmp_path):
        mock_get_json.return_value = (200, {"urls": [{
            "packagetype": "sdist",
            "filename": "six-1.16.0.tar.gz",
            "url": "https://files.example/six-1.16.0.tar.gz",
        }]})
        entry = PyPIClient().fetch_release(SyncContext(), parse_python_dependency("six==1.16.0"), str(tmp_path))
        assert entry["path"] == str(tmp_path / "six-1.16.0.tar.gz")

    @patch("registry.pypi.client.get_json", return_value=(200, {"urls": []}))
    def test_release_without_distributions(self, _mock_get_json, tmp_path):
        assert PyPIClient().fetch_release(SyncContext(), parse_python_dependency("six==1.16.0"), str(tmp_path)) is None
