"""PyPI client: release file listings and distribution downloads."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

from constants import Constants
from common.context import SyncContext
from common.errors import DownloadError, NotFoundError, RegistryError
from common.http_client import fetch_to_file, get_json
from common.logging_utils import extra_context, safe_url
from versioning.models import PythonDependency

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}
SDIST = "sdist"
WHEEL = "bdist_wheel"


def select_distribution(files: Sequence[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Prefer the source distribution, then a wheel; None when neither exists."""
    for packagetype in (SDIST, WHEEL):
        for entry in files:
            if entry.get("packagetype") == packagetype and entry.get("url"):
                return entry
    return None


class PyPIClient:
    """Client for PyPI-compatible JSON APIs, tried in order.

    Args:
        urls: JSON API base URLs, e.g. ``https://pypi.org/pypi/``.
    """

    def __init__(self, urls: Optional[Sequence[str]] = None):
        self.urls: List[str] = [u.rstrip("/") + "/" for u in (urls or [Constants.REGISTRY_URL_PYPI])]

    def release_files(self, ctx: SyncContext, name: str, version: str) -> List[Dict[str, Any]]:
        """Files published for ``name`` at ``version`` on the first index that has it.

        Raises:
            NotFoundError: no index knows the release.
            RegistryError: an index answered with an unexpected status.
        """
        for base in self.urls:
            url = f"{base}{name}/{version}/json"
            status_code, data = get_json(url, context="pypi", ctx=ctx, headers=HEADERS_JSON)
            if status_code == 404:
                continue
            if status_code != 200 or not isinstance(data, dict):
                logger.warning(
                    "HTTP non-2xx from PyPI",
                    extra=extra_context(
                        event="http_response",
                        outcome="handled_non_2xx",
                        status_code=status_code,
                        target=safe_url(url),
                        package_manager="pypi",
                    ),
                )
                raise RegistryError(f"pypi returned {status_code} for {safe_url(url)}")
            return list(data.get("urls") or [])
        raise NotFoundError(f"{name}=={version}")

    def fetch_distribution(self, ctx: SyncContext, entry: Dict[str, Any], dest_dir: str) -> str:
        """Download one release file entry into ``dest_dir`` and return its path."""
        url = entry["url"]
        file_name = os.path.basename(entry.get("filename") or url.rsplit("/", 1)[-1])
        dest_path = os.path.join(dest_dir, file_name)
        if not fetch_to_file(url, dest_path, context="pypi", ctx=ctx):
            raise DownloadError(f"distribution {safe_url(url)} is missing")
        return dest_path

    def fetch_release(self, ctx: SyncContext, dependency: PythonDependency, dest_dir: str) -> Optional[Dict[str, Any]]:
        """Download the preferred distribution of ``dependency``.

        Returns:
            The selected file entry with its local path under ``"path"``, or
            None when the release has no sdist or wheel.
        """
        entry = select_distribution(self.release_files(ctx, dependency.name, dependency.version))
        if entry is None:
            return None
        selected = dict(entry)
        selected["path"] = self.fetch_distribution(ctx, entry, dest_dir)
        return selected
