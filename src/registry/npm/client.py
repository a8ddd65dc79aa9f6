"""NPM registry client: version documents and tarball downloads."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from constants import Constants
from common.context import SyncContext
from common.errors import DownloadError, NotFoundError, RegistryError
from common.http_client import fetch_to_file, get_json
from common.logging_utils import extra_context, safe_url
from versioning.models import NpmDependency

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}


class NpmClient:
    """Client for one npm registry.

    Args:
        registry: Registry base URL.
        credentials: Optional bearer token sent with every request.
    """

    def __init__(self, registry: str = Constants.REGISTRY_URL_NPM, credentials: Optional[str] = None):
        self.registry = registry.rstrip("/") + "/"
        self.credentials = credentials

    def _headers(self, accept_json: bool = True) -> Dict[str, str]:
        headers = dict(HEADERS_JSON) if accept_json else {}
        if self.credentials:
            headers["Authorization"] = f"Bearer {self.credentials}"
        return headers

    def version_url(self, dependency: NpmDependency) -> str:
        return f"{self.registry}{dependency.package_syntax()}/{dependency.version}"

    def get_dependency_info(self, ctx: SyncContext, dependency: NpmDependency) -> Dict[str, Any]:
        """Return the registry's version document for ``dependency``.

        Raises:
            NotFoundError: the package or version is not published.
            RegistryError: any other failure.
        """
        url = self.version_url(dependency)
        status_code, data = get_json(url, context="npm", ctx=ctx, headers=self._headers())
        if status_code == 404:
            raise NotFoundError(dependency.package_manager_syntax())
        if status_code != 200 or not isinstance(data, dict):
            logger.warning(
                "HTTP non-2xx from npm registry",
                extra=extra_context(
                    event="http_response",
                    outcome="handled_non_2xx",
                    status_code=status_code,
                    target=safe_url(url),
                    package_manager="npm",
                ),
            )
            raise RegistryError(f"npm registry returned {status_code} for {safe_url(url)}")
        return data

    def fetch_tarball(self, ctx: SyncContext, dependency: NpmDependency, dest_dir: str) -> str:
        """Download the version's tarball into ``dest_dir`` and return its path."""
        info = self.get_dependency_info(ctx, dependency)
        tarball_url = (info.get("dist") or {}).get("tarball")
        if not tarball_url:
            raise DownloadError(f"npm registry lists no tarball for {dependency.package_manager_syntax()}")
        dest_path = os.path.join(dest_dir, "package.tgz")
        if not fetch_to_file(tarball_url, dest_path, context="npm", ctx=ctx, headers=self._headers(accept_json=False)):
            raise DownloadError(f"tarball {safe_url(tarball_url)} of {dependency.package_manager_syntax()} is missing")
        return dest_path
