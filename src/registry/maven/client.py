"""Maven repository client: existence checks and jar downloads.

Talks to Maven-layout HTTP repositories (Maven Central by default); each
configured repository is tried in order.
"""
from __future__ import annotations

import logging
import os
from typing import List, Optional, Sequence

from constants import Constants
from common.context import SyncContext
from common.errors import NoSourcesError, NotFoundError, RegistryError
from common.http_client import fetch_to_file, safe_head
from common.logging_utils import extra_context, safe_url
from versioning.models import MavenDependency

logger = logging.getLogger(__name__)


class MavenClient:
    """Resolves artifacts of a Maven dependency across repositories.

    Args:
        repositories: Base URLs of Maven-layout repositories.
        jdk_source_url: Optional URL template (``{version}`` placeholder) of a
            JDK source archive; without it the JDK module has no versions.
        headers: Extra request headers (e.g. authorization).
    """

    def __init__(
        self,
        repositories: Optional[Sequence[str]] = None,
        jdk_source_url: Optional[str] = None,
        headers: Optional[dict] = None,
    ):
        self.repositories: List[str] = [r.rstrip("/") for r in (repositories or [Constants.REGISTRY_URL_MAVEN])]
        self.jdk_source_url = jdk_source_url
        self.headers = dict(headers or {})

    @staticmethod
    def artifact_path(dependency: MavenDependency, suffix: str) -> str:
        """Repository-relative path, e.g. ``junit/junit/4.13/junit-4.13.pom``."""
        module = dependency.module
        group_path = module.group_id.replace(".", "/")
        file_name = f"{module.artifact_id}-{dependency.version}{suffix}"
        return f"{group_path}/{module.artifact_id}/{dependency.version}/{file_name}"

    def artifact_urls(self, dependency: MavenDependency, suffix: str) -> List[str]:
        if dependency.is_jdk():
            if not self.jdk_source_url:
                return []
            return [self.jdk_source_url.format(version=dependency.version)]
        path = self.artifact_path(dependency, suffix)
        return [f"{repository}/{path}" for repository in self.repositories]

    def exists(self, ctx: SyncContext, dependency: MavenDependency) -> None:
        """Confirm the dependency is published.

        Raises:
            NotFoundError: no repository has the POM.
            RegistryError: a repository answered with an unexpected status.
        """
        suffix = "-sources.jar" if dependency.is_jdk() else ".pom"
        for url in self.artifact_urls(dependency, suffix):
            res = safe_head(url, context="maven", ctx=ctx, headers=self.headers)
            if res.status_code == 200:
                return
            if res.status_code == 404:
                continue
            logger.warning(
                "HTTP non-2xx from Maven repository",
                extra=extra_context(
                    event="http_response",
                    outcome="handled_non_2xx",
                    status_code=res.status_code,
                    target=safe_url(url),
                    package_manager="maven",
                ),
            )
            raise RegistryError(f"maven repository returned {res.status_code} for {safe_url(url)}")
        raise NotFoundError(dependency.package_manager_syntax())

    def _fetch_first(self, ctx: SyncContext, urls: Sequence[str], dest_path: str) -> bool:
        for url in urls:
            if fetch_to_file(url, dest_path, context="maven", ctx=ctx, headers=self.headers):
                return True
        return False

    def fetch_sources(self, ctx: SyncContext, dependency: MavenDependency, dest_dir: str) -> str:
        """Download the sources jar into ``dest_dir`` and return its path.

        Raises:
            NoSourcesError: the artifact exists but publishes no sources jar.
        """
        dest_path = os.path.join(dest_dir, os.path.basename(self.artifact_path(dependency, "-sources.jar")))
        if not self._fetch_first(ctx, self.artifact_urls(dependency, "-sources.jar"), dest_path):
            raise NoSourcesError(dependency.package_manager_syntax())
        return dest_path

    def fetch_bytecode(self, ctx: SyncContext, dependency: MavenDependency, dest_dir: str) -> Optional[str]:
        """Download the compiled jar; None when the module ships none (e.g. ``pom`` packaging)."""
        if dependency.is_jdk():
            return None
        dest_path = os.path.join(dest_dir, os.path.basename(self.artifact_path(dependency, ".jar")))
        if not self._fetch_first(ctx, self.artifact_urls(dependency, ".jar"), dest_path):
            logger.info("No bytecode jar published for %s", dependency.package_manager_syntax())
            return None
        return dest_path
