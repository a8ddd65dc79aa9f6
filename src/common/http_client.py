"""Shared HTTP helpers used by the registry clients.

Encapsulates common request/timeout error handling so registry modules avoid
duplicating try/except blocks. Network failures surface as ``RegistryError``
(or ``DownloadError`` for artifact transfers); status codes are left to the
caller so that a 404 can be told apart from everything else.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional, Tuple

import requests

from constants import Constants
from common.context import SyncContext
from common.errors import DownloadError, RegistryError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def _request(method: str, url: str, *, context: str, ctx: Optional[SyncContext] = None, **kwargs: Any) -> requests.Response:
    """Issue one request bounded by the operation context."""
    if ctx is not None:
        ctx.check()
    timeout = ctx.timeout_for(Constants.REQUEST_TIMEOUT) if ctx is not None else Constants.REQUEST_TIMEOUT
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action=method,
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.request(method, url, timeout=timeout, **kwargs)
        except requests.Timeout as exc:
            logger.error("%s request timed out after %s seconds", context, timeout)
            raise RegistryError(f"{context} request to {safe_target} timed out") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise RegistryError(f"{context} request to {safe_target} failed: {exc}") from exc
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action=method,
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


def safe_get(url: str, *, context: str, ctx: Optional[SyncContext] = None, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces."""
    return _request("GET", url, context=context, ctx=ctx, **kwargs)


def safe_head(url: str, *, context: str, ctx: Optional[SyncContext] = None, **kwargs: Any) -> requests.Response:
    """Perform a HEAD request, following redirects like GET does."""
    kwargs.setdefault("allow_redirects", True)
    return _request("HEAD", url, context=context, ctx=ctx, **kwargs)


def get_json(url: str, *, context: str, ctx: Optional[SyncContext] = None, **kwargs: Any) -> Tuple[int, Optional[Any]]:
    """Perform GET request and parse a JSON body.

    Returns:
        Tuple of (status_code, parsed_json_or_none). The body is only parsed
        for 200 responses.
    """
    res = safe_get(url, context=context, ctx=ctx, **kwargs)
    if res.status_code != 200:
        return res.status_code, None
    try:
        return res.status_code, json.loads(res.text)
    except json.JSONDecodeError as exc:
        raise RegistryError(f"{context} returned invalid JSON from {safe_url(url)}") from exc


def fetch_to_file(
    url: str,
    dest_path: str,
    *,
    context: str,
    ctx: Optional[SyncContext] = None,
    **kwargs: Any,
) -> bool:
    """Stream ``url`` into ``dest_path``.

    Returns:
        True when the file was written, False when the server answered 404.

    Raises:
        DownloadError: any other status or a transfer failure.
    """
    try:
        res = _request("GET", url, context=context, ctx=ctx, stream=True, **kwargs)
    except RegistryError as exc:
        raise DownloadError(str(exc)) from exc
    with res:
        if res.status_code == 404:
            return False
        if res.status_code != 200:
            raise DownloadError(f"{context} download of {safe_url(url)} failed with status {res.status_code}")
        os.makedirs(os.path.dirname(dest_path) or ".", exist_ok=True)
        try:
            with open(dest_path, "wb") as out:
                for chunk in res.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                    if ctx is not None:
                        ctx.check()
                    if chunk:
                        out.write(chunk)
        except requests.RequestException as exc:
            raise DownloadError(f"{context} download of {safe_url(url)} interrupted: {exc}") from exc
    return True
