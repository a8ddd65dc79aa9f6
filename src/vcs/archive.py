"""Extraction of downloaded package archives into a scratch workspace.

Archive contents are untrusted. Every entry name goes through
``safe_output_path`` before anything touches the disk; rejected entries are
skipped silently (DEBUG log only).
"""
from __future__ import annotations

import logging
import os
import shutil
import tarfile
import zipfile
import zlib
from typing import IO, Optional

from constants import Constants
from common.errors import DownloadError
from common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)

# Raised by the readers for truncated or malformed archives.
CORRUPT_ARCHIVE_ERRORS = (zipfile.BadZipFile, tarfile.TarError, zlib.error, EOFError)


def safe_output_path(name: str, destination: str) -> Optional[str]:
    """Return the cleaned output path for archive entry ``name``, or None to skip it.

    Rejected: directory entries (trailing ``/``), absolute paths, anything
    inside a ``.git`` directory, and paths that escape ``destination`` once
    normalized (zip slip).
    """
    if name.endswith("/"):
        return None
    if name.startswith("/"):
        return None
    segments = name.replace(os.sep, "/").split("/")
    if Constants.GIT_METADATA_DIR in segments:
        return None

    root = os.path.normpath(os.path.abspath(destination))
    cleaned = os.path.normpath(os.path.join(root, name))
    if not cleaned.startswith(root.rstrip(os.sep) + os.sep):
        return None
    return cleaned


def _strip(name: str, strip_components: int) -> str:
    if strip_components <= 0:
        return name
    parts = name.split("/")
    return "/".join(parts[strip_components:])


def _skip(name: str, archive_path: str) -> None:
    if is_debug_enabled(logger):
        logger.debug(
            "Skipping archive entry %r",
            name,
            extra=extra_context(event="archive_entry_skipped", archive=archive_path),
        )


def _copy_entry(source: IO[bytes], output_path: str) -> None:
    os.makedirs(os.path.dirname(output_path), mode=0o700, exist_ok=True)
    with open(output_path, "wb") as out:
        shutil.copyfileobj(source, out)


def unzip_file(archive_path: str, destination: str, strip_components: int = 0) -> int:
    """Extract a zip/jar archive; returns the number of files written."""
    written = 0
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                name = _strip(info.filename, strip_components)
                output_path = safe_output_path(name, destination) if name else None
                if output_path is None:
                    _skip(info.filename, archive_path)
                    continue
                with archive.open(info) as source:
                    _copy_entry(source, output_path)
                written += 1
    except CORRUPT_ARCHIVE_ERRORS as exc:
        raise DownloadError(f"{os.path.basename(archive_path)} is a corrupt zip archive: {exc}") from exc
    return written


def untar_file(archive_path: str, destination: str, strip_components: int = 0) -> int:
    """Extract a (possibly compressed) tar archive; returns the number of files written.

    Only regular files are extracted. Links and device nodes are skipped.
    """
    written = 0
    try:
        with tarfile.open(archive_path, mode="r:*") as archive:
            for member in archive:
                if not member.isfile():
                    _skip(member.name, archive_path)
                    continue
                name = _strip(member.name, strip_components)
                output_path = safe_output_path(name, destination) if name else None
                if output_path is None:
                    _skip(member.name, archive_path)
                    continue
                source = archive.extractfile(member)
                if source is None:
                    continue
                with source:
                    _copy_entry(source, output_path)
                written += 1
    except CORRUPT_ARCHIVE_ERRORS as exc:
        raise DownloadError(f"{os.path.basename(archive_path)} is a corrupt tar archive: {exc}") from exc
    return written


def unpack_archive(archive_path: str, destination: str, strip_components: int = 0) -> int:
    """Extract a zip or tar archive depending on its content."""
    if zipfile.is_zipfile(archive_path):
        return unzip_file(archive_path, destination, strip_components)
    if tarfile.is_tarfile(archive_path):
        return untar_file(archive_path, destination, strip_components)
    raise DownloadError(f"{os.path.basename(archive_path)} is neither a zip nor a tar archive")
