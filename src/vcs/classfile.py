"""Infer the JVM release an artifact targets from its class-file headers.

The layout of ``*.class`` files is documented in chapter 4.1 of the JVM
specification: a ``u4`` magic number ``0xCAFEBABE`` followed by ``u2``
minor and ``u2`` major versions, all big-endian.
"""
from __future__ import annotations

import logging
import os
import struct
import zipfile
from typing import NamedTuple, Optional, Tuple

from constants import Constants
from common.errors import DownloadError
from .archive import CORRUPT_ARCHIVE_ERRORS

logger = logging.getLogger(__name__)

CLASS_FILE_MAGIC = 0xCAFEBABE
CLASS_FILE_SUFFIX = ".class"
_HEADER = struct.Struct(">IHH")


class StableReleasePolicy(NamedTuple):
    """Rounding table from any JVM release to a long-term-support release.

    ``thresholds`` is ordered ascending; each ``(upper, stable)`` pair maps
    releases ``<= upper`` (and above the previous upper bound) to ``stable``.
    Releases above the last upper bound pass through unchanged. Changing the
    table changes generated ``lsif-java.json`` files, and therefore commit
    hashes, so new tables get a new revision.
    """
    revision: int
    thresholds: Tuple[Tuple[int, int], ...]

    @property
    def oldest_stable(self) -> int:
        return self.thresholds[0][1]


STABLE_JVM_RELEASE_POLICIES = {
    1: StableReleasePolicy(revision=1, thresholds=((8, 8), (11, 11), (16, 16))),
}
STABLE_JVM_RELEASE_POLICY = STABLE_JVM_RELEASE_POLICIES[1]


def round_jvm_version(release: int, policy: StableReleasePolicy = STABLE_JVM_RELEASE_POLICY) -> int:
    """Round ``release`` up to the nearest stable release in ``policy``.

    For example, a library compiled for Java 10 is indexed with Java 11.
    """
    for upper, stable in policy.thresholds:
        if release <= upper:
            return stable
    # Release from the future: do not round.
    return release


def read_class_header(data: bytes) -> Optional[Tuple[int, int]]:
    """Return ``(minor, major)`` when ``data`` starts with a class-file header."""
    if len(data) < _HEADER.size:
        return None
    magic, minor, major = _HEADER.unpack(data[:_HEADER.size])
    if magic != CLASS_FILE_MAGIC:
        return None
    return minor, major


def class_file_major_version(jar_path: str) -> Optional[int]:
    """Return the major version of the first valid ``*.class`` entry of a jar.

    Entries with the right suffix but no class-file magic are skipped. None
    means the jar holds no class files at all; some artifacts only ship
    resources (HTML, CSS, images).

    Raises:
        DownloadError: the jar is not a readable zip archive.
    """
    try:
        with zipfile.ZipFile(jar_path) as jar:
            for info in jar.infolist():
                if not info.filename.endswith(CLASS_FILE_SUFFIX):
                    continue
                with jar.open(info) as entry:
                    header = read_class_header(entry.read(_HEADER.size))
                if header is None:
                    logger.debug("%s in %s is not a class file", info.filename, jar_path)
                    continue
                return header[1]
    except CORRUPT_ARCHIVE_ERRORS as exc:
        raise DownloadError(f"{os.path.basename(jar_path)} is not a readable jar: {exc}") from exc
    return None


def jvm_release_from_major_version(major: int) -> int:
    """Java 1.1 has major version 45, so release = major - 44."""
    return major - Constants.JVM_MAJOR_VERSION_0


def infer_jvm_version(major: Optional[int], policy: StableReleasePolicy = STABLE_JVM_RELEASE_POLICY) -> str:
    """Stable JVM release (as a string) for a class-file major version.

    Without class files any release works, so the oldest stable one is used.
    """
    if major is None:
        return str(policy.oldest_stable)
    return str(round_jvm_version(jvm_release_from_major_version(major), policy))


def infer_jvm_version_from_jar(jar_path: Optional[str], policy: StableReleasePolicy = STABLE_JVM_RELEASE_POLICY) -> str:
    """Stable JVM release for the bytecode jar at ``jar_path`` (None: no jar)."""
    if jar_path is None:
        return str(policy.oldest_stable)
    return infer_jvm_version(class_file_major_version(jar_path), policy)
