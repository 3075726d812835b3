"""
Cache key derivation for mirrors and snapshots.

Every directory name in the cache is computed here so the layout stays a pure
function of its inputs:

    <root>/<name>-<commit>                 revision snapshots
    <root>/cache/<name>-<sha1(url)>        repository mirrors

The package name only makes the directory human-readable; uniqueness comes
from the sha1 of the full normalized URL (never a prefix of it) and from the
full commit hash.
"""

import hashlib
import os
import uuid
from pathlib import Path

MIRRORS_DIRNAME = "cache"
TEMP_PREFIX = ".tmp-"

_SEPARATORS = {sep for sep in ("/", "\\", os.sep, os.altsep) if sep}


def check_package_name(name: str) -> str:
    """
    Return ``name`` if it can be used as one directory level of the cache.

    Raises:
        ValueError: if the name is empty, is ``.`` or ``..``, or contains a
            path separator
    """
    if not name or not name.strip():
        raise ValueError("Package name must be a non-empty string")
    if name in (".", "..") or any(sep in name for sep in _SEPARATORS):
        raise ValueError(
            f"Invalid package name '{name}': path separators, '.' and '..' "
            "are not allowed"
        )
    return name


def normalize_url(url: str) -> str:
    """
    Normalize a repository URL for hashing and comparison.

    Only surrounding whitespace and trailing slashes are removed. Anything more
    aggressive (dropping ``.git``, lowercasing hosts) could make two distinct
    remotes share a mirror.
    """
    return url.strip().rstrip("/")


def url_hash(url: str) -> str:
    return hashlib.sha1(normalize_url(url).encode("utf-8")).hexdigest()


def mirror_dir_name(name: str, url: str) -> str:
    check_package_name(name)
    return f"{name}-{url_hash(url)}"


def snapshot_dir_name(name: str, commit: str) -> str:
    check_package_name(name)
    if not commit:
        raise ValueError("A commit hash is required to name a snapshot")
    return f"{name}-{commit}"


def make_temp_dir(final: Path) -> Path:
    """
    Create an empty sibling of ``final`` to build it in before renaming.

    Created with ``mkdir`` so the result carries the usual umask permissions.
    """
    tmp = final.parent / f"{TEMP_PREFIX}{final.name}-{uuid.uuid4().hex[:8]}"
    tmp.mkdir()
    return tmp
