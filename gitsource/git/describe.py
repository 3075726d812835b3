"""Inspection of the mirrors and snapshots stored in a cache root."""

import logging
from pathlib import Path
from typing import Dict, List

from dulwich import porcelain
from dulwich.errors import NotGitRepository

from gitsource.git.keys import MIRRORS_DIRNAME, TEMP_PREFIX

logger = logging.getLogger(__name__)


def _sha_to_hex(sha: bytes) -> str:
    if len(sha) == 20:
        return sha.hex()
    return sha.decode("ascii")


def _split_dir_name(dir_name: str) -> tuple:
    name, _, suffix = dir_name.rpartition("-")
    return name, suffix


def _cache_entries(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        entry
        for entry in directory.iterdir()
        if entry.is_dir()
        and not entry.name.startswith(TEMP_PREFIX)
        and entry.name != MIRRORS_DIRNAME
    )


def describe_mirrors(root: Path) -> List[Dict]:
    """
    Describe the repository mirrors under ``root/cache``.

    Returns:
        List of dictionaries with:
        - name: Package name the mirror was created for
        - path: Mirror directory
        - url: Remote URL recorded in the mirror's config
        - refs: Number of branches and tags in the mirror
    """
    results = []
    for path in _cache_entries(root / MIRRORS_DIRNAME):
        name, _ = _split_dir_name(path.name)
        try:
            with porcelain.open_repo_closing(str(path)) as repo:
                try:
                    url = repo.get_config().get((b"remote", b"origin"), b"url")
                    url = url.decode("utf-8")
                except KeyError:
                    url = "unknown"
                refs = [
                    ref
                    for ref in repo.get_refs()
                    if ref.startswith(b"refs/heads/") or ref.startswith(b"refs/tags/")
                ]
        except NotGitRepository as e:
            logger.debug(f"Skipping {path}: {e}")
            continue
        results.append({"name": name, "path": str(path), "url": url, "refs": len(refs)})
    return results


def describe_snapshots(root: Path) -> List[Dict]:
    """
    Describe the revision snapshots directly under ``root``.

    Returns:
        List of dictionaries with name, path and the checked out commit.
    """
    results = []
    for path in _cache_entries(root):
        name, commit = _split_dir_name(path.name)
        try:
            with porcelain.open_repo_closing(str(path)) as repo:
                head = _sha_to_hex(repo.head())
        except NotGitRepository as e:
            logger.debug(f"Skipping {path}: {e}")
            continue
        if not head.startswith(commit):
            logger.warning(f"Snapshot {path.name} is checked out at {head}")
        results.append({"name": name, "path": str(path), "commit": head})
    return results


def describe_cache(root: Path) -> Dict[str, List[Dict]]:
    return {"mirrors": describe_mirrors(root), "snapshots": describe_snapshots(root)}
