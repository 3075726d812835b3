"""
Git operations for the package source.

Two-tier cache:
    - Mirrors: one bare ``git clone --mirror`` per repository URL under
      ``<root>/cache/<name>-<sha1(url)>``, fetched to pick up new refs.
    - Snapshots: one checked-out working copy per resolved commit under
      ``<root>/<name>-<commit>``, cloned from the mirror and never updated.

Only the leaf modules are re-exported here; ``mirror``, ``revision`` and
``snapshot`` depend on ``gitsource.model`` and are imported directly.
"""

from .keys import mirror_dir_name, normalize_url, snapshot_dir_name, url_hash
from .locks import path_lock
from .runner import GitRunner

__all__ = [
    "GitRunner",
    "mirror_dir_name",
    "normalize_url",
    "path_lock",
    "snapshot_dir_name",
    "url_hash",
]
