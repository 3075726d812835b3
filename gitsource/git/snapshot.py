"""
Revision snapshot cache.

A snapshot is a working copy cloned from a mirror and checked out at one
commit. Its directory is named after the package and the commit, so once it
exists it is reused forever and never fetched or updated.
"""

import logging
import shutil
from pathlib import Path

from gitsource.git.keys import make_temp_dir, snapshot_dir_name
from gitsource.git.locks import path_lock
from gitsource.git.revision import DEFAULT_REF

logger = logging.getLogger(__name__)


class SnapshotCache:
    def __init__(self, root: Path, runner):
        self.root = Path(root)
        self.runner = runner

    def snapshot_path(self, name: str, commit: str) -> Path:
        return self.root / snapshot_dir_name(name, commit)

    def ensure_snapshot(
        self, mirror_path: Path, name: str, commit: str, ref: str
    ) -> Path:
        """
        Make sure the snapshot of ``name`` at ``commit`` exists.

        Args:
            mirror_path: Mirror to clone from
            name: Package name
            commit: Commit hash the snapshot is pinned to
            ref: Effective ref; ``HEAD`` skips the checkout since a fresh clone
                already sits on the default branch

        Returns:
            Path to the snapshot directory
        """
        path = self.snapshot_path(name, commit)
        if path.exists():
            logger.debug(f"Using cached snapshot {path}")
            return path

        with path_lock(path):
            # Another caller may have finished while we waited for the lock.
            if path.exists():
                logger.debug(f"Using cached snapshot {path}")
                return path
            self._create(mirror_path, path, commit, ref)

        return path

    def _create(self, mirror_path: Path, path: Path, commit: str, ref: str) -> None:
        tmp = make_temp_dir(path)
        logger.info(f"Creating snapshot {path.name} from {mirror_path}")
        try:
            self.runner.run(["clone", str(mirror_path), str(tmp)])
            if ref != DEFAULT_REF:
                self.runner.run(["checkout", commit], working_dir=tmp)
            tmp.rename(path)
        except Exception as e:
            logger.error(f"Failed to create snapshot {path.name}: {e}")
            shutil.rmtree(tmp, ignore_errors=True)
            raise
