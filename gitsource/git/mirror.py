"""
Repository mirror cache.

One bare ``git clone --mirror`` is kept per repository URL. Mirrors are
created lazily, fetched to pick up new refs and never deleted here. Every
operation on a mirror happens while holding that mirror's lock, acquired
through ``MirrorCache.open``.
"""

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from gitsource.git.keys import MIRRORS_DIRNAME, make_temp_dir, mirror_dir_name
from gitsource.git.locks import path_lock
from gitsource.model.description import Description

logger = logging.getLogger(__name__)


class Mirror:
    """A repository mirror whose lock is held by the current caller."""

    def __init__(self, path: Path, url: str, runner):
        self.path = path
        self.url = url
        self.runner = runner

    def exists(self) -> bool:
        return self.path.exists()

    def ensure(self) -> Path:
        """Clone the mirror if it is missing, fetch it otherwise."""
        if not self.exists():
            self.clone()
        else:
            self.fetch()
        return self.path

    def ensure_present(self) -> Path:
        """Clone the mirror if it is missing, without fetching an existing one."""
        if not self.exists():
            self.clone()
        return self.path

    def clone(self) -> None:
        """
        Clone the remote into the mirror path.

        The clone lands in a temporary sibling directory and is renamed into
        place only once git succeeded, so a failed clone never leaves a
        directory that looks like a usable mirror.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = make_temp_dir(self.path)
        logger.info(f"Cloning {self.url} to mirror at {self.path}")
        try:
            self.runner.run(["clone", "--mirror", self.url, str(tmp)])
            tmp.rename(self.path)
        except Exception as e:
            logger.error(f"Failed to clone {self.url}: {e}")
            shutil.rmtree(tmp, ignore_errors=True)
            raise

    def fetch(self) -> None:
        logger.info(f"Fetching {self.url} into mirror at {self.path}")
        try:
            self.runner.run(["fetch"], working_dir=self.path)
        except Exception as e:
            logger.error(f"Failed to fetch {self.url}: {e}")
            raise


class MirrorCache:
    """Manages the ``cache/`` directory of repository mirrors."""

    def __init__(self, root: Path, runner):
        self.root = Path(root)
        self.runner = runner

    @property
    def mirrors_dir(self) -> Path:
        return self.root / MIRRORS_DIRNAME

    def mirror_path(self, name: str, description: Description) -> Path:
        """Path of the mirror for ``description``; stable across runs."""
        return self.mirrors_dir / mirror_dir_name(name, description.url)

    @contextmanager
    def open(self, name: str, description: Description) -> Iterator[Mirror]:
        """Lock the mirror of ``description`` and yield it."""
        path = self.mirror_path(name, description)
        with path_lock(path):
            yield Mirror(path, description.url, self.runner)

    def ensure_mirror(self, name: str, description: Description) -> Path:
        with self.open(name, description) as mirror:
            return mirror.ensure()
