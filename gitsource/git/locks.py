"""
Per-path locking for cache directories.

Each cache directory (a mirror or a snapshot) gets its own lock so that work
on one directory is serialized while work on different directories runs
concurrently. A process-wide ``threading.Lock`` serializes threads; a
``FileLock`` next to the directory serializes processes sharing the cache.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator

from filelock import FileLock

_path_locks: Dict[str, threading.Lock] = {}
_path_locks_lock = threading.Lock()


def _get_path_lock(key: str) -> threading.Lock:
    with _path_locks_lock:
        if key not in _path_locks:
            _path_locks[key] = threading.Lock()
        return _path_locks[key]


def lock_file_for(path: Path) -> Path:
    return path.with_name(f"{path.name}.lock")


@contextmanager
def path_lock(path: Path) -> Iterator[None]:
    """Hold the exclusive lock for ``path``, creating its parent if needed."""
    path = Path(path).absolute()
    with _get_path_lock(str(path)):
        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(lock_file_for(path))):
            yield
