"""
A package source that installs packages from git repositories.

The git cache root is laid out as follows:

    <root>/
    ├── pkg-<commit>/                 # snapshot: working copy at one commit
    ├── pkg-<other commit>/
    └── cache/
        └── pkg-<sha1(url)>/          # mirror: bare clone of the repository

Snapshots are what installed packages point at. Each one is cloned from the
mirror of its repository, so the network is only touched when a mirror is
created or fetched.

Usage:
    source = GitSource()
    package_id = PackageId(name="pkg", description={"url": url, "ref": "main"})

    locked_id = source.resolve_id(package_id)   # pins resolved-ref
    package = source.install(locked_id)         # package.root is the snapshot
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from gitsource.config import get_cache_root
from gitsource.errors import RevisionNotFoundError, ToolMissingError
from gitsource.git.describe import describe_cache
from gitsource.git.mirror import Mirror, MirrorCache
from gitsource.git.revision import effective_ref, has_commit, resolve_revision
from gitsource.git.runner import GitRunner
from gitsource.git.snapshot import SnapshotCache
from gitsource.model.description import (
    Description,
    GitDescription,
    descriptions_equal,
    pin,
    validate_description,
)
from gitsource.model.package import GIT_SOURCE_NAME, Package, PackageId

logger = logging.getLogger(__name__)


class GitSource:
    """Installs packages from git repositories into the system cache."""

    name = GIT_SOURCE_NAME
    should_cache = True

    def __init__(self, cache_root: Optional[Path] = None, runner=None):
        """
        Args:
            cache_root: Root of the git cache (defaults to the configured one)
            runner: Git command runner (defaults to ``GitRunner``)
        """
        self.root = Path(cache_root) if cache_root is not None else get_cache_root()
        self.runner = runner if runner is not None else GitRunner()
        self.mirrors = MirrorCache(self.root, self.runner)
        self.snapshots = SnapshotCache(self.root, self.runner)

    def install(self, package_id: PackageId) -> Package:
        """
        Install ``package_id`` into the system cache and return it.

        The mirror is cloned or fetched, the effective ref resolved and the
        snapshot for the resulting commit created if it does not exist yet.
        Pinned ids whose snapshot already exists never touch the mirror.

        Raises:
            ToolMissingError: if git is not installed
            FormatError: if the description is malformed
            VcsCommandError: if a clone, fetch or checkout fails
            RevisionNotFoundError: if the ref does not exist upstream
        """
        description = package_id.parsed_description()
        self._check_git(package_id, description)

        match description:
            case GitDescription(resolved_ref=str() as pinned):
                path = self.snapshots.snapshot_path(package_id.name, pinned)
                if path.exists():
                    logger.debug(f"{package_id.name} is pinned and cached at {path}")
                    return Package(name=package_id.name, root=path, source=self.name)

        self.mirrors.mirrors_dir.mkdir(parents=True, exist_ok=True)
        with self.mirrors.open(package_id.name, description) as mirror:
            commit = self._commit_for(mirror, description)
            # Snapshots are cloned under the mirror lock; no fetch runs meanwhile.
            path = self.snapshots.ensure_snapshot(
                mirror.path, package_id.name, commit, effective_ref(description)
            )

        logger.info(f"Installed {package_id.name} ({description.url}@{commit[:7]})")
        return Package(name=package_id.name, root=path, source=self.name)

    def resolve_id(self, package_id: PackageId, refresh: bool = False) -> PackageId:
        """
        Attach the commit ``package_id`` resolves to as its ``resolved-ref``.

        Args:
            package_id: Package to resolve
            refresh: Ignore an existing ``resolved-ref`` and resolve the
                requested ref again against a freshly fetched mirror

        Returns:
            A new PackageId; ``url`` and ``ref`` are unchanged
        """
        description = package_id.parsed_description()
        if refresh and isinstance(description, GitDescription):
            description = GitDescription(url=description.url, ref=description.ref)

        match description:
            case GitDescription(resolved_ref=str() as commit):
                logger.debug(f"{package_id.name} is already pinned to {commit}")
            case _:
                self._check_git(package_id, description)
                with self.mirrors.open(package_id.name, description) as mirror:
                    commit = self._commit_for(mirror, description)

        return package_id.model_copy(
            update={"description": pin(description, commit).to_raw()}
        )

    def system_cache_directory(self, package_id: PackageId) -> Path:
        """
        Return where ``install`` places the snapshot of ``package_id``.

        Pinned ids are answered without any I/O. Unpinned ids are resolved
        against the existing mirror, which is read but never fetched.
        """
        description = package_id.parsed_description()
        mirror_path = self.mirrors.mirror_path(package_id.name, description)
        commit = resolve_revision(self.runner, mirror_path, description)
        return self.snapshots.snapshot_path(package_id.name, commit)

    cache_directory_for = system_cache_directory

    def validate_description(self, description: Any, from_lock_file: bool = False):
        validate_description(description, from_lock_file=from_lock_file)

    def descriptions_equal(self, description1: Any, description2: Any) -> bool:
        return descriptions_equal(description1, description2)

    def describe_cache(self) -> Dict[str, List[Dict]]:
        return describe_cache(self.root)

    def _check_git(self, package_id: PackageId, description: Description) -> None:
        if not self.runner.is_available():
            raise ToolMissingError(
                f"Cannot install '{package_id.name}' from Git ({description.url}).\n"
                "Please ensure Git is correctly installed."
            )

    def _commit_for(self, mirror: Mirror, description: Description) -> str:
        """Bring the mirror up to date as needed and return the target commit."""
        match description:
            case GitDescription(resolved_ref=str() as commit):
                mirror.ensure_present()
                if not has_commit(self.runner, mirror.path, commit):
                    logger.info(
                        f"Pinned commit {commit} is not in the mirror, "
                        f"fetching {description.url}"
                    )
                    mirror.fetch()
                    if not has_commit(self.runner, mirror.path, commit):
                        raise RevisionNotFoundError(commit, description.url)
                return commit
            case _:
                mirror.ensure()
                return resolve_revision(self.runner, mirror.path, description)
