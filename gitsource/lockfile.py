"""
Reading and writing lock files.

A lock file records the pinned description of every git dependency so later
installs can skip resolution entirely:

    packages:
      pkg:
        source: git
        version: 1.0.0
        description:
          url: https://github.com/user/pkg.git
          ref: main
          resolved-ref: 3f2c...
"""

import logging
from pathlib import Path
from typing import Dict, Iterable

import yaml

from gitsource.errors import FormatError
from gitsource.git.keys import check_package_name
from gitsource.model.description import validate_description
from gitsource.model.package import GIT_SOURCE_NAME, PackageId

logger = logging.getLogger(__name__)


def read_lock(path: Path) -> Dict[str, PackageId]:
    """
    Read the git packages recorded in the lock file at ``path``.

    Returns:
        Mapping of package name to PackageId; empty if the file does not exist

    Raises:
        FormatError: if the file is not a valid lock file
    """
    path = Path(path)
    if not path.exists():
        logger.debug(f"No lock file at {path}")
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise FormatError(f"Could not parse lock file {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("packages", {}), dict):
        raise FormatError(f"Lock file {path} must contain a 'packages' mapping.")

    ids = {}
    for name, entry in (data.get("packages") or {}).items():
        if not isinstance(entry, dict) or "description" not in entry:
            raise FormatError(f"Lock entry for '{name}' has no description.")
        source = entry.get("source", GIT_SOURCE_NAME)
        if source != GIT_SOURCE_NAME:
            logger.debug(f"Skipping '{name}' from source '{source}'")
            continue
        try:
            check_package_name(str(name))
            validate_description(entry["description"], from_lock_file=True)
        except ValueError as e:
            raise FormatError(f"Invalid lock entry for '{name}': {e}") from e
        version = entry.get("version")
        ids[name] = PackageId(
            name=str(name),
            version=str(version) if version is not None else None,
            description=entry["description"],
        )
    return ids


def write_lock(path: Path, package_ids: Iterable[PackageId]) -> None:
    """Write ``package_ids`` to the lock file at ``path``, sorted by name."""
    packages = {}
    for package_id in sorted(package_ids, key=lambda p: p.name):
        entry = {"source": GIT_SOURCE_NAME}
        if package_id.version is not None:
            entry["version"] = package_id.version
        entry["description"] = package_id.description
        packages[package_id.name] = entry

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(
            {"packages": packages}, default_flow_style=False, sort_keys=False
        ),
        encoding="utf-8",
    )
    logger.info(f"Wrote {len(packages)} packages to {path}")
