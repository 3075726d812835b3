"""cli commands to install and resolve git packages"""

import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional

import click

from gitsource.cli.utils.logging import logger
from gitsource.errors import GitSourceError
from gitsource.lockfile import read_lock, write_lock
from gitsource.model.package import PackageId

from .options import (
    cache_dir_option,
    make_description,
    make_source,
    package_name_argument,
)


@click.command("install")
@package_name_argument
@click.argument("url")
@click.option("--ref", default=None, help="Branch, tag or commit to install.")
@click.option(
    "--resolved-ref",
    default=None,
    help="Pinned commit hash; skips resolution against the mirror.",
)
@cache_dir_option
def install(
    name: str,
    url: str,
    ref: Optional[str],
    resolved_ref: Optional[str],
    cache_dir: Optional[Path],
):
    """Install a package from a git repository into the cache.

    Prints the path of the installed snapshot.

    Example:

      gitsource install pkg https://github.com/user/pkg.git --ref main
    """
    description = make_description(url, ref, resolved_ref)

    source = make_source(cache_dir)
    try:
        package = source.install(PackageId(name=name, description=description))
    except GitSourceError as e:
        logger.error(f"Failed to install {name}: {e}")
        sys.exit(1)

    click.echo(str(package.root))


@click.command("resolve")
@package_name_argument
@click.argument("url")
@click.option("--ref", default=None, help="Branch, tag or commit to resolve.")
@click.option(
    "--lock",
    "lock_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Lock file to record the pinned package in.",
)
@cache_dir_option
def resolve(
    name: str,
    url: str,
    ref: Optional[str],
    lock_path: Optional[Path],
    cache_dir: Optional[Path],
):
    """Resolve a git dependency to a commit and print it.

    With --lock, the pinned description is stored in the lock file, replacing
    any previous entry for the package.
    """
    source = make_source(cache_dir)
    package_id = PackageId(name=name, description=make_description(url, ref))
    try:
        locked = source.resolve_id(package_id)
        locked_ids = read_lock(lock_path) if lock_path is not None else {}
    except GitSourceError as e:
        logger.error(f"Failed to resolve {name}: {e}")
        sys.exit(1)

    if lock_path is not None:
        locked_ids[name] = locked
        write_lock(lock_path, locked_ids.values())

    click.echo(locked.description["resolved-ref"])


@click.command("sync")
@click.argument(
    "lock_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=4,
    show_default=True,
    help="Number of packages installed concurrently.",
)
@cache_dir_option
def sync(lock_path: Path, jobs: int, cache_dir: Optional[Path]):
    """Install every package pinned in a lock file.

    Example:

      gitsource sync gitsource.lock
    """
    source = make_source(cache_dir)
    try:
        locked_ids = read_lock(lock_path)
    except GitSourceError as e:
        logger.error(f"Failed to read {lock_path}: {e}")
        sys.exit(1)

    if not locked_ids:
        logger.info("No git packages found in lock file")
        return

    failed = []
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = {
            executor.submit(source.install, package_id): name
            for name, package_id in locked_ids.items()
        }
        for future in as_completed(futures):
            name = futures[future]
            try:
                package = future.result()
                logger.info(f"  {name}: {package.root}")
            except GitSourceError as e:
                logger.error(f"Failed to install {name}: {e}")
                failed.append(name)

    logger.info(f"Installed {len(locked_ids) - len(failed)}/{len(locked_ids)} packages")
    if failed:
        sys.exit(1)
