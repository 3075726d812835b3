"""Options shared by several commands."""

from pathlib import Path
from typing import Optional

import click

from gitsource.git.keys import check_package_name
from gitsource.source import GitSource

cache_dir_option = click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar="GITSOURCE_CACHE_DIR",
    help="Root of the git cache (defaults to the configured cache directory).",
)


def _check_name(ctx, param, value: str) -> str:
    try:
        return check_package_name(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


package_name_argument = click.argument("name", callback=_check_name)


def make_source(cache_dir: Optional[Path]) -> GitSource:
    return GitSource(cache_root=cache_dir)


def make_description(
    url: str, ref: Optional[str] = None, resolved_ref: Optional[str] = None
):
    """Build the raw description the command line arguments stand for."""
    if ref is None and resolved_ref is None:
        return url
    description = {"url": url}
    if ref is not None:
        description["ref"] = ref
    if resolved_ref is not None:
        description["resolved-ref"] = resolved_ref
    return description
