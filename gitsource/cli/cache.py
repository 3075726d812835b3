"""CLI commands for git cache management"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from gitsource.cli.utils.logging import logger
from gitsource.errors import GitSourceError
from gitsource.model.package import PackageId

from .options import (
    cache_dir_option,
    make_description,
    make_source,
    package_name_argument,
)


@click.group(name="cache")
def cache():
    """Inspect the git package cache."""
    pass


@cache.command("describe")
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable JSON.")
@cache_dir_option
def describe(as_json: bool, cache_dir: Optional[Path]):
    """List the mirrors and snapshots in the cache."""
    source = make_source(cache_dir)
    info = source.describe_cache()

    if as_json:
        click.echo(json.dumps(info, indent=2))
        return

    click.echo(f"Cache root: {source.root}")
    click.echo(f"Mirrors ({len(info['mirrors'])}):")
    for mirror in info["mirrors"]:
        click.echo(f"  {mirror['name']:<20} {mirror['url']} ({mirror['refs']} refs)")
    click.echo(f"Snapshots ({len(info['snapshots'])}):")
    for snapshot in info["snapshots"]:
        click.echo(f"  {snapshot['name']:<20} {snapshot['commit']}")


@cache.command("path")
@package_name_argument
@click.argument("url")
@click.option("--ref", default=None, help="Branch, tag or commit.")
@click.option("--resolved-ref", default=None, help="Pinned commit hash.")
@cache_dir_option
def path(
    name: str,
    url: str,
    ref: Optional[str],
    resolved_ref: Optional[str],
    cache_dir: Optional[Path],
):
    """Print where a package is (or would be) installed, without installing it."""
    description = make_description(url, ref, resolved_ref)

    source = make_source(cache_dir)
    try:
        directory = source.system_cache_directory(
            PackageId(name=name, description=description)
        )
    except GitSourceError as e:
        logger.error(f"Cannot locate {name}: {e}")
        sys.exit(1)

    click.echo(str(directory))
