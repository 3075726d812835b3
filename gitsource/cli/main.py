"""gitsource CLI"""

import click

from gitsource import __version__
from gitsource.cli.cache import cache
from gitsource.cli.packages import install, resolve, sync
from gitsource.cli.utils.logging import configure_logging


@click.group()
@click.version_option(__version__, prog_name="gitsource")
@click.option(
    "--debug/--no-debug",
    default=False,
    envvar="GITSOURCE_DEBUG",
    help="Show debug output, including every git command that runs.",
)
@click.pass_context
def cli(ctx, debug: bool):
    """
    Install packages from git repositories through a local cache.
    """
    ctx.ensure_object(dict)
    ctx.obj["DEBUG"] = debug
    configure_logging(debug)


cli.add_command(install)
cli.add_command(resolve)
cli.add_command(sync)
cli.add_command(cache)
