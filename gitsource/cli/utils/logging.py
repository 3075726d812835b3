"""Console output for the ``gitsource`` logger hierarchy."""

import logging

import click

logger = logging.getLogger("gitsource")

CONSOLE_FORMAT = "%(message)s"
DEBUG_FORMAT = "%(levelname).1s %(name)s: %(message)s"


class ClickEchoHandler(logging.Handler):
    """Writes records with ``click.echo`` so they follow the active stdout."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record))
        except Exception:
            self.handleError(record)


def configure_logging(debug: bool = False) -> logging.Handler:
    """
    Route ``gitsource`` log records to the console.

    In debug mode DEBUG records are shown too, prefixed with their level and
    logger name. Calling this again only updates level and format.
    """
    handler = next(
        (h for h in logger.handlers if isinstance(h, ClickEchoHandler)), None
    )
    if handler is None:
        handler = ClickEchoHandler()
        logger.addHandler(handler)

    handler.setFormatter(logging.Formatter(DEBUG_FORMAT if debug else CONSOLE_FORMAT))
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return handler
