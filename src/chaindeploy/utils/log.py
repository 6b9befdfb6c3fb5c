"""Logging setup and error reporting on the rich stderr console."""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

logger = logging.getLogger("chaindeploy")


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route the package loggers to a rich handler on stderr.

    Args:
        verbose: Show debug messages
        quiet: Only show errors
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=verbose, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)


class ConsoleErrorReporter:
    """Error sink printing deployment failures to stderr."""

    def report(self, error: Exception) -> None:
        console.print(f"[red]Error:[/red] {error}")
