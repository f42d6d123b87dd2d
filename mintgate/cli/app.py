"""Core CLI app definition and global state."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

app = typer.Typer(
    name="mintgate",
    help="Run a phased, allowlist-gated mint from the command line.",
    no_args_is_help=True,
)

console = Console()

# Global state (set by callback)
_json_mode = False
_db_path: Path | None = None


def get_json_mode() -> bool:
    """Get current JSON mode state."""
    return _json_mode


def get_db_path() -> Path:
    """Get the sale database path from --db or config."""
    if _db_path is not None:
        return _db_path
    from ..config import get_config

    return get_config().db_path_resolved


def open_contract(at: int | None = None):
    """Open the sale store and wrap it in a contract.

    Args:
        at: Pin the clock to this Unix epoch millisecond instead of wall time.
    """
    from ..sale import FrozenClock, SaleContract
    from ..storage import open_sale_store

    clock = FrozenClock.at_ms(at) if at is not None else None
    return SaleContract(open_sale_store(get_db_path()), clock=clock)


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging for CLI commands."""
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )

    for name in ["mintgate.sale", "mintgate.events"]:
        logging.getLogger(name).setLevel(level)


def _version_callback(value: bool) -> None:
    if value:
        from .. import __version__

        print(f"mintgate {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output machine-readable JSON instead of human-friendly text",
            is_eager=True,
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
    db: Annotated[
        Path | None,
        typer.Option(
            "--db",
            help="Sale database path (defaults to defaults.db_path from config)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log sale activity"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Log debug detail"),
    ] = False,
):
    """Mintgate: phased, allowlist-gated minting.

    Use --json for machine-readable output suitable for scripting.
    Use --db to point at a specific sale database.
    """
    global _json_mode, _db_path
    _json_mode = json_output
    _db_path = db
    setup_logging(verbose=verbose, debug=debug)


# Import commands to register them with the app
from .commands import (  # noqa: E402, F401
    init_cmd,
    mint,
    allowlist,
    status,
    config_cmd,
)
