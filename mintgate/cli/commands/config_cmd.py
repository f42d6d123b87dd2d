"""Config command for viewing and managing mintgate configuration."""

import json

import typer

from ..app import app, console
from ..utils import format_amount
from ...config import (
    get_config,
    reset_config,
    CONFIG_FILE,
    INT_FIELDS,
)


VALID_KEYS = INT_FIELDS | {
    "royalty.account",
    "token.title_prefix",
    "token.description",
    "token.media_base_url",
    "token.media_extension",
    "token.media_hash",
    "token.reference_base_url",
    "token.reference_hash",
    "token.class_tiers",
    "defaults.db_path",
}

PRICE_FIELDS = {"privileged_price", "standard_price", "public_price"}


@app.command("config")
def config_command(
    action: str = typer.Argument(
        ...,
        help="Action: show, set, reset",
    ),
    key: str | None = typer.Argument(
        None,
        help="Config key (e.g. sale.public_start, royalty.account)",
    ),
    value: str | None = typer.Argument(
        None,
        help="Value to set",
    ),
):
    """View or modify mintgate configuration.

    Examples:
        mintgate config show
        mintgate config set sale.presale_start 1700000000000
        mintgate config set sale.privileged_price 7000000000000000000000000
        mintgate config set token.class_tiers '{"Rare": 66, "Common": 666}'
        mintgate config reset
    """
    if action == "show":
        _show_config()
    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage:[/red] mintgate config set <key> <value>")
            console.print()
            console.print("Available keys:")
            for k in sorted(VALID_KEYS):
                console.print(f"  {k}")
            raise typer.Exit(1)
        _set_config(key, value)
    elif action == "reset":
        _reset_config()
    else:
        console.print(f"[red]Unknown action:[/red] {action}")
        console.print("Valid actions: show, set, reset")
        raise typer.Exit(1)


def _show_config():
    """Display current resolved configuration."""
    config = get_config()

    console.print()
    console.print("[bold]Mintgate Configuration[/bold]")
    console.print("─" * 40)

    console.print()
    console.print("[bold cyan]Sale[/bold cyan] (thresholds in epoch ms)")
    console.print(f"  presale_start    = {config.sale.presale_start}")
    console.print(f"  public_start     = {config.sale.public_start}")
    console.print(f"  cap              = {config.sale.cap}")
    for name in sorted(PRICE_FIELDS):
        price = getattr(config.sale, name)
        console.print(f"  {name:<16} = {price} [dim]({format_amount(price)})[/dim]")

    console.print()
    console.print("[bold cyan]Royalty[/bold cyan]")
    console.print(f"  account      = {config.royalty.account}")
    console.print(f"  basis_points = {config.royalty.basis_points}")

    console.print()
    console.print("[bold cyan]Token[/bold cyan]")
    console.print(f"  title_prefix       = {config.token.title_prefix}")
    console.print(f"  media_base_url     = {config.token.media_base_url or '[dim](none)[/dim]'}")
    console.print(f"  media_hash         = {config.token.media_hash or '[dim](none)[/dim]'}")
    console.print(
        f"  reference_base_url = {config.token.reference_base_url or '[dim](none)[/dim]'}"
    )
    console.print(
        f"  reference_hash     = {config.token.reference_hash or '[dim](none)[/dim]'}"
    )
    console.print(f"  class_tiers        = {config.token.class_tiers or '[dim](none)[/dim]'}")

    console.print()
    console.print("[bold cyan]Defaults[/bold cyan]")
    console.print(f"  db_path = {config.defaults.db_path}")

    console.print()
    if CONFIG_FILE.exists():
        console.print(f"Config file: {CONFIG_FILE}")
    else:
        console.print(f"Config file: [dim]not created yet[/dim] ({CONFIG_FILE})")
    console.print()


def _set_config(key: str, value: str):
    """Set a config value and save."""
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key:[/red] {key}")
        console.print()
        console.print("Available keys:")
        for k in sorted(VALID_KEYS):
            console.print(f"  {k}")
        raise typer.Exit(1)

    config = get_config()
    zone, field_name = key.split(".", 1)
    target = getattr(config, zone)

    if key in INT_FIELDS:
        try:
            setattr(target, field_name, int(value))
        except ValueError:
            console.print(f"[red]Invalid integer value:[/red] {value}")
            raise typer.Exit(1)
    elif key == "token.class_tiers":
        try:
            tiers = json.loads(value)
        except json.JSONDecodeError:
            console.print(f"[red]Invalid JSON object:[/red] {value}")
            raise typer.Exit(1)
        if not isinstance(tiers, dict) or not all(
            isinstance(v, int) for v in tiers.values()
        ):
            console.print("[red]class_tiers must map labels to integer bounds[/red]")
            raise typer.Exit(1)
        setattr(target, field_name, tiers)
    else:
        setattr(target, field_name, value)

    config.save()
    reset_config()  # Clear cached singleton so next get_config() reloads

    console.print(f"[green]✓[/green] Set {key} = {value}")
    console.print(f"  Saved to {CONFIG_FILE}")


def _reset_config():
    """Reset config to defaults."""
    if CONFIG_FILE.exists():
        CONFIG_FILE.unlink()
        reset_config()
        console.print("[green]✓[/green] Config reset to defaults")
        console.print(f"  Removed {CONFIG_FILE}")
    else:
        console.print("Config already at defaults (no config file exists)")
