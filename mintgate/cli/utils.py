"""CLI utilities for dual-mode output (human-friendly + machine-readable).

- Human mode (default): Rich formatting with colors and tables
- Machine mode (--json): Structured JSON output for scripts

Example:
    from ..cli.utils import Output, ExitCode

    @app.command()
    def my_command():
        out = Output(console=console, json_mode=get_json_mode())
        out.success("Minted token", token_id="417")
        out.table("Counts", ["Phase", "Mints"], [["presale", "1"]])
        raise typer.Exit(out.finish())
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, PrivateAttr, ConfigDict
from rich.console import Console
from rich.table import Table

from ..sale.errors import (
    AlreadyInitialized,
    InsufficientFunds,
    NotEligible,
    NotInitialized,
    SaleError,
    SaleNotStarted,
    Unauthorized,
)


class ExitCode:
    """Standardized exit codes for CLI commands.

        0 = Success
        1 = Invalid input (bad account id, malformed option)
        2 = Not initialized / already initialized
        3 = File not found
        4 = Unauthorized (caller is not the owner)
        5 = Sale closed for caller (not started, not eligible)
        6 = Insufficient deposit
        7 = Supply error (cap reached, pool exhausted, token exists)
    """

    SUCCESS = 0
    VALIDATION_ERROR = 1
    STATE_ERROR = 2
    FILE_NOT_FOUND = 3
    UNAUTHORIZED = 4
    SALE_CLOSED = 5
    INSUFFICIENT_FUNDS = 6
    SUPPLY_ERROR = 7


def exit_code_for(error: SaleError) -> int:
    """Map a sale failure to its CLI exit code."""
    if isinstance(error, Unauthorized):
        return ExitCode.UNAUTHORIZED
    if isinstance(error, (SaleNotStarted, NotEligible)):
        return ExitCode.SALE_CLOSED
    if isinstance(error, InsufficientFunds):
        return ExitCode.INSUFFICIENT_FUNDS
    if isinstance(error, ValueError):
        return ExitCode.VALIDATION_ERROR
    if isinstance(error, (NotInitialized, AlreadyInitialized)):
        return ExitCode.STATE_ERROR
    return ExitCode.SUPPLY_ERROR


class Output(BaseModel):
    """Dual-mode output handler for CLI commands.

    In human mode: Uses Rich for pretty terminal output with colors and formatting.
    In JSON mode: Collects structured data and outputs JSON at the end.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    console: Console
    json_mode: bool = False

    _data: dict[str, Any] = PrivateAttr()
    _exit_code: int = PrivateAttr(default=ExitCode.SUCCESS)

    def model_post_init(self, __context: Any) -> None:
        self._data = {
            "status": "success",
            "warnings": [],
            "errors": [],
        }

    def success(self, message: str, **data: Any) -> None:
        """Output a success message with optional data."""
        if self.json_mode:
            self._data.update(data)
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str, *, suggestion: str | None = None) -> None:
        """Output a warning message."""
        if self.json_mode:
            warning_obj: dict[str, Any] = {"message": message}
            if suggestion:
                warning_obj["suggestion"] = suggestion
            self._data["warnings"].append(warning_obj)
        else:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
            if suggestion:
                self.console.print(f"  [dim]→ {suggestion}[/dim]")

    def error(
        self,
        message: str,
        *,
        code: str | None = None,
        suggestion: str | None = None,
        exit_code: int = ExitCode.VALIDATION_ERROR,
    ) -> None:
        """Output an error message and set exit code."""
        self._exit_code = exit_code
        self._data["status"] = "error"

        if self.json_mode:
            error_obj: dict[str, Any] = {"message": message}
            if code:
                error_obj["code"] = code
            if suggestion:
                error_obj["suggestion"] = suggestion
            self._data["errors"].append(error_obj)
        else:
            label = f"{code}: " if code else ""
            self.console.print(f"[red]✗[/red] {label}{message}")
            if suggestion:
                self.console.print(f"  [dim]→ {suggestion}[/dim]")

    def sale_error(self, error: SaleError, *, suggestion: str | None = None) -> None:
        """Report a sale failure with its code and mapped exit code."""
        self.error(
            str(error),
            code=error.code,
            suggestion=suggestion,
            exit_code=exit_code_for(error),
        )

    def text(self, message: str) -> None:
        """Output plain text (human mode only)."""
        if not self.json_mode:
            self.console.print(message)

    def table(
        self,
        title: str,
        columns: list[str],
        rows: list[list[str]],
        *,
        data_key: str | None = None,
    ) -> None:
        """Output a formatted table.

        Args:
            title: Table title
            columns: Column headers
            rows: Table rows (list of lists)
            data_key: Key to use in JSON output (defaults to snake_case of title)
        """
        key = data_key or title.lower().replace(" ", "_")

        if self.json_mode:
            self._data[key] = [dict(zip(columns, row)) for row in rows]
        else:
            table = Table(title=title, show_header=True, header_style="bold")
            for i, col in enumerate(columns):
                justify = "right" if i > 0 else "left"
                table.add_column(col, justify=justify)
            for row in rows:
                table.add_row(*row)
            self.console.print(table)

    def set_data(self, key: str, value: Any) -> None:
        """Set arbitrary data in JSON output."""
        self._data[key] = value

    def finish(self) -> int:
        """Finalize output and return exit code.

        In JSON mode, prints the accumulated data as JSON to stdout.
        """
        if self.json_mode:
            self._data["exit_code"] = self._exit_code
            print(json.dumps(self._data, indent=2, default=str))

        return self._exit_code


def read_account_file(path: Path) -> list[str]:
    """Read account ids from a YAML list or a newline-separated text file.

    Blank lines and ``#`` comments are ignored in text files.
    """
    text = path.read_text()
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or []
        if isinstance(data, dict):
            data = data.get("accounts", [])
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list of account ids")
        return [str(item).strip() for item in data]

    accounts = []
    for line in text.splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            accounts.append(line)
    return accounts


def format_amount(yocto: int, decimals: int = 24) -> str:
    """Format a yocto amount as whole coins, trimming trailing zeros."""
    whole, frac = divmod(yocto, 10**decimals)
    if frac == 0:
        return str(whole)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_str}"
