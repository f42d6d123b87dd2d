"""Allowlist command for managing privileged / standard tiers."""

from pathlib import Path

import typer

from ..app import app, console, get_json_mode, open_contract
from ..utils import ExitCode, Output, read_account_file
from ...core.models import AllowlistTier
from ...sale import SaleError

VALID_ACTIONS = ("add", "remove", "show")


@app.command("allowlist")
def allowlist_command(
    action: str = typer.Argument(..., help="Action: add, remove, show"),
    tier: AllowlistTier = typer.Argument(..., help="Allowlist tier"),
    accounts: list[str] | None = typer.Argument(None, help="Account ids"),
    caller: str | None = typer.Option(
        None, "--caller", "-c", help="Owner account (required for add/remove)"
    ),
    file: Path | None = typer.Option(
        None, "--file", "-f", help="YAML list or newline-separated file of account ids"
    ),
):
    """View or modify an allowlist tier.

    Examples:
        mintgate allowlist show privileged
        mintgate allowlist add privileged alice.near bob.near --caller owner.near
        mintgate allowlist add standard --file accounts.yaml --caller owner.near
        mintgate allowlist remove standard carol.near --caller owner.near
    """
    out = Output(console=console, json_mode=get_json_mode())

    if action not in VALID_ACTIONS:
        out.error(
            f"Unknown action: {action}",
            suggestion=f"Valid actions: {', '.join(VALID_ACTIONS)}",
        )
        raise typer.Exit(out.finish())

    account_ids = list(accounts or [])
    if file is not None:
        if not file.exists():
            out.error(f"File not found: {file}", exit_code=ExitCode.FILE_NOT_FOUND)
            raise typer.Exit(out.finish())
        try:
            account_ids.extend(read_account_file(file))
        except ValueError as e:
            out.error(str(e))
            raise typer.Exit(out.finish())

    if action != "show":
        if not caller:
            out.error(f"--caller is required for {action}")
            raise typer.Exit(out.finish())
        if not account_ids:
            out.error("No account ids given", suggestion="Pass accounts or --file")
            raise typer.Exit(out.finish())

    contract = open_contract()
    try:
        if action == "show":
            members = contract.allowlists.members(tier)
            out.set_data("tier", tier.value)
            out.table(
                f"{tier.value.capitalize()} allowlist",
                ["Account"],
                [[m] for m in members],
                data_key="members",
            )
            out.text(f"{len(members)} member(s)")
        else:
            registry = contract.allowlists
            if action == "add":
                result = registry.add_batch(tier, account_ids, caller=caller)
            else:
                result = registry.remove_batch(tier, account_ids, caller=caller)
            verb = "Added" if action == "add" else "Removed"
            out.success(
                f"{verb} {len(result.applied)} account(s) "
                f"{'to' if action == 'add' else 'from'} {tier.value} allowlist",
                tier=tier.value,
                applied=result.applied,
                rejected=result.rejected,
            )
            for account_id in result.rejected:
                out.warning(f"Rejected invalid account id: {account_id}")
    except SaleError as e:
        out.sale_error(e)
    finally:
        contract.store.close()

    raise typer.Exit(out.finish())
