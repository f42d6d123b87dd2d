"""Read-only query commands: status, remaining, counts, tokens, metadata."""

from datetime import datetime, timezone

import typer

from ..app import app, console, get_json_mode, open_contract
from ..utils import Output, format_amount
from ...sale import SaleError


def _format_ms(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime(
        "%Y-%m-%d %H:%M:%S UTC"
    )


@app.command("status")
def status_command(
    at: int | None = typer.Option(
        None, "--at", help="Evaluate at this Unix epoch millisecond"
    ),
):
    """Show sale phase, prices and supply."""
    out = Output(console=console, json_mode=get_json_mode())

    contract = open_contract(at)
    try:
        sale = contract.sale_terms
        royalty = contract.royalty_terms
        phase = contract.current_phase()
        now = contract.current_time()
        metadata = contract.contract_metadata()
        supply = contract.total_supply()
        remaining = len(contract.pool)

        out.set_data("owner_id", contract.owner_id)
        out.set_data("name", metadata.name)
        out.set_data("symbol", metadata.symbol)
        out.set_data("phase", phase.value)
        out.set_data("sale_state", phase.code)
        out.set_data("current_time", now)
        out.set_data("total_supply", supply)
        out.set_data("remaining", remaining)
        out.set_data("cap", contract.cap)
        out.set_data("royalty", {royalty.account: royalty.basis_points})

        out.text("")
        out.text(f"[bold]{metadata.name}[/bold] ({metadata.symbol})")
        out.text(f"  owner        = {contract.owner_id}")
        out.text(f"  phase        = [cyan]{phase.value}[/cyan]")
        out.text(f"  time         = {now} ({_format_ms(now)})")
        out.text(f"  presale from = {sale.presale_start} ({_format_ms(sale.presale_start)})")
        out.text(f"  public from  = {sale.public_start} ({_format_ms(sale.public_start)})")
        out.text(f"  minted       = {supply} / {contract.cap} ({remaining} remaining)")
        out.text(f"  royalty      = {royalty.basis_points} bps to {royalty.account}")
        out.table(
            "Prices",
            ["Tier", "Floor"],
            [
                ["privileged", format_amount(sale.privileged_price)],
                ["standard", format_amount(sale.standard_price)],
                ["public", format_amount(sale.public_price)],
            ],
        )
    except SaleError as e:
        out.sale_error(e, suggestion="Run `mintgate init <owner>` first")
    finally:
        contract.store.close()

    raise typer.Exit(out.finish())


@app.command("remaining")
def remaining_command():
    """List identifiers that have not been drawn yet, in pool order."""
    out = Output(console=console, json_mode=get_json_mode())

    contract = open_contract()
    try:
        remaining = contract.remaining_identifiers()
        out.set_data("remaining", remaining)
        out.text(" ".join(str(i) for i in remaining) or "[dim](pool is empty)[/dim]")
        out.text(f"{len(remaining)} identifier(s) remaining")
    finally:
        contract.store.close()

    raise typer.Exit(out.finish())


@app.command("counts")
def counts_command(
    account: str = typer.Argument(..., help="Account id"),
):
    """Show how many tokens an account has minted per phase."""
    out = Output(console=console, json_mode=get_json_mode())

    contract = open_contract()
    try:
        presale = contract.presale_count(account)
        public = contract.public_count(account)
        out.set_data("account_id", account)
        out.set_data("is_privileged", contract.is_privileged(account))
        out.set_data("is_standard", contract.is_standard(account))
        out.table(
            f"Mints by {account}",
            ["Phase", "Mints"],
            [["presale", str(presale)], ["public", str(public)]],
            data_key="counts",
        )
    finally:
        contract.store.close()

    raise typer.Exit(out.finish())


@app.command("tokens")
def tokens_command(
    owner: str = typer.Argument(..., help="Owner account id"),
):
    """List tokens held by an owner."""
    out = Output(console=console, json_mode=get_json_mode())

    contract = open_contract()
    try:
        token_ids = contract.tokens_for_owner(owner)
        out.set_data("owner_id", owner)
        out.set_data("token_ids", token_ids)
        out.text(", ".join(token_ids) or "[dim](no tokens)[/dim]")
    finally:
        contract.store.close()

    raise typer.Exit(out.finish())


@app.command("metadata")
def metadata_command():
    """Dump metadata of every minted token, in mint order."""
    out = Output(console=console, json_mode=get_json_mode())

    contract = open_contract()
    try:
        out.set_data(
            "metadata",
            [
                m.model_dump(mode="json", exclude_none=True)
                for m in contract.all_metadata()
            ],
        )
        records = contract.store.all_tokens()
        out.table(
            "Tokens",
            ["Token", "Owner", "Title", "Issued at"],
            [
                [
                    r.token_id,
                    r.owner_id,
                    r.metadata.title or "",
                    str(r.metadata.issued_at or ""),
                ]
                for r in records
            ],
            data_key="tokens",
        )
    finally:
        contract.store.close()

    raise typer.Exit(out.finish())
