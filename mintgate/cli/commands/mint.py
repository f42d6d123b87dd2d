"""Mint command."""

import typer
from rich.markup import escape

from ..app import app, console, get_json_mode, open_contract
from ..utils import Output
from ...core.models import EventLog
from ...sale import InsufficientFunds, NotEligible, SaleError


@app.command("mint")
def mint_command(
    receiver: str = typer.Argument(..., help="Account receiving the token"),
    caller: str = typer.Option(..., "--caller", "-c", help="Account paying for the mint"),
    deposit: int = typer.Option(
        ..., "--deposit", "-d", help="Attached deposit in yocto units"
    ),
    token_id: str | None = typer.Option(
        None, "--token-id", help="Use this token id instead of the drawn identifier"
    ),
    at: int | None = typer.Option(
        None, "--at", help="Pin the clock to this Unix epoch millisecond"
    ),
):
    """Mint one token to RECEIVER.

    Example:
        mintgate mint alice.near --caller alice.near --deposit 7000000000000000000000000
    """
    out = Output(console=console, json_mode=get_json_mode())

    contract = open_contract(at)
    try:
        receipt = contract.mint(token_id, receiver, caller=caller, deposit=deposit)
        event = EventLog.from_log_line(receipt)
        minted = event.data[0].token_ids[0]
        out.success(
            f"Minted token {minted} to {receiver}",
            token_id=minted,
            receipt=receipt,
            event=event.to_dict(),
        )
        out.text(f"  [dim]{escape(receipt)}[/dim]")
    except InsufficientFunds as e:
        out.sale_error(e, suggestion="Attach at least the price floor for your tier")
    except NotEligible as e:
        out.sale_error(e, suggestion="Presale is allowlist-only; wait for public sale")
    except SaleError as e:
        out.sale_error(e)
    except ValueError as e:
        out.error(str(e))
    finally:
        contract.store.close()

    raise typer.Exit(out.finish())
