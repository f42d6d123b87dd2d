"""Init command: create the sale and seed the identifier pool."""

import typer

from ..app import app, console, get_db_path, get_json_mode, open_contract
from ..utils import Output
from ...core.models import ContractMetadata
from ...sale import SaleError


@app.command("init")
def init_command(
    owner: str = typer.Argument(..., help="Owner account allowed to manage allowlists"),
    cap: int | None = typer.Option(
        None, "--cap", help="Number of identifiers (defaults to sale.cap from config)"
    ),
    name: str | None = typer.Option(None, "--name", help="Collection name"),
    symbol: str | None = typer.Option(None, "--symbol", help="Collection symbol"),
    base_uri: str | None = typer.Option(None, "--base-uri", help="Metadata base URI"),
):
    """Initialize a sale. Can only be run once per database.

    Example:
        mintgate init owner.near --cap 666 --name "Genesis" --symbol GEN
    """
    out = Output(console=console, json_mode=get_json_mode())

    metadata = ContractMetadata()
    if name:
        metadata.name = name
    if symbol:
        metadata.symbol = symbol
    if base_uri:
        metadata.base_uri = base_uri

    contract = open_contract()
    try:
        contract.initialize(owner, metadata=metadata, cap=cap)
        out.success(
            f"Initialized sale for {owner} with {contract.cap} identifiers "
            f"({get_db_path()})",
            owner_id=owner,
            cap=contract.cap,
            db_path=str(get_db_path()),
        )
    except SaleError as e:
        out.sale_error(e)
    except ValueError as e:
        out.error(str(e))
    finally:
        contract.store.close()

    raise typer.Exit(out.finish())
