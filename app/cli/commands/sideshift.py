"""SideShift commands - coins, pairs, quotes and fixed-rate shifts via the proxy."""

import json
from typing import Any, Optional
from urllib.parse import quote

import typer

from app.cli import _globals
from app.cli.client import APIError
from app.cli.lib.safe_output import safe_print

app = typer.Typer(name="sideshift", help="Cross-chain swaps through SideShift.", no_args_is_help=True)


def _call(method: str, path: str, **kwargs) -> Any:
    client = _globals.make_client()
    try:
        return client.request(method, path, **kwargs)
    except APIError as e:
        safe_print(e.user_friendly_message(), err=True)
        raise typer.Exit(1)
    finally:
        client.close()


def _emit(data: Any) -> None:
    safe_print(json.dumps(data, ensure_ascii=False, indent=2))


@app.command()
def coins() -> None:
    """List coins and networks SideShift supports."""
    _emit(_call("GET", "/api/sideshift/coins"))


@app.command()
def pairs(
    deposit_coin: Optional[str] = typer.Option(None, "--from", help="Deposit coin, e.g. btc"),
    settle_coin: Optional[str] = typer.Option(None, "--to", help="Settle coin, e.g. usdc-polygon"),
) -> None:
    """Show pair rates and limits."""
    params = {k: v for k, v in {"depositCoin": deposit_coin, "settleCoin": settle_coin}.items() if v}
    _emit(_call("GET", "/api/sideshift/pairs", params=params))


@app.command(name="quote")
def quote_cmd(
    deposit_coin: str = typer.Option(..., "--from", help="Deposit coin"),
    settle_coin: str = typer.Option(..., "--to", help="Settle coin"),
    deposit_amount: Optional[str] = typer.Option(None, "--deposit-amount"),
    settle_amount: Optional[str] = typer.Option(None, "--settle-amount"),
    deposit_network: Optional[str] = typer.Option(None, "--deposit-network"),
    settle_network: Optional[str] = typer.Option(None, "--settle-network"),
) -> None:
    """Request a fixed-rate quote."""
    body = {
        "depositCoin": deposit_coin,
        "settleCoin": settle_coin,
        "depositAmount": deposit_amount,
        "settleAmount": settle_amount,
        "depositNetwork": deposit_network,
        "settleNetwork": settle_network,
    }
    _emit(_call("POST", "/api/sideshift/quotes", json={k: v for k, v in body.items() if v is not None}))


@app.command()
def shift(
    quote_id: str = typer.Argument(..., help="Quote id from `sideshift quote`"),
    settle_address: str = typer.Option(..., "--settle-address", help="Where the settled coin goes"),
    refund_address: Optional[str] = typer.Option(None, "--refund-address"),
) -> None:
    """Create a fixed-rate shift from a quote."""
    body = {"quoteId": quote_id, "settleAddress": settle_address}
    if refund_address:
        body["refundAddress"] = refund_address
    _emit(_call("POST", "/api/sideshift/shifts/fixed", json=body))


@app.command()
def status(shift_id: str = typer.Argument(..., help="Shift id")) -> None:
    """Show the status of a shift."""
    _emit(_call("GET", f"/api/sideshift/shifts/{quote(shift_id, safe='')}"))
