import math
from decimal import Decimal
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import get_sideshift_client
from app.api.request_body import read_json_object, require_string
from app.core.errors import RequestValidationFailed
from app.services.sideshift import SideshiftClient

router = APIRouter(prefix="/api/sideshift", tags=["sideshift"])


def _float_to_js_string(value: float) -> str:
    """Format like JavaScript Number#toString: shortest digits, exponent below 1e-6 or from 1e21."""
    if value == 0:
        return "0"
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    text = "".join(map(str, digits))
    k = len(text)
    n = exponent + k  # decimal point position relative to the first digit

    if k <= n <= 21:
        out = text + "0" * (n - k)
    elif 0 < n <= 21:
        out = text[:n] + "." + text[n:]
    elif -6 < n <= 0:
        out = "0." + "0" * -n + text
    else:
        e = n - 1
        mantissa = text[0] + ("." + text[1:] if k > 1 else "")
        out = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return "-" + out if sign else out


def normalize_amount(value: Any) -> Optional[str]:
    """Amounts travel as strings; numbers are converted, anything else rejected."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise RequestValidationFailed("Amounts must be provided as string or number values.")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise RequestValidationFailed("Amounts must be provided as string or number values.")
        return _float_to_js_string(value)
    if isinstance(value, str):
        return value
    raise RequestValidationFailed("Amounts must be provided as string or number values.")


def _with_affiliate(payload: dict[str, Any], client: SideshiftClient) -> dict[str, Any]:
    if not payload.get("affiliateId") and client.affiliate_id:
        payload["affiliateId"] = client.affiliate_id
    return payload


@router.get("/coins")
async def sideshift_coins(client: SideshiftClient = Depends(get_sideshift_client)) -> Any:
    return await client.get_coins()


@router.get("/pairs")
async def sideshift_pairs(
    deposit_coin: Optional[str] = Query(default=None, alias="depositCoin"),
    settle_coin: Optional[str] = Query(default=None, alias="settleCoin"),
    client: SideshiftClient = Depends(get_sideshift_client),
) -> Any:
    return await client.get_pairs(deposit_coin, settle_coin)


@router.post("/quotes")
async def sideshift_quotes(
    request: Request,
    client: SideshiftClient = Depends(get_sideshift_client),
) -> Any:
    body = await read_json_object(request)
    require_string(body, "depositCoin")
    require_string(body, "settleCoin")

    deposit_amount = normalize_amount(body.get("depositAmount"))
    settle_amount = normalize_amount(body.get("settleAmount"))
    if not deposit_amount and not settle_amount:
        raise RequestValidationFailed("Provide either `depositAmount` or `settleAmount`.")

    payload = {k: v for k, v in body.items() if k not in {"depositAmount", "settleAmount"}}
    if deposit_amount is not None:
        payload["depositAmount"] = deposit_amount
    if settle_amount is not None:
        payload["settleAmount"] = settle_amount

    return await client.request_quote(_with_affiliate(payload, client))


@router.post("/shifts/fixed")
async def sideshift_fixed_shift(
    request: Request,
    client: SideshiftClient = Depends(get_sideshift_client),
) -> Any:
    body = await read_json_object(request)
    require_string(body, "quoteId")
    require_string(body, "settleAddress")

    return await client.create_fixed_shift(_with_affiliate(dict(body), client))


@router.get("/shifts/{shift_id}")
async def sideshift_shift_status(
    shift_id: str,
    client: SideshiftClient = Depends(get_sideshift_client),
) -> Any:
    if not shift_id.strip():
        raise RequestValidationFailed("Missing or invalid shift ID.")
    return await client.get_shift(shift_id)
