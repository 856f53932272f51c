"""Boundary to wallet infrastructure.

Turns backend-proposed actions into human summaries and unsigned transaction
requests. Signing happens in the user's wallet, never here.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.schemas.conversation import Action


class TransactionActionData(BaseModel):
    model_config = ConfigDict(extra="allow")

    to: str
    value: Optional[Union[str, int]] = None
    chain_id: int
    function: Optional[str] = None
    data: Optional[str] = None


class SwapIntent(BaseModel):
    model_config = ConfigDict(extra="allow")

    amount: str
    origin_token_address: str
    destination_token_address: str
    destination_chain_id: int


class SwapActionData(BaseModel):
    model_config = ConfigDict(extra="allow")

    intent: SwapIntent
    transaction: TransactionActionData


class MonitorActionData(BaseModel):
    model_config = ConfigDict(extra="allow")

    transaction_id: str


class PreparedTransaction(BaseModel):
    chain_id: int
    to: str
    value: int = 0
    data: Optional[str] = Field(default=None)


def parse_action_payload(
    action: Action,
) -> Union[TransactionActionData, SwapActionData, MonitorActionData]:
    """Validate the payload against the schema of its action type.

    Raises:
        ValueError: the payload does not match its type.
    """
    schema = {
        "sign_transaction": TransactionActionData,
        "sign_swap": SwapActionData,
        "monitor_transaction": MonitorActionData,
    }[action.type]
    try:
        return schema.model_validate(action.payload)
    except ValidationError as e:
        raise ValueError(f"invalid {action.type} payload: {e}") from e


def _parse_wei(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, int):
        return value
    text = str(value).strip()
    return int(text, 16) if text.lower().startswith("0x") else int(text)


def prepare_transaction(action: Action) -> PreparedTransaction:
    """Unsigned transaction request for a sign_transaction or sign_swap action."""
    payload = parse_action_payload(action)
    if isinstance(payload, MonitorActionData):
        raise ValueError("monitor_transaction actions carry no transaction to sign")
    tx = payload.transaction if isinstance(payload, SwapActionData) else payload
    return PreparedTransaction(
        chain_id=tx.chain_id,
        to=tx.to,
        value=_parse_wei(tx.value),
        data=tx.data,
    )


def describe_action(action: Action) -> str:
    try:
        payload = parse_action_payload(action)
    except ValueError:
        return f"{action.type} (unreadable payload, request {action.request_id})"

    if isinstance(payload, SwapActionData):
        intent = payload.intent
        return (
            f"Sign swap: {intent.amount} of {intent.origin_token_address} -> "
            f"{intent.destination_token_address} on chain {intent.destination_chain_id}"
        )
    if isinstance(payload, MonitorActionData):
        return f"Monitor transaction {payload.transaction_id}"

    label = f" ({payload.function})" if payload.function else ""
    return (
        f"Sign transaction{label}: to {payload.to}, value {_parse_wei(payload.value)} wei, "
        f"chain {payload.chain_id}"
    )
