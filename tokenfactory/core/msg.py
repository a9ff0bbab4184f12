"""Pydantic models for instantiate, execute and query messages.

On the wire each execute/query message is externally tagged by its
snake_case name:

    {"mint": {"address": "juno1r", "denom": [{"denom": "factory/a/b", "amount": "100"}]}}
    {"burn": {}}
    {"get_config": {}}

Internally every variant carries a ``msg_type`` literal, so ExecuteMsg is a
closed discriminated union the dispatcher matches exhaustively.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .errors import InvalidMessageError
from .messages import Coin


class MsgModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class CoinMsg(MsgModel):
    """Wire form of a coin; amount may be an int or a decimal string.

    Booleans, floats and any other strings are rejected rather than coerced.
    """

    denom: str = Field(min_length=1)
    amount: int = Field(ge=0, strict=True)

    @field_validator("amount", mode="before")
    @classmethod
    def parse_decimal_string(cls, v: Any) -> Any:
        """Turn a string of ASCII digits into an int; leave the rest to strict mode."""
        if isinstance(v, str):
            if not (v.isascii() and v.isdigit()):
                raise ValueError(f"amount must be a decimal integer string, got {v!r}")
            return int(v)
        return v

    def to_coin(self) -> Coin:
        return Coin(denom=self.denom, amount=self.amount)


class InstantiateMsg(MsgModel):
    """Creation input for the configuration record."""

    manager: str | None = Field(
        default=None,
        description="Principal allowed to manage the contract; defaults to the sender",
    )
    allowed_mint_addresses: list[str] = Field(
        description="Principals allowed to send mint requests"
    )
    denoms: list[str] = Field(
        description="Managed denoms, each starting with 'factory/'"
    )


class BurnMsg(MsgModel):
    """Burn attached funds of tracked denoms, return the rest."""

    msg_type: Literal["burn"] = "burn"


class MintMsg(MsgModel):
    """Mint ``denom`` coins to ``address`` (whitelist only)."""

    msg_type: Literal["mint"] = "mint"
    address: str
    denom: list[CoinMsg]

    def coins(self) -> list[Coin]:
        return [c.to_coin() for c in self.denom]


class TransferAdminMsg(MsgModel):
    """Hand admin of ``denom`` to ``new_address`` (manager only)."""

    msg_type: Literal["transfer_admin"] = "transfer_admin"
    denom: str
    new_address: str


class AddWhitelistMsg(MsgModel):
    msg_type: Literal["add_whitelist"] = "add_whitelist"
    addresses: list[str]


class RemoveWhitelistMsg(MsgModel):
    msg_type: Literal["remove_whitelist"] = "remove_whitelist"
    addresses: list[str]


class AddDenomMsg(MsgModel):
    msg_type: Literal["add_denom"] = "add_denom"
    denoms: list[str]


class RemoveDenomMsg(MsgModel):
    msg_type: Literal["remove_denom"] = "remove_denom"
    denoms: list[str]


class GetConfigMsg(MsgModel):
    """Return the current configuration."""

    msg_type: Literal["get_config"] = "get_config"


ExecuteMsg = Annotated[
    Union[
        BurnMsg,
        MintMsg,
        TransferAdminMsg,
        AddWhitelistMsg,
        RemoveWhitelistMsg,
        AddDenomMsg,
        RemoveDenomMsg,
    ],
    Field(discriminator="msg_type"),
]

# Single variant today; becomes a discriminated union like ExecuteMsg when
# a second query is added
QueryMsg = GetConfigMsg

_execute_adapter: TypeAdapter[Any] = TypeAdapter(ExecuteMsg)
_query_adapter: TypeAdapter[Any] = TypeAdapter(QueryMsg)


def _untag(data: Any, kind: str) -> dict[str, Any]:
    """Turn ``{"name": {...}}`` into ``{"msg_type": "name", ...}``."""
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise InvalidMessageError(f"Invalid JSON in {kind} message: {e}") from e
    if not isinstance(data, dict) or len(data) != 1:
        raise InvalidMessageError(
            f"{kind} message must be an object with exactly one key"
        )
    (name, body), = data.items()
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise InvalidMessageError(f"Body of {kind} message {name!r} must be an object")
    if "msg_type" in body:
        raise InvalidMessageError(f"Unknown field 'msg_type' in {name!r}")
    return {"msg_type": name, **body}


def _validate(adapter: TypeAdapter[Any], payload: Any, kind: str) -> Any:
    try:
        return adapter.validate_python(payload)
    except ValidationError as e:
        raise InvalidMessageError(f"Invalid {kind} message: {e}") from e


def parse_instantiate_msg(data: Any) -> InstantiateMsg:
    """Validate a dict (or JSON text) as an InstantiateMsg.

    Raises:
        InvalidMessageError: If the payload does not match the schema
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise InvalidMessageError(f"Invalid JSON in instantiate message: {e}") from e
    try:
        return InstantiateMsg.model_validate(data)
    except ValidationError as e:
        raise InvalidMessageError(f"Invalid instantiate message: {e}") from e


def parse_execute_msg(data: Any) -> ExecuteMsg:
    """Validate an externally tagged dict (or JSON text) as an ExecuteMsg.

    Raises:
        InvalidMessageError: If the payload names no known variant or is malformed
    """
    return _validate(_execute_adapter, _untag(data, "execute"), "execute")


def parse_query_msg(data: Any) -> QueryMsg:
    """Validate an externally tagged dict (or JSON text) as a QueryMsg."""
    return _validate(_query_adapter, _untag(data, "query"), "query")


def to_wire(msg: BaseModel) -> dict[str, Any]:
    """Dump a tagged message back to its ``{"name": {...}}`` wire form."""
    body = msg.model_dump(mode="json", exclude={"msg_type"})
    return {getattr(msg, "msg_type"): body}


def message_schemas() -> dict[str, Any]:
    """JSON schemas for every message type, keyed by role."""
    return {
        "instantiate": InstantiateMsg.model_json_schema(),
        "execute": _execute_adapter.json_schema(),
        "query": _query_adapter.json_schema(),
    }
