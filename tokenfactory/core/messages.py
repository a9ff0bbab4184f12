"""Coins, call context and outbound instructions.

Instructions are what the core hands to its collaborators once an operation
succeeds:

- MintInstruction, BurnInstruction, ChangeAdminInstruction go to the
  issuance subsystem.
- TransferInstruction goes to the value-transfer subsystem.

A Response bundles the instructions with descriptive attributes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Union

_COIN_RE = re.compile(r"^(\d+)([a-zA-Z][a-zA-Z0-9/:._-]*)$")


@dataclass(frozen=True)
class Coin:
    """An amount of one denomination. Amounts are unbounded ints."""

    denom: str
    amount: int

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"amount must be an int, got {type(self.amount).__name__}")
        if self.amount < 0:
            raise ValueError(f"amount cannot be negative: {self.amount}")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

    def to_dict(self) -> dict[str, str]:
        # Amounts travel as strings so they never lose precision in JSON
        return {"denom": self.denom, "amount": str(self.amount)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Coin:
        return cls(denom=data["denom"], amount=int(data["amount"]))


def format_coins(coins: Iterable[Coin]) -> str:
    """Render coins as a comma separated list, e.g. ``100factory/a/b,5uatom``."""
    return ",".join(str(c) for c in coins)


def parse_coins(text: str) -> list[Coin]:
    """Parse the ``format_coins`` representation back into coins.

    Raises:
        ValueError: If an entry is not ``<amount><denom>``
    """
    coins: list[Coin] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        match = _COIN_RE.match(part)
        if match is None:
            raise ValueError(f"Invalid coin: {part!r}")
        coins.append(Coin(denom=match.group(2), amount=int(match.group(1))))
    return coins


@dataclass(frozen=True)
class MessageInfo:
    """Authenticated caller and the funds attached to the call."""

    sender: str
    funds: tuple[Coin, ...] = ()

    def __init__(self, sender: str, funds: Iterable[Coin] = ()) -> None:
        object.__setattr__(self, "sender", sender)
        object.__setattr__(self, "funds", tuple(funds))


@dataclass(frozen=True)
class Env:
    """Execution environment facts about this system."""

    contract_address: str


class InstructionType(str, Enum):
    """Outbound instruction kinds."""

    MINT = "mint_tokens"
    BURN = "burn_tokens"
    CHANGE_ADMIN = "change_admin"
    TRANSFER = "bank_send"


@dataclass(frozen=True)
class MintInstruction:
    """Ask the issuance subsystem to mint ``amount`` of ``denom`` to a recipient."""

    denom: str
    amount: int
    mint_to_address: str

    instruction_type = InstructionType.MINT

    def to_dict(self) -> dict[str, Any]:
        return {
            self.instruction_type.value: {
                "denom": self.denom,
                "amount": str(self.amount),
                "mint_to_address": self.mint_to_address,
            }
        }


@dataclass(frozen=True)
class BurnInstruction:
    """Ask the issuance subsystem to burn funds held by ``burn_from_address``."""

    denom: str
    amount: int
    burn_from_address: str

    instruction_type = InstructionType.BURN

    def to_dict(self) -> dict[str, Any]:
        return {
            self.instruction_type.value: {
                "denom": self.denom,
                "amount": str(self.amount),
                "burn_from_address": self.burn_from_address,
            }
        }


@dataclass(frozen=True)
class ChangeAdminInstruction:
    """Hand administrative control of ``denom`` to ``new_admin_address``."""

    denom: str
    new_admin_address: str

    instruction_type = InstructionType.CHANGE_ADMIN

    def to_dict(self) -> dict[str, Any]:
        return {
            self.instruction_type.value: {
                "denom": self.denom,
                "new_admin_address": self.new_admin_address,
            }
        }


@dataclass(frozen=True)
class TransferInstruction:
    """Send ``amount`` (possibly empty) to ``to_address``."""

    to_address: str
    amount: tuple[Coin, ...] = ()

    instruction_type = InstructionType.TRANSFER

    def __init__(self, to_address: str, amount: Iterable[Coin] = ()) -> None:
        object.__setattr__(self, "to_address", to_address)
        object.__setattr__(self, "amount", tuple(amount))

    def to_dict(self) -> dict[str, Any]:
        return {
            self.instruction_type.value: {
                "to_address": self.to_address,
                "amount": [c.to_dict() for c in self.amount],
            }
        }


Instruction = Union[MintInstruction, BurnInstruction, ChangeAdminInstruction, TransferInstruction]


@dataclass
class Response:
    """Outcome of a successful operation: instructions plus attributes."""

    messages: list[Instruction] = field(default_factory=list)
    attributes: list[tuple[str, str]] = field(default_factory=list)

    def add_attribute(self, key: str, value: str) -> Response:
        self.attributes.append((key, value))
        return self

    def add_message(self, message: Instruction) -> Response:
        self.messages.append(message)
        return self

    def add_messages(self, messages: Iterable[Instruction]) -> Response:
        self.messages.extend(messages)
        return self

    def attribute(self, key: str) -> str | None:
        """First value recorded for ``key``, or None."""
        for k, v in self.attributes:
            if k == key:
                return v
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in self.messages],
            "attributes": [{"key": k, "value": v} for k, v in self.attributes],
        }
