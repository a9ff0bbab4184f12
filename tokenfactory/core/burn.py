"""Permissionless burns of attached funds.

Funds arrive in this core's custody with the call (guaranteed by the
execution environment). Coins of tracked denoms are burned from the core's
own account; everything else is returned to the caller in a single
transfer, which may be empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .errors import InvalidFundsError
from .messages import BurnInstruction, Coin, Response, TransferInstruction
from .state import Configuration


def partition_funds(
    config: Configuration, funds: Sequence[Coin]
) -> tuple[list[Coin], list[Coin]]:
    """Split funds into (managed, unmanaged), keeping input order.

    Every coin lands in exactly one side, duplicates included.
    """
    tracked = set(config.denoms)
    managed: list[Coin] = []
    unmanaged: list[Coin] = []
    for coin in funds:
        (managed if coin.denom in tracked else unmanaged).append(coin)
    return managed, unmanaged


@dataclass(frozen=True)
class BurnPlan:
    """Burns for the managed partition plus the return of the rest."""

    burns: tuple[BurnInstruction, ...]
    refund: TransferInstruction

    def to_response(self) -> Response:
        # Return transfer goes first, burns follow
        return (
            Response()
            .add_attribute("method", "execute_burn")
            .add_message(self.refund)
            .add_messages(self.burns)
        )


def plan_burn(
    config: Configuration,
    caller: str,
    funds: Sequence[Coin],
    contract_address: str,
) -> BurnPlan:
    """Build burn and return-transfer instructions for attached funds.

    Raises:
        InvalidFundsError: If no funds are attached
    """
    if not funds:
        raise InvalidFundsError()

    managed, unmanaged = partition_funds(config, funds)
    burns = tuple(
        BurnInstruction(denom=coin.denom, amount=coin.amount, burn_from_address=contract_address)
        for coin in managed
    )
    return BurnPlan(burns=burns, refund=TransferInstruction(caller, unmanaged))
