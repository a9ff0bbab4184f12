"""Mint requests from whitelisted callers.

Whitelist membership of the caller is the only gate by default; the
requested denoms are passed to the issuance subsystem as-is, so a
whitelisted caller may mint a denom this core does not track (the issuance
subsystem rejects it unless this core holds admin rights over it). Set
``require_managed_denoms`` to restrict minting to tracked denoms.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .authorization import require_whitelisted
from .errors import InvalidDenomError
from .messages import Coin, MintInstruction, Response, format_coins
from .state import Configuration
from .validation import validate_address


@dataclass(frozen=True)
class MintPlan:
    """Mint instructions for one request, in request order."""

    recipient: str
    coins: tuple[Coin, ...]
    instructions: tuple[MintInstruction, ...]

    def to_response(self) -> Response:
        return (
            Response()
            .add_attribute("method", "execute_mint")
            .add_attribute("to_address", self.recipient)
            .add_attribute("denoms", format_coins(self.coins))
            .add_messages(self.instructions)
        )


def plan_mint(
    config: Configuration,
    caller: str,
    recipient: str,
    coins: Sequence[Coin],
    require_managed_denoms: bool = False,
) -> MintPlan:
    """Turn a mint request into one MintInstruction per coin.

    Args:
        config: Current configuration snapshot
        caller: Authenticated caller
        recipient: Beneficiary of every minted coin
        coins: Requested (denom, amount) pairs; zero amounts pass through
        require_managed_denoms: Reject denoms not in ``config.denoms``

    Raises:
        UnauthorizedError: If the caller is not whitelisted
        InvalidAddressError: If the recipient is empty or contains whitespace
        InvalidDenomError: If a denom is untracked and tracking is required
    """
    require_whitelisted(config, caller)
    validate_address(recipient)

    if require_managed_denoms:
        tracked = set(config.denoms)
        for coin in coins:
            if coin.denom not in tracked:
                raise InvalidDenomError(coin.denom, "Denom is not managed by this contract")

    instructions = tuple(
        MintInstruction(denom=coin.denom, amount=coin.amount, mint_to_address=recipient)
        for coin in coins
    )
    return MintPlan(recipient=recipient, coins=tuple(coins), instructions=instructions)
