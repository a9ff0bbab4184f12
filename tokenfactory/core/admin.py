"""Manager hand-off of a denom's administrative control.

Once a denom's admin moves to another principal this core can no longer
administer it, so a tracked denom is dropped from the tracked list. An
untracked denom still gets the change-admin instruction: that is how the
manager reclaims admin of a denom this core never tracked.
"""

from __future__ import annotations

from dataclasses import dataclass

from .authorization import require_manager
from .messages import ChangeAdminInstruction, Response
from .registry import difference
from .state import Configuration
from .validation import validate_address


@dataclass(frozen=True)
class AdminTransferPlan:
    """The change-admin instruction and, if the denom was tracked, the new config."""

    instruction: ChangeAdminInstruction
    updated_config: Configuration | None

    def to_response(self) -> Response:
        return (
            Response()
            .add_attribute("method", "execute_transfer_admin")
            .add_attribute("new_admin", self.instruction.new_admin_address)
            .add_message(self.instruction)
        )


def plan_transfer_admin(
    config: Configuration,
    caller: str,
    denom: str,
    new_admin: str,
) -> AdminTransferPlan:
    """Plan the hand-off of ``denom`` to ``new_admin``.

    Raises:
        UnauthorizedError: If the caller is not the manager
        InvalidAddressError: If the new admin is empty or contains whitespace
    """
    require_manager(config, caller)
    validate_address(new_admin)

    updated: Configuration | None = None
    if denom in config.denoms:
        updated = config.replace(denoms=difference(config.denoms, [denom]))

    return AdminTransferPlan(
        instruction=ChangeAdminInstruction(denom=denom, new_admin_address=new_admin),
        updated_config=updated,
    )
