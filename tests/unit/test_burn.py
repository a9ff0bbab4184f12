"""Tests for burn planning and fund partitioning."""

from collections import Counter

import pytest

from tokenfactory.core.burn import partition_funds, plan_burn
from tokenfactory.core.errors import ErrorCode, InvalidFundsError
from tokenfactory.core.messages import (
    BurnInstruction,
    Coin,
    InstructionType,
    TransferInstruction,
)
from tokenfactory.core.state import Configuration

from tests.testing_utils import CONTRACT_ADDRESS, DENOM, OTHER_DENOM, OUTSIDER, coins


class TestPartitionFunds:
    """Tests for partition_funds."""

    def test_splits_by_tracked_denoms(self, config: Configuration) -> None:
        managed, unmanaged = partition_funds(config, coins(f"50{DENOM},10uatom,3{OTHER_DENOM}"))
        assert managed == [Coin(DENOM, 50), Coin(OTHER_DENOM, 3)]
        assert unmanaged == [Coin("uatom", 10)]

    def test_every_coin_lands_exactly_once(self, config: Configuration) -> None:
        funds = coins(f"1{DENOM},1{DENOM},2uatom,2uatom,7ujuno")
        managed, unmanaged = partition_funds(config, funds)
        assert Counter(managed) + Counter(unmanaged) == Counter(funds)
        assert not set(managed) & set(unmanaged)


class TestPlanBurn:
    """Tests for plan_burn."""

    def test_mixed_funds(self, config: Configuration) -> None:
        plan = plan_burn(config, OUTSIDER, coins(f"50{DENOM},10uatom"), CONTRACT_ADDRESS)

        assert plan.burns == (
            BurnInstruction(denom=DENOM, amount=50, burn_from_address=CONTRACT_ADDRESS),
        )
        assert plan.refund == TransferInstruction(OUTSIDER, [Coin("uatom", 10)])

    def test_refund_first_then_burns(self, config: Configuration) -> None:
        response = plan_burn(
            config, OUTSIDER, coins(f"5{DENOM},10uatom,6{OTHER_DENOM}"), CONTRACT_ADDRESS
        ).to_response()

        kinds = [m.instruction_type for m in response.messages]
        assert kinds == [InstructionType.TRANSFER, InstructionType.BURN, InstructionType.BURN]
        assert response.attribute("method") == "execute_burn"

    def test_all_managed_still_emits_empty_refund(self, config: Configuration) -> None:
        plan = plan_burn(config, OUTSIDER, coins(f"5{DENOM}"), CONTRACT_ADDRESS)
        assert plan.refund == TransferInstruction(OUTSIDER, [])
        assert len(plan.to_response().messages) == 2

    def test_nothing_managed_returns_everything(self, config: Configuration) -> None:
        funds = coins("10uatom,3ujuno")
        plan = plan_burn(config, OUTSIDER, funds, CONTRACT_ADDRESS)
        assert plan.burns == ()
        assert list(plan.refund.amount) == funds

    def test_empty_funds_rejected(self, config: Configuration) -> None:
        with pytest.raises(InvalidFundsError) as exc_info:
            plan_burn(config, OUTSIDER, [], CONTRACT_ADDRESS)
        assert exc_info.value.code == ErrorCode.INVALID_FUNDS
