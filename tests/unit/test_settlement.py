"""
Tests for Escrow Settlement.

Tests cover:
1. Empty registry rejection
2. Successful payout and registry reset
3. Transfer failure leaves everything intact
4. Phase is never touched
"""

import pytest

from tendersecure.core.errors import TenderError
from tendersecure.core.escrow import EscrowSettlement
from tendersecure.core.events import Won
from tendersecure.core.host import AccountLedger, ExecutionContext
from tendersecure.core.state import BiddingPhase, TenderState

OWNER = b"\x01" * 20
ALICE = b"\x0a" * 20
BOB = b"\x0b" * 20
OUTSIDER = b"\x0e" * 20
CONTRACT = b"\xcc" * 20


class FailingTransferContext(ExecutionContext):
    """Context whose transfer primitive always fails."""

    def transfer(self, dst: bytes, amount: int) -> bool:
        return False


def make_ctx(caller: bytes, escrow: int = 0, cls=ExecutionContext) -> ExecutionContext:
    ledger = AccountLedger({CONTRACT: escrow})
    return cls(caller=caller, contract_address=CONTRACT, ledger=ledger)


def populated_state(phase: BiddingPhase = BiddingPhase.OPEN) -> TenderState:
    return TenderState(
        owner=OWNER,
        phase=phase,
        bidders=[ALICE, BOB, ALICE],
        proposals={ALICE: "doc://alice/2", BOB: "doc://bob/1"},
    )


class TestEmptyRegistry:
    """Settlement requires entries."""

    @pytest.mark.parametrize("caller", [OWNER, ALICE, OUTSIDER])
    @pytest.mark.parametrize("winner", [OWNER, ALICE, OUTSIDER])
    def test_no_entries(self, caller, winner):
        """Any caller, any winner: NO_ENTRIES on an empty registry."""
        state = TenderState(owner=OWNER, phase=BiddingPhase.OPEN)
        ctx = make_ctx(caller, escrow=100)

        success, err = EscrowSettlement().pick_bidder(state, ctx, winner)

        assert not success
        assert err == TenderError.NO_ENTRIES
        assert ctx.balance() == 100
        assert ctx.events == []


class TestPayout:
    """Successful settlement."""

    def test_winner_receives_full_balance(self):
        state = populated_state()
        ctx = make_ctx(OWNER, escrow=250)

        success, err = EscrowSettlement().pick_bidder(state, ctx, BOB)

        assert success
        assert err is None
        assert ctx.balance() == 0
        assert ctx.ledger.get_balance(BOB) == 250

    def test_registry_cleared(self):
        state = populated_state()

        EscrowSettlement().pick_bidder(state, make_ctx(OWNER, escrow=10), ALICE)

        assert state.bidders == []
        assert state.proposals == {}

    def test_won_event(self):
        state = populated_state()
        ctx = make_ctx(OWNER, escrow=42)

        EscrowSettlement().pick_bidder(state, ctx, ALICE)

        assert ctx.events == [Won(winner=ALICE, amount=42)]

    def test_winner_need_not_be_bidder(self):
        """The winner address is not checked against the registry."""
        state = populated_state()
        ctx = make_ctx(OWNER, escrow=7)

        success, _ = EscrowSettlement().pick_bidder(state, ctx, OUTSIDER)

        assert success
        assert ctx.ledger.get_balance(OUTSIDER) == 7

    def test_any_caller_may_settle(self):
        """No owner restriction on settlement."""
        state = populated_state()

        success, err = EscrowSettlement().pick_bidder(state, make_ctx(OUTSIDER, escrow=1), BOB)

        assert success
        assert err is None

    def test_zero_balance_settlement(self):
        state = populated_state()
        ctx = make_ctx(OWNER, escrow=0)

        success, _ = EscrowSettlement().pick_bidder(state, ctx, BOB)

        assert success
        assert ctx.events == [Won(winner=BOB, amount=0)]


class TestTransferFailure:
    """A failed transfer must not lose bidder data."""

    def test_error_transferring_amount(self):
        state = populated_state()
        ctx = make_ctx(OWNER, escrow=100, cls=FailingTransferContext)

        success, err = EscrowSettlement().pick_bidder(state, ctx, BOB)

        assert not success
        assert err == TenderError.ERROR_TRANSFERRING_AMOUNT

    def test_registry_untouched(self):
        state = populated_state()
        before = state.copy()

        EscrowSettlement().pick_bidder(state, make_ctx(OWNER, escrow=100, cls=FailingTransferContext), BOB)

        assert state == before

    def test_blocked_destination_fails(self):
        """A ledger refusing the destination surfaces as a transfer error."""
        state = populated_state()
        ctx = make_ctx(OWNER, escrow=100)
        ctx.ledger.block(BOB)

        success, err = EscrowSettlement().pick_bidder(state, ctx, BOB)

        assert err == TenderError.ERROR_TRANSFERRING_AMOUNT
        assert ctx.balance() == 100
        assert ctx.events == []
        assert state.bidders == [ALICE, BOB, ALICE]


class TestPhaseUnchanged:
    """Settlement leaves the bidding phase alone."""

    @pytest.mark.parametrize("phase", [BiddingPhase.OPEN, BiddingPhase.CLOSED])
    def test_after_success(self, phase):
        state = populated_state(phase)
        EscrowSettlement().pick_bidder(state, make_ctx(OWNER, escrow=5), ALICE)
        assert state.phase == phase

    @pytest.mark.parametrize("phase", [BiddingPhase.OPEN, BiddingPhase.CLOSED])
    def test_after_failure(self, phase):
        state = populated_state(phase)
        EscrowSettlement().pick_bidder(state, make_ctx(OWNER, escrow=5, cls=FailingTransferContext), ALICE)
        assert state.phase == phase


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
