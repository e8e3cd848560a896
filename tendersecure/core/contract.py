"""
Tender Contract - Message surface of a sealed-procurement tender.

Conceptual Background:
---------------------
The owner deploys the contract (optionally funding the escrow), opens the
bidding window, bidders submit proposals that reference off-chain
documents, and a settlement call pays the full escrow to the chosen winner
while purging the bidder records.

Messages:
--------
Every message takes an execution context first. Fallible messages return
a `(value, error)` tuple where `error` is None on success. Messages that
accept attached funds are listed in `PAYABLE_MESSAGES`.
"""

from typing import List, Optional, Tuple

from tendersecure.core.access import AccessControl
from tendersecure.core.errors import TenderError
from tendersecure.core.escrow import EscrowSettlement
from tendersecure.core.events import EventEmitter
from tendersecure.core.phase import BiddingPhaseController
from tendersecure.core.registry import BidderRegistry
from tendersecure.core.state import TenderState
from tendersecure.crypto import short_address
from tendersecure.utils.logger import get_logger

logger = get_logger("contract")


# =============================================================================
# Message Table
# =============================================================================

QUERY_MESSAGES = frozenset({
    "owner",
    "get_tender_amount",
    "can_submit_proposal",
    "get_bidders",
    "get_proposal_for_bidder",
})

FALLIBLE_MESSAGES = frozenset({
    "submit_tender_amount",
    "enter",
    "pick_bidder",
    "start_bidding",
    "stop_bidding",
})

PAYABLE_MESSAGES = frozenset({"submit_tender_amount", "enter"})

MESSAGES = QUERY_MESSAGES | FALLIBLE_MESSAGES


# =============================================================================
# Contract
# =============================================================================


class TenderContract:
    """
    A deployed tender.

    Owns one `TenderState` and routes each message to the component that
    implements it.
    """

    def __init__(self, state: TenderState):
        self.state = state

        self.events = EventEmitter()
        self.access = AccessControl()
        self.phase = BiddingPhaseController(self.access)
        self.registry = BidderRegistry(self.events)
        self.settlement = EscrowSettlement(self.registry, self.events)

    @classmethod
    def create(cls, ctx) -> "TenderContract":
        """Constructor message: the caller becomes the owner, bidding closed."""
        contract = cls(TenderState(owner=ctx.caller))
        logger.info(f"Tender created by {short_address(ctx.caller)} "
                    f"with endowment {ctx.balance()}")
        return contract

    # =========================================================================
    # Queries
    # =========================================================================

    def owner(self, ctx) -> bytes:
        return self.state.owner

    def get_tender_amount(self, ctx) -> int:
        """Balance currently held in escrow."""
        return ctx.balance()

    def can_submit_proposal(self, ctx) -> bool:
        return self.phase.can_submit_proposal(self.state)

    def get_bidders(self, ctx) -> List[bytes]:
        return self.registry.get_bidders(self.state)

    def get_proposal_for_bidder(self, ctx, bidder: bytes) -> Optional[str]:
        return self.registry.get_proposal_for_bidder(self.state, bidder)

    # =========================================================================
    # Owner Messages
    # =========================================================================

    def submit_tender_amount(self, ctx) -> Tuple[Optional[int], Optional[TenderError]]:
        """
        Owner tops up the escrow; attached value is already in the balance.

        Returns:
            (balance, error)
        """
        err = self.access.restrict(self.state, ctx.caller)
        if err is not None:
            return None, err
        return ctx.balance(), None

    def start_bidding(self, ctx) -> Tuple[bool, Optional[TenderError]]:
        return self.phase.start_bidding(self.state, ctx)

    def stop_bidding(self, ctx) -> Tuple[bool, Optional[TenderError]]:
        return self.phase.stop_bidding(self.state, ctx)

    # =========================================================================
    # Bidding & Settlement
    # =========================================================================

    def enter(self, ctx, proposal: str) -> Tuple[bool, Optional[TenderError]]:
        return self.registry.enter(self.state, ctx, proposal)

    def pick_bidder(self, ctx, winner: bytes) -> Tuple[bool, Optional[TenderError]]:
        return self.settlement.pick_bidder(self.state, ctx, winner)

    # =========================================================================
    # Utility
    # =========================================================================

    def __repr__(self) -> str:
        return (f"TenderContract(owner={short_address(self.state.owner)}, "
                f"phase={self.state.phase.name}, entries={len(self.state.bidders)})")

    def stats(self, ctx) -> dict:
        """Get contract statistics."""
        registry_stats = self.registry.stats(self.state)
        return {
            "owner": self.state.owner,
            "phase": self.state.phase.name,
            "balance": ctx.balance(),
            "entries": registry_stats["entries"],
            "distinct_bidders": registry_stats["distinct_bidders"],
        }


__all__ = [
    "TenderContract",
    "MESSAGES",
    "QUERY_MESSAGES",
    "FALLIBLE_MESSAGES",
    "PAYABLE_MESSAGES",
]
