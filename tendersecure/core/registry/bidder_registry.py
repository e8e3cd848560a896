"""
Bidder Registry - Proposal intake for the tender.

This module provides:
- Proposal submission while the bidding window is open
- Submission-ordered bidder list (duplicates kept)
- Latest-proposal lookup per bidder

A bidder may submit more than once. Each submission appends another list
entry and replaces the stored proposal; no uniqueness is enforced.
"""

from collections import Counter
from typing import List, Optional, Tuple

from tendersecure.core.errors import TenderError
from tendersecure.core.events import EventEmitter, ProposalSubmitted
from tendersecure.core.state import TenderState
from tendersecure.crypto import short_address
from tendersecure.utils.logger import get_logger

logger = get_logger("registry")


class BidderRegistry:
    """
    Registry of bidders and their proposals.

    Holds no state of its own: every operation works on the `TenderState`
    it is given.
    """

    def __init__(self, events: Optional[EventEmitter] = None):
        self.events = events or EventEmitter()

    # =========================================================================
    # Submission
    # =========================================================================

    def enter(
        self,
        state: TenderState,
        ctx,
        proposal: str,
    ) -> Tuple[bool, Optional[TenderError]]:
        """
        Submit a proposal as `ctx.caller`.

        Any attached value is accepted as-is, including zero.

        Args:
            state: Contract state
            ctx: Execution context (caller identity, event sink)
            proposal: Opaque document reference

        Returns:
            (success, error)
        """
        if not state.is_open:
            return False, TenderError.BIDDING_NOT_STARTED

        bidder = ctx.caller
        state.bidders.append(bidder)
        state.proposals[bidder] = proposal

        self.events.emit(ctx, ProposalSubmitted(bidder=bidder, value=proposal))

        logger.debug(f"Proposal from {short_address(bidder)} "
                     f"(entry #{len(state.bidders)}, value={ctx.value})")
        return True, None

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_bidders(self, state: TenderState) -> List[bytes]:
        """Copy of the bidder list in submission order."""
        return list(state.bidders)

    def get_proposal_for_bidder(self, state: TenderState, bidder: bytes) -> Optional[str]:
        """Latest proposal for `bidder`, or None."""
        return state.proposals.get(bidder)

    def is_empty(self, state: TenderState) -> bool:
        return len(state.bidders) == 0

    # =========================================================================
    # Reset
    # =========================================================================

    def clear(self, state: TenderState) -> int:
        """
        Drop every listed bidder's proposal and empty the list.

        Returns:
            Number of list entries removed
        """
        removed = len(state.bidders)
        for bidder in state.bidders:
            state.proposals.pop(bidder, None)
        state.bidders = []
        return removed

    # =========================================================================
    # Statistics
    # =========================================================================

    def stats(self, state: TenderState) -> dict:
        """Get registry statistics."""
        counts = Counter(state.bidders)
        return {
            "entries": len(state.bidders),
            "distinct_bidders": len(counts),
            "resubmissions": sum(n - 1 for n in counts.values()),
            "proposals": len(state.proposals),
        }


__all__ = ["BidderRegistry"]
