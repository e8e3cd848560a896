"""
Contract state for a single tender instance.

The whole mutable state lives in one `TenderState` value that is handed to
each component operation explicitly.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List


class BiddingPhase(IntEnum):
    """Whether proposals are being accepted."""
    CLOSED = 0
    OPEN = 1


@dataclass
class TenderState:
    """
    State of a deployed tender contract.

    Attributes:
        owner: Creator's address, immutable after creation
        phase: Current bidding phase
        bidders: Submission-ordered bidder addresses (duplicates allowed)
        proposals: Latest proposal per bidder address
    """
    owner: bytes
    phase: BiddingPhase = BiddingPhase.CLOSED
    bidders: List[bytes] = field(default_factory=list)
    proposals: Dict[bytes, str] = field(default_factory=dict)

    @property
    def is_open(self) -> bool:
        return self.phase == BiddingPhase.OPEN

    def copy(self) -> "TenderState":
        """Independent copy, used for call-boundary rollback."""
        return TenderState(
            owner=self.owner,
            phase=self.phase,
            bidders=list(self.bidders),
            proposals=dict(self.proposals),
        )


__all__ = ["BiddingPhase", "TenderState"]
