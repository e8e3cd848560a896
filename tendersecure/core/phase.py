"""
Bidding Phase Controller - Opens and closes the proposal window.

Two states, Closed (initial) and Open. Only the owner may toggle; toggles
are idempotent.
"""

from typing import Optional, Tuple

from tendersecure.core.access import AccessControl
from tendersecure.core.errors import TenderError
from tendersecure.core.state import BiddingPhase, TenderState
from tendersecure.utils.logger import get_logger

logger = get_logger("phase")


class BiddingPhaseController:
    """Owner-controlled Closed/Open flag."""

    def __init__(self, access: Optional[AccessControl] = None):
        self.access = access or AccessControl()

    def can_submit_proposal(self, state: TenderState) -> bool:
        """Whether the bidding window is open."""
        return state.is_open

    def _set_phase(
        self,
        state: TenderState,
        ctx,
        phase: BiddingPhase,
    ) -> Tuple[bool, Optional[TenderError]]:
        err = self.access.restrict(state, ctx.caller)
        if err is not None:
            return False, err

        if state.phase != phase:
            logger.info(f"Bidding phase {state.phase.name} -> {phase.name}")
        state.phase = phase
        return True, None

    def start_bidding(self, state: TenderState, ctx) -> Tuple[bool, Optional[TenderError]]:
        """
        Open the bidding window.

        Returns:
            (success, error)
        """
        return self._set_phase(state, ctx, BiddingPhase.OPEN)

    def stop_bidding(self, state: TenderState, ctx) -> Tuple[bool, Optional[TenderError]]:
        """
        Close the bidding window.

        Returns:
            (success, error)
        """
        return self._set_phase(state, ctx, BiddingPhase.CLOSED)


__all__ = ["BiddingPhaseController"]
