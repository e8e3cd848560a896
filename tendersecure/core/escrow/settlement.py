"""
Escrow Settlement - Pays the held balance to the selected winner.

Settlement order:
1. Require at least one registry entry
2. Read the contract balance
3. Transfer the whole balance to the winner
4. Only after a confirmed transfer: clear the registry and emit Won

A failed transfer returns before step 4, so no bidder data is lost. The
bidding phase is left as it was.
"""

from typing import Optional, Tuple

from tendersecure.core.errors import TenderError
from tendersecure.core.events import EventEmitter, Won
from tendersecure.core.registry import BidderRegistry
from tendersecure.core.state import TenderState
from tendersecure.crypto import short_address
from tendersecure.utils.logger import get_logger

logger = get_logger("settlement")


class EscrowSettlement:
    """Transfers escrow to a winner and resets the registry."""

    def __init__(
        self,
        registry: Optional[BidderRegistry] = None,
        events: Optional[EventEmitter] = None,
    ):
        self.events = events or EventEmitter()
        self.registry = registry or BidderRegistry(self.events)

    def pick_bidder(
        self,
        state: TenderState,
        ctx,
        winner: bytes,
    ) -> Tuple[bool, Optional[TenderError]]:
        """
        Settle the tender in favour of `winner`.

        `winner` is not checked against the bidder list and any caller may
        settle.

        Args:
            state: Contract state
            ctx: Execution context (balance, transfer primitive, event sink)
            winner: Address receiving the full balance

        Returns:
            (success, error)
        """
        if self.registry.is_empty(state):
            return False, TenderError.NO_ENTRIES

        amount = ctx.balance()

        if not ctx.transfer(winner, amount):
            logger.warning(f"Transfer of {amount} to {short_address(winner)} failed, "
                           f"registry kept ({len(state.bidders)} entries)")
            return False, TenderError.ERROR_TRANSFERRING_AMOUNT

        removed = self.registry.clear(state)

        self.events.emit(ctx, Won(winner=winner, amount=amount))

        logger.info(f"Tender settled by {short_address(ctx.caller)}: "
                    f"winner={short_address(winner)} amount={amount}, {removed} entries cleared")
        return True, None


__all__ = ["EscrowSettlement"]
