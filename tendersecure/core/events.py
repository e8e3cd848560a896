"""
Contract events.

Notifications are fire-and-forget: the contract hands them to the execution
context's event sink and never reads them back.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Union

from tendersecure.crypto import bytes_to_hex, hex_to_bytes, short_address
from tendersecure.utils.logger import get_logger

logger = get_logger("events")


@dataclass(frozen=True)
class ProposalSubmitted:
    """A bidder submitted (or replaced) a proposal."""
    bidder: bytes
    value: str

    kind: ClassVar[str] = "ProposalSubmitted"

    def to_dict(self) -> Dict[str, Any]:
        return {"bidder": bytes_to_hex(self.bidder), "value": self.value}


@dataclass(frozen=True)
class Won:
    """Escrow was paid out to the winner."""
    winner: bytes
    amount: int

    kind: ClassVar[str] = "Won"

    def to_dict(self) -> Dict[str, Any]:
        return {"winner": bytes_to_hex(self.winner), "amount": str(self.amount)}


TenderEvent = Union[ProposalSubmitted, Won]


def event_from_dict(kind: str, payload: Dict[str, Any]) -> TenderEvent:
    """Rebuild an event from its stored kind and payload."""
    if kind == ProposalSubmitted.kind:
        return ProposalSubmitted(bidder=hex_to_bytes(payload["bidder"]), value=payload["value"])
    if kind == Won.kind:
        return Won(winner=hex_to_bytes(payload["winner"]), amount=int(payload["amount"]))
    raise ValueError(f"Unknown event kind: {kind}")


class EventEmitter:
    """Forwards contract events to the per-call event sink."""

    def emit(self, ctx, event: TenderEvent) -> None:
        ctx.emit(event)
        if isinstance(event, ProposalSubmitted):
            logger.debug(f"ProposalSubmitted bidder={short_address(event.bidder)}")
        else:
            logger.debug(f"Won winner={short_address(event.winner)} amount={event.amount}")


__all__ = [
    "ProposalSubmitted",
    "Won",
    "TenderEvent",
    "EventEmitter",
    "event_from_dict",
]
