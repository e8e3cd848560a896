"""
Error taxonomy for the tender contract.

Every fallible contract message reports one of these kinds. The set is
closed: callers can rely on matching exhaustively against it.
"""

from enum import IntEnum


class TenderError(IntEnum):
    """Errors a contract message can return."""
    BIDDING_NOT_STARTED = 0                 # Phase is Closed
    CALLER_NOT_OWNER = 1                    # Owner-only message
    ERROR_TRANSFERRING_AMOUNT = 2           # Transfer primitive failed
    BIDDER_ALREADY_SUBMITTED_PROPOSAL = 3   # Declared, never returned
    NO_ENTRIES = 4                          # Settlement on empty registry

    @property
    def label(self) -> str:
        """CamelCase name, e.g. ``BiddingNotStarted``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


class CallRejected(Exception):
    """
    Raised by the host when a call never reaches the contract.

    Covers malformed input (bad address, negative amount), value attached to
    a non-payable message, unknown messages and insufficient caller funds.
    """


__all__ = ["TenderError", "CallRejected"]
