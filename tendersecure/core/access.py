"""Owner-only gate for privileged contract messages."""

from typing import Optional

from tendersecure.core.errors import TenderError
from tendersecure.core.state import TenderState
from tendersecure.crypto import short_address
from tendersecure.utils.logger import get_logger

logger = get_logger("access")


class AccessControl:
    """Restricts messages to the contract owner."""

    def is_owner(self, state: TenderState, caller: bytes) -> bool:
        return caller == state.owner

    def restrict(self, state: TenderState, caller: bytes) -> Optional[TenderError]:
        """
        Check that `caller` is the owner.

        Returns:
            None when allowed, CALLER_NOT_OWNER otherwise
        """
        if not self.is_owner(state, caller):
            logger.warning(f"Rejected owner-only call from {short_address(caller)}")
            return TenderError.CALLER_NOT_OWNER
        return None


__all__ = ["AccessControl"]
