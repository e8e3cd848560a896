"""
Account Ledger - Native-asset balances for the in-process host.

The contract never touches this directly; it sees the ledger only through
the execution context's balance accessor and transfer primitive.

Transfers can be made to fail on purpose by blocking a destination address,
which stands in for a chain refusing the transfer.
"""

from typing import Dict, Optional, Set, Tuple

from tendersecure.crypto import bytes_to_hex, short_address
from tendersecure.utils.logger import get_logger
from tendersecure.utils.validation import MAX_AMOUNT

logger = get_logger("ledger")


class AccountLedger:
    """
    Account-based balance book.

    Attributes:
        balances: Mapping of address to balance (absent = 0)
        blocked: Addresses that cannot receive transfers
    """

    def __init__(self, balances: Optional[Dict[bytes, int]] = None):
        self.balances: Dict[bytes, int] = dict(balances or {})
        self.blocked: Set[bytes] = set()

    # =========================================================================
    # State Access
    # =========================================================================

    def get_balance(self, address: bytes) -> int:
        """Get balance for an address."""
        return self.balances.get(address, 0)

    @property
    def total_supply(self) -> int:
        return sum(self.balances.values())

    # =========================================================================
    # Mutation
    # =========================================================================

    def credit(self, address: bytes, amount: int) -> Tuple[bool, str]:
        """
        Mint `amount` into `address` (faucet / genesis only).

        Returns:
            (success, error_message)
        """
        if amount < 0:
            return False, "Amount must be non-negative"

        new_balance = self.get_balance(address) + amount
        if new_balance > MAX_AMOUNT:
            return False, f"Balance of {bytes_to_hex(address)} would exceed {MAX_AMOUNT}"

        self.balances[address] = new_balance
        return True, ""

    def transfer(self, src: bytes, dst: bytes, amount: int) -> Tuple[bool, str]:
        """
        Move `amount` from `src` to `dst`.

        Nothing changes on failure.

        Returns:
            (success, error_message)
        """
        if amount < 0:
            return False, "Amount must be non-negative"

        if dst in self.blocked:
            return False, f"Destination {bytes_to_hex(dst)} cannot receive transfers"

        available = self.get_balance(src)
        if available < amount:
            return False, f"Insufficient balance: {available} < {amount}"

        received = self.get_balance(dst) + amount
        if src != dst and received > MAX_AMOUNT:
            return False, f"Balance of {bytes_to_hex(dst)} would exceed {MAX_AMOUNT}"

        self.balances[src] = available - amount
        self.balances[dst] = self.get_balance(dst) + amount

        logger.debug(f"Transferred {amount} {short_address(src)} -> {short_address(dst)}")
        return True, ""

    # =========================================================================
    # Failure Simulation
    # =========================================================================

    def block(self, address: bytes) -> None:
        """Make every transfer to `address` fail."""
        self.blocked.add(address)

    def unblock(self, address: bytes) -> None:
        self.blocked.discard(address)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def snapshot(self) -> Dict[bytes, int]:
        return dict(self.balances)

    def restore(self, snapshot: Dict[bytes, int]) -> None:
        self.balances = dict(snapshot)

    # =========================================================================
    # Utility
    # =========================================================================

    def __repr__(self) -> str:
        return f"AccountLedger(accounts={len(self.balances)}, supply={self.total_supply})"

    def stats(self) -> dict:
        """Get ledger statistics."""
        return {
            "account_count": len(self.balances),
            "total_supply": self.total_supply,
            "blocked_count": len(self.blocked),
        }


__all__ = ["AccountLedger"]
