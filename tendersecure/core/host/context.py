"""
Execution Context - The environment as seen by one contract call.

Bundles the caller identity, attached value, the contract's balance
accessor, the transfer primitive and the event sink. A context is created
per call and only borrowed by the contract.
"""

from dataclasses import dataclass, field
from typing import List

from tendersecure.core.host.ledger import AccountLedger


@dataclass
class ExecutionContext:
    """
    Per-call capabilities handed to contract messages.

    Attributes:
        caller: Address invoking the message
        contract_address: Address holding the escrow
        ledger: Balance book backing balance() and transfer()
        value: Funds attached to this call (already credited to the contract)
        events: Event sink, in emission order
    """
    caller: bytes
    contract_address: bytes
    ledger: AccountLedger
    value: int = 0
    events: List = field(default_factory=list)

    def balance(self) -> int:
        """Current balance held by the contract."""
        return self.ledger.get_balance(self.contract_address)

    def transfer(self, dst: bytes, amount: int) -> bool:
        """Pay `amount` from the contract to `dst`; False on failure."""
        success, _ = self.ledger.transfer(self.contract_address, dst, amount)
        return success

    def emit(self, event) -> None:
        self.events.append(event)


__all__ = ["ExecutionContext"]
