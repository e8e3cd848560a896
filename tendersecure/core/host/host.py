"""
Host - In-process execution environment for one tender contract.

Call Processing:
---------------
1. Check the message exists and, if value is attached, that it is payable
2. Validate caller address, amount and arguments
3. Snapshot balances and contract state
4. Move attached value from the caller to the contract
5. Run the message with a fresh ExecutionContext
6. On success, append events to the log and persist if storage is attached
7. On a contract error or a failed save, restore the snapshot (value
   refunded, events dropped)

Calls are processed one at a time, in the order they are made.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from tendersecure.core.contract import (
    FALLIBLE_MESSAGES,
    MESSAGES,
    PAYABLE_MESSAGES,
    QUERY_MESSAGES,
    TenderContract,
)
from tendersecure.core.errors import CallRejected, TenderError
from tendersecure.core.events import TenderEvent
from tendersecure.core.host.context import ExecutionContext
from tendersecure.core.host.ledger import AccountLedger
from tendersecure.core.storage import StorageManager
from tendersecure.crypto import derive_contract_address, short_address
from tendersecure.utils.logger import get_call_logger, get_logger
from tendersecure.utils.validation import (
    MAX_PROPOSAL_LENGTH,
    validate_address,
    validate_amount,
    validate_proposal,
)

logger = get_logger("host")

# Zero address used as caller for read-only queries
QUERY_CALLER = bytes(20)


@dataclass
class CallOutcome:
    """Result of a dispatched contract call."""
    value: Any = None
    error: Optional[TenderError] = None
    events: List[TenderEvent] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


class Host:
    """
    Runs a single tender contract against an account ledger.

    Attributes:
        ledger: Native-asset balances
        contract: Deployed contract, None before deploy()
        contract_address: Address holding the escrow
        event_log: Committed events in emission order
    """

    def __init__(
        self,
        ledger: Optional[AccountLedger] = None,
        storage: Optional[StorageManager] = None,
        max_proposal_length: int = MAX_PROPOSAL_LENGTH,
    ):
        """
        Initialize the host.

        Args:
            ledger: Balance book. None = empty ledger.
            storage: Persistence manager. None = in-memory only.
            max_proposal_length: Longest proposal string accepted
        """
        self.ledger = ledger or AccountLedger()
        self.storage = storage
        self.max_proposal_length = max_proposal_length

        self.contract: Optional[TenderContract] = None
        self.contract_address: Optional[bytes] = None
        self.event_log: List[TenderEvent] = []

        if storage:
            self._load_from_storage()

    # =========================================================================
    # Accounts
    # =========================================================================

    def fund(self, address: bytes, amount: int) -> int:
        """Faucet: credit `amount` to `address`. Returns the new balance."""
        self._check(validate_address(address))
        self._check(validate_amount(amount))

        self._check(self.ledger.credit(address, amount))
        if self.storage:
            self.storage.save_balances(self.ledger.balances)

        logger.info(f"Funded {short_address(address)} with {amount}")
        return self.ledger.get_balance(address)

    def balance_of(self, address: bytes) -> int:
        return self.ledger.get_balance(address)

    # =========================================================================
    # Deployment
    # =========================================================================

    def deploy(self, creator: bytes, endowment: int = 0) -> TenderContract:
        """
        Deploy the tender with `creator` as owner.

        Args:
            creator: Deployer address, becomes the owner
            endowment: Initial escrow funding taken from the creator

        Raises:
            CallRejected: already deployed, bad input, or insufficient funds
        """
        if self.contract is not None:
            raise CallRejected("Contract already deployed")

        self._check(validate_address(creator, "creator"))
        self._check(validate_amount(endowment, "endowment"))

        contract_address = derive_contract_address(creator)
        balances = self.ledger.snapshot()
        success, err = self.ledger.transfer(creator, contract_address, endowment)
        if not success:
            raise CallRejected(f"Endowment failed: {err}")

        ctx = ExecutionContext(
            caller=creator,
            contract_address=contract_address,
            ledger=self.ledger,
            value=endowment,
        )
        self.contract = TenderContract.create(ctx)
        self.contract_address = contract_address

        try:
            self._persist([])
        except Exception:
            self.ledger.restore(balances)
            self.contract = None
            self.contract_address = None
            raise

        logger.info(f"Deployed tender at {short_address(contract_address)}")
        return self.contract

    # =========================================================================
    # Calls
    # =========================================================================

    def call(self, caller: bytes, message: str, *args, value: int = 0) -> CallOutcome:
        """
        Dispatch a state-changing message.

        Args:
            caller: Address invoking the message
            message: Message name (see MESSAGES)
            *args: Message arguments
            value: Funds attached to the call

        Returns:
            CallOutcome with the message result, error and emitted events

        Raises:
            CallRejected: the call never reached the contract
        """
        contract = self._require_contract()
        self._check_message(message, value)
        self._check(validate_address(caller, "caller"))
        self._check(validate_amount(value, "value"))
        self._check_args(message, args)

        call_log = get_call_logger("host", message, short_address(caller))
        balances = self.ledger.snapshot()
        state = contract.state.copy()

        success, err = self.ledger.transfer(caller, self.contract_address, value)
        if not success:
            raise CallRejected(f"Attached value failed: {err}")

        ctx = ExecutionContext(
            caller=caller,
            contract_address=self.contract_address,
            ledger=self.ledger,
            value=value,
        )
        logged = len(self.event_log)
        try:
            result = getattr(contract, message)(ctx, *args)

            if message in FALLIBLE_MESSAGES:
                result, error = result
            else:
                error = None

            if error is None:
                self.event_log.extend(ctx.events)
                self._persist(ctx.events)
        except Exception as e:
            self._revert(balances, state, logged)
            call_log.error(f"rolled back after {type(e).__name__}: {e}")
            raise

        if error is not None:
            self._revert(balances, state, logged)
            call_log.debug(f"reverted: {error.label}")
            return CallOutcome(value=result, error=error)

        call_log.debug(f"committed, value={value}, {len(ctx.events)} events")
        return CallOutcome(value=result, events=list(ctx.events))

    def query(self, message: str, *args, caller: bytes = QUERY_CALLER) -> Any:
        """Run a read-only message and return its value."""
        contract = self._require_contract()
        if message not in MESSAGES:
            raise CallRejected(f"Unknown message: {message}")
        if message not in QUERY_MESSAGES:
            raise CallRejected(f"{message} is not a query")
        self._check_args(message, args)

        ctx = ExecutionContext(
            caller=caller,
            contract_address=self.contract_address,
            ledger=self.ledger,
        )
        return getattr(contract, message)(ctx, *args)

    def stats(self) -> dict:
        """Contract statistics through a read-only context."""
        contract = self._require_contract()
        ctx = ExecutionContext(
            caller=QUERY_CALLER,
            contract_address=self.contract_address,
            ledger=self.ledger,
        )
        return contract.stats(ctx)

    # =========================================================================
    # Checks
    # =========================================================================

    def _require_contract(self) -> TenderContract:
        if self.contract is None:
            raise CallRejected("No contract deployed")
        return self.contract

    @staticmethod
    def _check(result) -> None:
        is_valid, err = result
        if not is_valid:
            raise CallRejected(err)

    def _revert(self, balances, state, logged: int) -> None:
        """Restore the pre-call snapshot and drop events logged by the call."""
        self.ledger.restore(balances)
        self.contract.state = state
        del self.event_log[logged:]

    def _check_message(self, message: str, value: int) -> None:
        if message not in MESSAGES:
            raise CallRejected(f"Unknown message: {message}")
        if value and message not in PAYABLE_MESSAGES:
            raise CallRejected(f"{message} is not payable")

    def _check_args(self, message: str, args: tuple) -> None:
        if message == "enter":
            if len(args) != 1:
                raise CallRejected("enter takes exactly one proposal")
            self._check(validate_proposal(args[0], self.max_proposal_length))
        elif message in ("pick_bidder", "get_proposal_for_bidder"):
            if len(args) != 1:
                raise CallRejected(f"{message} takes exactly one address")
            self._check(validate_address(args[0]))
        elif args:
            raise CallRejected(f"{message} takes no arguments")

    # =========================================================================
    # Persistence
    # =========================================================================

    def _load_from_storage(self) -> None:
        """Load host and contract state from storage manager."""
        self.ledger.restore(self.storage.load_balances())
        self.event_log = self.storage.load_events()

        state = self.storage.load_state()
        if state is not None:
            self.contract = TenderContract(state)
            self.contract_address = self.storage.get_contract_address()

        logger.info(f"Loaded host: {len(self.ledger.balances)} accounts, "
                    f"{len(self.event_log)} events, deployed={self.contract is not None}")

    def _persist(self, events: List[TenderEvent]) -> None:
        if not self.storage:
            return
        self.storage.save_state(
            self.contract.state,
            contract_address=self.contract_address,
            balances=self.ledger.balances,
            events=events,
        )

    def __repr__(self) -> str:
        deployed = short_address(self.contract_address) if self.contract_address else None
        return f"Host(contract={deployed}, events={len(self.event_log)}, ledger={self.ledger!r})"


__all__ = ["Host", "CallOutcome", "QUERY_CALLER"]
