import json
from pathlib import Path
from typing import Dict, List, Optional

from tendersecure.core.events import TenderEvent, event_from_dict
from tendersecure.core.state import BiddingPhase, TenderState
from tendersecure.core.storage.sqlite_adapter import SQLiteAdapter
from tendersecure.crypto import bytes_to_hex, hex_to_bytes
from tendersecure.utils.logger import get_logger

logger = get_logger("storage.manager")


class StorageManager:
    """
    Manages persistent storage for a tender host.

    Coordinates data persistence using SQLite adapter.
    Handles:
    - Contract state (owner, phase, bidder list, proposal map)
    - Host balances
    - Event log
    """

    def __init__(self, data_dir: Path, db_name: str = "tender.db"):
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / db_name
        self.adapter = SQLiteAdapter(self.db_path)

        logger.info(f"StorageManager initialized at {self.db_path}")

    def close(self):
        self.adapter.close()

    # =========================================================================
    # Contract State
    # =========================================================================

    def get_contract_address(self) -> Optional[bytes]:
        value = self.adapter.get_meta("contract_address")
        return hex_to_bytes(value) if value else None

    def load_state(self) -> Optional[TenderState]:
        """Load contract state, or None if nothing was deployed."""
        owner = self.adapter.get_meta("owner")
        if owner is None:
            return None

        state = TenderState(
            owner=hex_to_bytes(owner),
            phase=BiddingPhase(int(self.adapter.get_meta("phase") or 0)),
            bidders=self.adapter.get_bidders(),
            proposals=self.adapter.get_proposals(),
        )
        logger.info(f"Loaded tender state: phase={state.phase.name}, {len(state.bidders)} entries")
        return state

    def save_state(
        self,
        state: TenderState,
        contract_address: Optional[bytes] = None,
        balances: Optional[Dict[bytes, int]] = None,
        events: Optional[List[TenderEvent]] = None,
    ):
        """
        Persist the full contract state in one transaction.

        Args:
            state: Contract state to write
            contract_address: Written on first save
            balances: Host balance book to write alongside
            events: Newly emitted events to append
        """
        meta = {
            "owner": bytes_to_hex(state.owner),
            "phase": str(int(state.phase)),
        }
        if contract_address is not None:
            meta["contract_address"] = bytes_to_hex(contract_address)

        rows = [(e.kind, json.dumps(e.to_dict())) for e in events or []]

        self.adapter.commit_state(
            meta=meta,
            bidders=state.bidders,
            proposals=state.proposals,
            balances=balances,
            events=rows,
        )
        logger.debug(f"Saved tender state: {len(state.bidders)} entries, {len(rows)} new events")

    # =========================================================================
    # Host State
    # =========================================================================

    def load_balances(self) -> Dict[bytes, int]:
        return self.adapter.get_balances()

    def save_balances(self, balances: Dict[bytes, int]):
        self.adapter.save_balances(balances)

    def load_events(self) -> List[TenderEvent]:
        """Load the event log in emission order."""
        return [
            event_from_dict(kind, json.loads(payload))
            for kind, payload in self.adapter.get_events()
        ]
