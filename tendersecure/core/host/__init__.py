"""
In-process execution environment.

Supplies what a chain would: caller identity, balances, the transfer
primitive, an event log and durable storage.
"""
from tendersecure.core.host.ledger import AccountLedger
from tendersecure.core.host.context import ExecutionContext
from tendersecure.core.host.host import Host, CallOutcome, QUERY_CALLER

__all__ = [
    "AccountLedger",
    "ExecutionContext",
    "Host",
    "CallOutcome",
    "QUERY_CALLER",
]
