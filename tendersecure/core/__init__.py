"""Tender contract core: state machine, escrow and host environment"""
from tendersecure.core.errors import TenderError, CallRejected
from tendersecure.core.state import BiddingPhase, TenderState
from tendersecure.core.events import ProposalSubmitted, Won
from tendersecure.core.contract import TenderContract

__all__ = [
    "TenderError",
    "CallRejected",
    "BiddingPhase",
    "TenderState",
    "ProposalSubmitted",
    "Won",
    "TenderContract",
]
