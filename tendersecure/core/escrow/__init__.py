"""Escrow payout for the tender winner."""

from tendersecure.core.escrow.settlement import EscrowSettlement

__all__ = ["EscrowSettlement"]
