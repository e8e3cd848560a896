"""
TenderSecure Bidder Registry Module.

Manages bidder identities and their proposals.
"""

from tendersecure.core.registry.bidder_registry import BidderRegistry

__all__ = ["BidderRegistry"]
