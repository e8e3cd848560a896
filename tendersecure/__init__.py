"""
TenderSecure

A sealed-procurement tender contract:
- Owner-controlled bidding window
- Proposal registry referencing off-chain documents
- Escrow payout to the selected winner
- In-process host with SQLite persistence
"""
