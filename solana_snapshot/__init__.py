"""
Solana snapshot: token holdings and transaction retrieval over JSON-RPC.

Queries a Solana RPC endpoint for token accounts, signatures, and parsed
transactions, snapshots per-wallet holdings into a spreadsheet, stores
fetched transfers in a key-value table, and exposes an HTTP trigger and
command-line tools on top of the same service.
"""

__version__ = "0.1.0"
