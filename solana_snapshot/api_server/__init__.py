"""
HTTP trigger surface.

Thin FastAPI layer over SolanaTransactionService: runs the snapshot job
and the token transaction pipeline on demand.
"""
