"""
Structured logging for the snapshot service.

Use get_logger() in every module for aggregation-friendly JSON output.
"""

from solana_snapshot.snapshot_logging.logger import bind_method, get_logger

__all__ = ["bind_method", "get_logger"]
