"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn solana_snapshot.api_server.app:app --host 0.0.0.0 --port 8000
"""

from solana_snapshot.api_server.server import app

__all__ = ["app"]
