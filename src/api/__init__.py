"""FastAPI endpoints for the chat relay.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Relay a conversation, streaming newline-delimited JSON
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
