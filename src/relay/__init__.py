"""Anthropic relay logic for LLM streaming.

Forwards a conversation to the model provider and exposes the response as
a stream of text fragments.

Responsibilities:
    - Message filtering (empty and error-placeholder entries)
    - Per-request configuration and credential checks
    - Opening the upstream stream before the HTTP response starts
    - Typed classification of upstream failures

Maintains clean separation from the HTTP layer.
"""

from src.relay.config import RelayConfig, get_relay_config
from src.relay.errors import RelayError, classify_upstream_error
from src.relay.service import RelayService, filter_messages, get_relay_service

__all__ = [
    "RelayConfig",
    "RelayError",
    "RelayService",
    "classify_upstream_error",
    "filter_messages",
    "get_relay_config",
    "get_relay_service",
]
