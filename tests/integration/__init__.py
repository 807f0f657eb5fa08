"""Integration tests for components working together as a system.

Coverage:
    - Relay endpoint over real HTTP requests (ASGI transport)
    - Error responses for configuration, validation and upstream failures
    - Chat client turns end to end against the relay app
    - Stream framing edge cases with controlled byte chunks

The upstream model is faked unless ANTHROPIC_API_KEY is set.
"""
