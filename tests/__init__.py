"""Test package for Chat Relay.

Structure:
    - unit/: Individual function and class tests
    - integration/: Endpoint and client workflow tests

The Anthropic client is replaced by an in-memory fake (see conftest.py);
tests marked requires_api_key call the real API when a key is set.
Leverages pytest with pytest-check for soft assertions.
"""
