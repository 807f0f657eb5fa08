"""Unit tests for individual components in isolation.

Coverage:
    - relay/: Configuration, message filtering, error classification
    - ui/ndjson: Line reassembly and record parsing
    - ui/session: Turn state machine and panel state

Uses mocks for external services when needed. Leverages pytest-check for
multiple assertions per test.
"""
