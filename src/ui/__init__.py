"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat message display with live rendering of the pending reply
    - NDJSON stream consumption from the relay endpoint
    - Per-page conversation state and turn state machine
    - Toggleable assistant panel

The page module imports NiceGUI; the session, reader and client modules
do not, so they can be used and tested on their own.
"""
