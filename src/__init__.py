"""Chat Relay - streaming Markdown chat backed by the Anthropic API.

Combines FastAPI for HTTP streaming, the Anthropic SDK for generation,
NiceGUI for the chat interface, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - relay: Upstream model call, filtering and error classification
    - ui: Web interface and stream consumer
    - models: Request/response schemas
"""

__version__ = "0.1.0"
