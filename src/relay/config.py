"""Relay configuration with environment variable loading.

Pydantic-based configuration for the Anthropic streaming relay.
Values are read from the process environment (and a .env file) each time
a config is built, so a key added to the environment is picked up by the
next request.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

SYSTEM_PROMPT = """You are a chat assistant using Markdown for clear and structured responses. Format your responses following these guidelines:

1. Use headers for sections:
   # For main topics
   ## For subtopics
   ### For subsections

2. For lists and steps:
   - Use bullet points for unordered lists
   - Number steps when sequence matters

3. For code:
   - Use inline `code` for short snippets
   - Use triple backticks with language for blocks:
   ```python
   def example():
       return "like this"
   ```

4. For emphasis:
   - Use **bold** for important points
   - Use *italics* for emphasis
   - Use > for important quotes or callouts

5. For structured data:
   | Use | Tables |
   |-----|---------|
   | When | Needed |

6. Break up long responses with:
   - Clear section headers
   - Appropriate spacing between sections
   - Bullet points for better readability
   - Short, focused paragraphs

7. For technical content:
   - Always specify language for code blocks
   - Use inline `code` for technical terms
   - Include example usage where helpful

Keep responses concise and well-structured. Use appropriate Markdown formatting to enhance readability and understanding."""


class RelayConfig(BaseModel):
    """Configuration for the Anthropic streaming relay.

    The API key is optional here: its absence is reported per request by
    the relay service rather than at construction time.

    Attributes:
        api_key: Anthropic API key, None when not configured.
        model_name: Model identifier to use.
        max_tokens: Maximum tokens in generated response.
        timeout: Upper bound in seconds on the upstream call.
        system_prompt: Fixed system instruction sent with every request.
    """

    api_key: str | None = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY"),
        description="API key for the Anthropic API",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_MODEL", DEFAULT_MODEL),
        description="Model to use",
    )
    max_tokens: int = Field(
        default_factory=lambda: int(os.getenv("ANTHROPIC_MAX_TOKENS", "4096")),
        ge=1,
        le=64000,
        description="Maximum tokens in generated response",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("ANTHROPIC_TIMEOUT", "30")),
        gt=0.0,
        description="Upstream request timeout in seconds",
    )
    system_prompt: str = Field(
        default_factory=lambda: os.getenv("CHAT_SYSTEM_PROMPT") or SYSTEM_PROMPT,
        description="System instruction for every conversation",
    )

    @field_validator("api_key")
    @classmethod
    def normalize_api_key(cls, v: str | None) -> str | None:
        """Strip whitespace and treat a blank key as missing."""
        if v is None or not v.strip():
            return None
        return v.strip()


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.
    """
    return RelayConfig()
