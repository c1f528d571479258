"""Session configuration — system prompt, tool timeout and recovery bounds."""

from pydantic import BaseModel, Field

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Please provide clear, accurate, and relevant "
    "responses to user queries. If you need to use tools to help answer a question, "
    "explain what you're doing."
)
DEFAULT_TOOL_TIMEOUT_MS = 30_000
DEFAULT_MAX_TOOL_ROUNDS = 10


class SessionConfig(BaseModel, frozen=True):
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    tool_timeout_ms: int = Field(default=DEFAULT_TOOL_TIMEOUT_MS, gt=0)
    # Upper bound on tool rounds (batches plus recovery retries) in one user turn.
    max_tool_rounds: int = Field(default=DEFAULT_MAX_TOOL_ROUNDS, ge=1)
