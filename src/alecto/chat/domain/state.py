"""SessionState — where the session orchestrator is within a user turn."""

from enum import StrEnum


class SessionState(StrEnum):
    AWAITING_INPUT = "awaiting_input"
    MODEL_TURN = "model_turn"
    TOOL_TURN = "tool_turn"
    DONE = "done"
    ERROR = "error"
