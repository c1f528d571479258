"""SessionObserver port — domain events emitted by the session orchestrator."""

from typing import Protocol


class SessionObserver(Protocol):
    """Observer port for session domain events.

    Implementations may log to structlog or record for tests.
    """

    def session_started(self, model: str, tool_count: int) -> None: ...

    def session_ended(self, turns: int) -> None: ...

    def model_probe_failed(self, model: str, reason: str) -> None: ...

    def turn_started(self, turn_idx: int) -> None: ...

    def turn_completed(self, turn_idx: int, rounds: int) -> None: ...

    def turn_rolled_back(self, turn_idx: int, restored_length: int) -> None: ...

    def model_request_completed(self, stage: str, duration_ms: int, tool_calls: int) -> None: ...

    def model_request_failed(self, stage: str, reason: str) -> None: ...

    def arguments_undecodable(self, tool_name: str, raw_arguments: str) -> None: ...

    def parameters_remapped(self, tool_name: str, mapping: dict[str, str]) -> None: ...

    def tool_call_skipped(self, tool_name: str, reason: str) -> None: ...

    def recovery_started(self, tool_name: str, error_text: str) -> None: ...

    def recovery_stalled(self, tool_name: str) -> None: ...

    def tool_round_limit_reached(self, turn_idx: int, max_rounds: int) -> None: ...
