"""Structlog implementation of the SessionObserver port."""

import structlog


class StructlogSessionObserver:
    """Delegates session domain events to structlog.

    Satisfies the SessionObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def session_started(self, model: str, tool_count: int) -> None:
        self._log.info("session.started", model=model, tool_count=tool_count)

    def session_ended(self, turns: int) -> None:
        self._log.info("session.ended", turns=turns)

    def model_probe_failed(self, model: str, reason: str) -> None:
        self._log.warning("session.model_probe_failed", model=model, reason=reason)

    def turn_started(self, turn_idx: int) -> None:
        self._log.debug("session.turn_started", turn_idx=turn_idx)

    def turn_completed(self, turn_idx: int, rounds: int) -> None:
        self._log.info("session.turn_completed", turn_idx=turn_idx, rounds=rounds)

    def turn_rolled_back(self, turn_idx: int, restored_length: int) -> None:
        self._log.warning(
            "session.turn_rolled_back",
            turn_idx=turn_idx,
            restored_length=restored_length,
        )

    def model_request_completed(self, stage: str, duration_ms: int, tool_calls: int) -> None:
        self._log.info(
            "session.model_request_completed",
            stage=stage,
            duration_ms=duration_ms,
            tool_calls=tool_calls,
        )

    def model_request_failed(self, stage: str, reason: str) -> None:
        self._log.error("session.model_request_failed", stage=stage, reason=reason)

    def arguments_undecodable(self, tool_name: str, raw_arguments: str) -> None:
        self._log.warning(
            "session.arguments_undecodable", tool_name=tool_name, raw_arguments=raw_arguments
        )

    def parameters_remapped(self, tool_name: str, mapping: dict[str, str]) -> None:
        self._log.info("session.parameters_remapped", tool_name=tool_name, mapping=mapping)

    def tool_call_skipped(self, tool_name: str, reason: str) -> None:
        self._log.warning("session.tool_call_skipped", tool_name=tool_name, reason=reason)

    def recovery_started(self, tool_name: str, error_text: str) -> None:
        self._log.info("session.recovery_started", tool_name=tool_name, error_text=error_text)

    def recovery_stalled(self, tool_name: str) -> None:
        self._log.warning(
            "session.recovery_stalled",
            tool_name=tool_name,
            message="Model repeated the failing call unchanged",
        )

    def tool_round_limit_reached(self, turn_idx: int, max_rounds: int) -> None:
        self._log.warning(
            "session.tool_round_limit_reached", turn_idx=turn_idx, max_rounds=max_rounds
        )
