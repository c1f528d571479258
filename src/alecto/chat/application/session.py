"""ChatSession — drives one interactive conversation between the user, the model and the tools."""

import time
from dataclasses import dataclass

from alecto.chat.application.diagnostics import build_recovery_message
from alecto.chat.domain.console import EXIT_COMMAND, ChatConsole
from alecto.chat.domain.message import (
    AssistantMessage,
    SystemMessage,
    ToolCallRequest,
    ToolMessage,
    UserMessage,
)
from alecto.chat.domain.model import ChatModel
from alecto.chat.domain.observer import SessionObserver
from alecto.chat.domain.state import SessionState
from alecto.chat.domain.transcript import Transcript
from alecto.chat.infrastructure.errors import (
    ModelConnectionRefusedError,
    ModelError,
    ModelRequestFailedError,
)
from alecto.config.domain.session import SessionConfig
from alecto.core.errors import AlectoError
from alecto.tools.application.catalog import ToolCatalog
from alecto.tools.application.executor import ToolExecutor
from alecto.tools.application.reconciler import (
    ParameterReconciler,
    apply_parameter_mapping,
)
from alecto.tools.domain.arguments import decode_arguments, is_decodable
from alecto.tools.domain.result import ToolResult
from alecto.tools.infrastructure.errors import ToolExecutionError, ToolNotFoundError

_STAGE_TURN = "turn"
_STAGE_RECOVERY = "recovery"
_STAGE_FINAL = "final"

type ToolBatch = tuple[ToolCallRequest, ...]


@dataclass(frozen=True)
class _Invocation:
    """One executed tool call together with the renaming applied to its arguments."""

    call: ToolCallRequest
    mapping: dict[str, str]
    result: ToolResult


class ChatSession:
    """Owns the transcript and runs the request/response cycle for every user turn.

    Within a turn, tool calls are handled in rounds. A round runs one batch of
    calls from the model and yields the next batch, if any:

    - a soft failure is explained back to the model at once; its reply is the
      next batch unless it repeats the failing call unchanged;
    - otherwise, after the whole batch, the model is asked for a final answer;
      it is the next batch only if it names a tool not yet tried this turn.

    Rounds per turn are capped by ``SessionConfig.max_tool_rounds``.
    """

    def __init__(
        self,
        model: ChatModel,
        catalog: ToolCatalog,
        executor: ToolExecutor,
        reconciler: ParameterReconciler,
        console: ChatConsole,
        config: SessionConfig,
        observer: SessionObserver,
        transcript: Transcript | None = None,
    ) -> None:
        self._model = model
        self._catalog = catalog
        self._executor = executor
        self._reconciler = reconciler
        self._console = console
        self._config = config
        self._observer = observer
        self._transcript = (
            transcript
            if transcript is not None
            else Transcript([SystemMessage(content=config.system_prompt)])
        )
        self._state = SessionState.AWAITING_INPUT
        self._turns = 0

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def state(self) -> SessionState:
        return self._state

    async def probe_model(self) -> bool:
        """Send a throwaway request to check the model server; report, never raise."""
        try:
            await self._model.chat(messages=[UserMessage(content="test")], tools=[])
        except ModelError as exc:
            self._observer.model_probe_failed(model=self._model.model, reason=exc.reason)
            self._console.show_warning(
                f"Could not reach model '{self._model.model}'. Is Ollama running? ({exc.reason})"
            )
            return False
        return True

    async def run(self) -> None:
        """Prompt for input until the user types "exit"."""
        self._observer.session_started(model=self._model.model, tool_count=len(self._catalog))
        self._console.show_notice('Chat started. Type "exit" to end the conversation.')
        try:
            while True:
                self._state = SessionState.AWAITING_INPUT
                text = await self._console.prompt()
                if text.strip().lower() == EXIT_COMMAND:
                    break
                if not text.strip():
                    continue

                try:
                    await self.handle_turn(text)
                except ModelConnectionRefusedError:
                    self._console.show_error(
                        "Lost connection to the model server. Please ensure Ollama is running."
                    )
                    self._console.show_notice(
                        "You can:\n"
                        "1. Start Ollama and type your message again\n"
                        '2. Type "exit" to quit'
                    )
                except AlectoError as exc:
                    self._console.show_error(f"Error processing input: {exc}")
        finally:
            self._state = SessionState.DONE
            self._observer.session_ended(turns=self._turns)

    async def handle_turn(self, text: str) -> None:
        """Run one user turn to completion.

        Raises:
            ModelError: if the opening model request fails; the transcript is
                first restored to its pre-turn length.
            ModelConnectionRefusedError: if the model server goes away mid-turn.
        """
        self._turns += 1
        turn_idx = self._turns
        self._observer.turn_started(turn_idx=turn_idx)

        checkpoint = len(self._transcript)
        self._transcript.append(UserMessage(content=text))
        self._state = SessionState.MODEL_TURN
        try:
            response = await self._request_model(stage=_STAGE_TURN)
        except ModelError:
            self._transcript.rollback(checkpoint)
            self._state = SessionState.ERROR
            self._observer.turn_rolled_back(turn_idx=turn_idx, restored_length=checkpoint)
            raise

        self._transcript.append(response)
        if not response.tool_calls:
            self._console.show_answer(response.content)
            self._finish_turn(turn_idx=turn_idx, rounds=0)
            return

        try:
            rounds = await self._run_tool_rounds(turn_idx=turn_idx, batch=response.tool_calls)
        except ModelConnectionRefusedError:
            self._state = SessionState.ERROR
            raise
        self._finish_turn(turn_idx=turn_idx, rounds=rounds)

    async def _run_tool_rounds(self, turn_idx: int, batch: ToolBatch) -> int:
        tried: set[str] = set()
        rounds = 0
        while batch:
            if rounds >= self._config.max_tool_rounds:
                self._observer.tool_round_limit_reached(
                    turn_idx=turn_idx, max_rounds=self._config.max_tool_rounds
                )
                self._console.show_warning(
                    f"Stopped after {self._config.max_tool_rounds} tool rounds without a final answer."
                )
                break
            rounds += 1
            self._state = SessionState.TOOL_TURN
            tried.update(call.name for call in batch)
            batch = await self._run_batch(batch=batch, tried=tried)
        return rounds

    async def _run_batch(self, batch: ToolBatch, tried: set[str]) -> ToolBatch:
        self._console.show_notice("Model is using tools to help answer...")
        for call in batch:
            invocation = await self._invoke(call)
            if invocation is None:
                continue
            if invocation.result.is_soft_failure:
                # The rest of the batch is abandoned; recovery decides what runs next.
                return await self._recover(invocation)
            self._transcript.append(
                ToolMessage(content=invocation.result.text, tool_call_id=call.name)
            )
        return await self._finalize(tried=tried)

    async def _invoke(self, call: ToolCallRequest) -> _Invocation | None:
        if not is_decodable(call.arguments):
            self._observer.arguments_undecodable(
                tool_name=call.name, raw_arguments=str(call.arguments)
            )
        arguments = decode_arguments(call.arguments)
        mapping = self._reconciler.suggest(call.name, arguments)
        if mapping:
            self._observer.parameters_remapped(tool_name=call.name, mapping=mapping)

        self._console.show_tool_use(call.name)
        try:
            result = await self._executor.execute(
                call.name,
                apply_parameter_mapping(arguments, mapping),
                timeout_ms=self._config.tool_timeout_ms,
            )
        except (ToolNotFoundError, ToolExecutionError) as exc:
            self._observer.tool_call_skipped(tool_name=call.name, reason=str(exc))
            self._console.show_warning(str(exc))
            return None
        return _Invocation(call=call, mapping=mapping, result=result)

    async def _recover(self, invocation: _Invocation) -> ToolBatch:
        failed = invocation.call
        self._observer.recovery_started(tool_name=failed.name, error_text=invocation.result.text)
        self._transcript.append(
            ToolMessage(
                content=build_recovery_message(
                    tool_name=failed.name,
                    error_text=invocation.result.text,
                    schema=self._catalog.get(failed.name),
                    suggested_mappings=invocation.mapping,
                ),
                tool_call_id=failed.name,
            )
        )

        response = await self._request_model_absorbing(stage=_STAGE_RECOVERY)
        if response is None:
            return ()
        self._transcript.append(response)

        if not response.tool_calls:
            if response.content:
                self._console.show_answer(response.content)
            return ()
        if any(not call.same_call_as(failed) for call in response.tool_calls):
            return response.tool_calls

        self._observer.recovery_stalled(tool_name=failed.name)
        self._console.show_notice(
            f"The model repeated the failing call to '{failed.name}' unchanged; stopping here."
        )
        return ()

    async def _finalize(self, tried: set[str]) -> ToolBatch:
        response = await self._request_model_absorbing(stage=_STAGE_FINAL)
        if response is None:
            return ()
        self._transcript.append(response)
        if response.content:
            self._console.show_answer(response.content)

        if any(call.name not in tried for call in response.tool_calls):
            return response.tool_calls
        return ()

    async def _request_model(self, stage: str) -> AssistantMessage:
        start = time.monotonic()
        try:
            response = await self._model.chat(
                messages=self._transcript.messages, tools=self._catalog.schemas
            )
        except ModelError as exc:
            self._observer.model_request_failed(stage=stage, reason=exc.reason)
            raise
        self._observer.model_request_completed(
            stage=stage,
            duration_ms=int((time.monotonic() - start) * 1000),
            tool_calls=len(response.tool_calls),
        )
        return response

    async def _request_model_absorbing(self, stage: str) -> AssistantMessage | None:
        """Request the model mid-turn: a refused connection propagates, other failures end the turn."""
        self._state = SessionState.MODEL_TURN
        try:
            return await self._request_model(stage=stage)
        except ModelConnectionRefusedError:
            raise
        except ModelRequestFailedError as exc:
            self._console.show_error(f"Error getting {stage} response: {exc.reason}")
            return None

    def _finish_turn(self, turn_idx: int, rounds: int) -> None:
        self._state = SessionState.DONE
        self._observer.turn_completed(turn_idx=turn_idx, rounds=rounds)
