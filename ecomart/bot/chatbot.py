from ecomart.bot.gateway import AssistantGateway, TurnRequest, RunHandle, ToolResult
from ecomart.bot.functions import ToolDispatcher
from ecomart.bot.errors import ProtocolError, RunCancelledError
from typing import List, Optional
from enum import Enum
import asyncio
import logging

LOGGER = logging.getLogger(__name__)


class RunPhase(Enum):
    POLLING = "polling"
    NEEDS_TOOL = "needs_tool"
    DONE = "done"


class ChatSession:
    """
    One conversation with the assistant. Holds the remote thread id from the
    first turn until the conversation is reset.
    """

    def __init__(self, thread_id: Optional[str] = None):
        self.thread_id = thread_id

    def __str__(self):
        return f"ChatSession: thread[{self.thread_id}]"

    def has_thread(self) -> bool:
        return self.thread_id is not None


class Chatbot:
    """
    Answers questions by running the remote assistant over a session's thread.

    Each turn appends the question to the thread (creating the thread on the
    first turn), starts a run and polls it every ``poll_interval`` seconds.
    When the run asks for a function call the matching local tool is executed
    through the dispatcher, its output is submitted and polling resumes until
    the run is completed. The newest message of the thread is the answer.

    Sessions are owned by the caller and turns on the same session must not
    overlap.
    """

    def __init__(self,
                 gateway: AssistantGateway,
                 dispatcher: ToolDispatcher,
                 poll_interval: float = 10.0,
                 max_polls: Optional[int] = None):
        self.gateway = gateway
        self.dispatcher = dispatcher
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        LOGGER.debug(f"Initialized Chatbot with tools {dispatcher.tool_names()} polling every {poll_interval}s")

    async def ask(self, session: ChatSession, user_text: str, cancel_event: Optional[asyncio.Event] = None) -> str:
        if user_text is None or not user_text.strip():
            raise ValueError("Question must not be empty")

        turn = TurnRequest(role="user", content=user_text)
        await self._submit_turn(session, turn)

        run = await self.gateway.create_run(session.thread_id)
        LOGGER.info(f"Started run {run.id} on thread {session.thread_id}")
        await self._complete_run(session.thread_id, run, cancel_event)

        messages = await self.gateway.list_messages(session.thread_id)
        if not messages:
            LOGGER.error(f"No messages found on thread {session.thread_id} after run {run.id} completed")
            raise ProtocolError(f"Thread {session.thread_id} has no messages after run {run.id} completed")
        latest = sorted(messages, key=lambda message: message.created_at, reverse=True)[0]
        return latest.text

    async def history(self, session: ChatSession) -> List[str]:
        if not session.has_thread():
            return []
        messages = await self.gateway.list_messages(session.thread_id)
        # service lists newest first; reversing keeps same-second messages in order
        return [message.text for message in sorted(reversed(messages), key=lambda message: message.created_at)]

    async def reset(self, session: ChatSession) -> None:
        if not session.has_thread():
            LOGGER.debug("Reset requested without an active thread")
            return
        thread_id = session.thread_id
        await self.gateway.delete_thread(thread_id)
        session.thread_id = None
        LOGGER.info(f"Reset conversation, deleted thread {thread_id}")

    async def _submit_turn(self, session: ChatSession, turn: TurnRequest) -> None:
        if not session.has_thread():
            session.thread_id = await self.gateway.create_thread(turn)
            LOGGER.info(f"Created thread {session.thread_id}")
        else:
            await self.gateway.append_message(session.thread_id, turn)
            LOGGER.debug(f"Appended {turn.role} message to thread {session.thread_id}")

    async def _complete_run(self, thread_id: str, run: RunHandle, cancel_event: Optional[asyncio.Event] = None) -> RunHandle:
        phase = RunPhase.POLLING
        polls = 0
        while phase is not RunPhase.DONE:
            if phase is RunPhase.NEEDS_TOOL:
                await self._resolve_required_action(thread_id, run)
                phase = RunPhase.POLLING
                continue

            if self.max_polls is not None and polls >= self.max_polls:
                raise ProtocolError(f"Run {run.id} did not complete after {polls} polls")
            await self._wait(run, cancel_event)
            polls += 1
            run = await self.gateway.get_run(thread_id, run.id)
            phase = self._next_phase(run)
        LOGGER.info(f"Run {run.id} completed after {polls} polls")
        return run

    def _next_phase(self, run: RunHandle) -> RunPhase:
        if run.is_completed():
            return RunPhase.DONE
        if run.needs_action():
            return RunPhase.NEEDS_TOOL
        match run.status:
            case "failed" | "cancelled" | "expired" | "incomplete":
                LOGGER.error(f"Run {run.id} ended with status {run.status}")
                raise ProtocolError(f"Run {run.id} ended with status '{run.status}'")
            case "requires_action":
                raise ProtocolError(f"Run {run.id} requires an action without any function tool calls")
            case _:
                LOGGER.debug(f"Run {run.id} status: {run.status}")
                return RunPhase.POLLING

    async def _wait(self, run: RunHandle, cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is None:
            await asyncio.sleep(self.poll_interval)
            return
        if not cancel_event.is_set():
            try:
                await asyncio.wait_for(cancel_event.wait(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                return
        LOGGER.warning(f"Cancelled while waiting for run {run.id}")
        raise RunCancelledError(f"Cancelled while waiting for run {run.id}")

    async def _resolve_required_action(self, thread_id: str, run: RunHandle) -> None:
        results = []
        for tool_call in run.required_action.tool_calls:
            LOGGER.info(f"Run {run.id} requires function {tool_call.name} ({tool_call.id})")
            output = self.dispatcher.dispatch(tool_call.name, tool_call.arguments)
            results.append(ToolResult(tool_call_id=tool_call.id, output=output))
        await self.gateway.submit_tool_results(thread_id, run.id, results)
