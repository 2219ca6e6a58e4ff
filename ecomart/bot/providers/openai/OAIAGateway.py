from ecomart.bot.gateway import AssistantGateway, TurnRequest, RunHandle, RequiredAction, ToolCall, ThreadMessage, ToolResult
from ecomart.bot.errors import TransportError
from contextlib import contextmanager
from typing_extensions import override
from typing import List
from openai import AsyncOpenAI
import openai
import logging

LOGGER = logging.getLogger(__name__)


@contextmanager
def _transport(action: str):
    try:
        yield
    except openai.OpenAIError as e:
        LOGGER.error(f"Error trying to {action}: {e}", exc_info=True)
        raise TransportError(f"Failed to {action}: {e}") from e


class OAIAGateway(AssistantGateway):
    """
    Binds the assistant gateway to the OpenAI Assistants API (threads, messages,
    runs) for a single assistant.
    """

    def __init__(self, openai_client: AsyncOpenAI, assistant_id: str, message_limit: int = 100):
        self.openai_client = openai_client
        self.assistant_id = assistant_id
        self.message_limit = message_limit
        LOGGER.debug(f"Initialized OAIAGateway with assistant id: {self.assistant_id}")

    @staticmethod
    def to_run_handle(run) -> RunHandle:
        required_action = None
        if run.required_action is not None:
            tool_calls = []
            for tool_call in run.required_action.submit_tool_outputs.tool_calls:
                if tool_call.type == "function":
                    tool_calls.append(ToolCall(id=tool_call.id,
                                               name=tool_call.function.name,
                                               arguments=tool_call.function.arguments or "{}"))
                else:
                    LOGGER.error(f"Unhandled tool call type: {tool_call.type}")
            required_action = RequiredAction(tool_calls=tool_calls)
        return RunHandle(id=run.id, thread_id=run.thread_id, status=run.status, required_action=required_action)

    @staticmethod
    def to_thread_message(message) -> ThreadMessage:
        text = ""
        for part in message.content:
            if part.type == "text":
                text = part.text.value
                break
            LOGGER.debug(f"Skipping message part of type {part.type} in message {message.id}")
        return ThreadMessage(id=message.id, role=message.role, created_at=message.created_at, text=text)

    @override
    async def create_thread(self, first_message: TurnRequest) -> str:
        with _transport("create thread"):
            openai_thread = await self.openai_client.beta.threads.create(
                messages=[{"role": first_message.role, "content": first_message.content}]
            )
        LOGGER.info(f"Successfully created thread {openai_thread.id} from provider")
        return openai_thread.id

    @override
    async def append_message(self, thread_id: str, message: TurnRequest) -> None:
        with _transport(f"append message to thread {thread_id}"):
            msg = await self.openai_client.beta.threads.messages.create(
                thread_id=thread_id,
                role=message.role,
                content=message.content,
            )
        LOGGER.debug(f"Created new {message.role} message {msg.id} on thread {thread_id}")

    @override
    async def create_run(self, thread_id: str) -> RunHandle:
        with _transport(f"create run on thread {thread_id}"):
            run = await self.openai_client.beta.threads.runs.create(
                thread_id=thread_id,
                assistant_id=self.assistant_id,
            )
        LOGGER.debug(f"Created run {run.id} on thread {thread_id} with status {run.status}")
        return self.to_run_handle(run)

    @override
    async def get_run(self, thread_id: str, run_id: str) -> RunHandle:
        with _transport(f"retrieve run {run_id}"):
            run = await self.openai_client.beta.threads.runs.retrieve(run_id, thread_id=thread_id)
        return self.to_run_handle(run)

    @override
    async def submit_tool_results(self, thread_id: str, run_id: str, results: List[ToolResult]) -> None:
        tool_outputs = [{"tool_call_id": result.tool_call_id, "output": result.output} for result in results]
        with _transport(f"submit tool outputs for run {run_id}"):
            await self.openai_client.beta.threads.runs.submit_tool_outputs(
                run_id,
                thread_id=thread_id,
                tool_outputs=tool_outputs,
            )
        LOGGER.debug(f"Submitted {len(tool_outputs)} tool outputs for run {run_id}")

    @override
    async def list_messages(self, thread_id: str) -> List[ThreadMessage]:
        messages = []
        with _transport(f"list messages of thread {thread_id}"):
            async for message in self.openai_client.beta.threads.messages.list(thread_id=thread_id, limit=self.message_limit):
                messages.append(self.to_thread_message(message))
        LOGGER.debug(f"Retrieved {len(messages)} messages for thread {thread_id}")
        return messages

    @override
    async def delete_thread(self, thread_id: str) -> None:
        try:
            await self.openai_client.beta.threads.delete(thread_id)
            LOGGER.info(f"Successfully deleted thread {thread_id} from openai")
        except openai.NotFoundError:
            LOGGER.warning(f"Thread {thread_id} not found on provider")
        except openai.OpenAIError as e:
            LOGGER.error(f"Error deleting thread {thread_id} from provider: {e}", exc_info=True)
            raise TransportError(f"Failed to delete thread {thread_id}: {e}") from e
