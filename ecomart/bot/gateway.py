from abc import ABC, abstractmethod
from pydantic import BaseModel
from typing import List, Optional
import logging

LOGGER = logging.getLogger(__name__)


class TurnRequest(BaseModel):
    role: str = "user"
    content: str


class ToolCall(BaseModel):
    id: str
    name: str
    arguments: str = "{}"


class RequiredAction(BaseModel):
    tool_calls: List[ToolCall] = []


class RunHandle(BaseModel):
    id: str
    thread_id: str
    status: str
    required_action: Optional[RequiredAction] = None

    def is_completed(self) -> bool:
        return self.status == "completed"

    def needs_action(self) -> bool:
        return self.required_action is not None and len(self.required_action.tool_calls) > 0


class ThreadMessage(BaseModel):
    id: str
    role: str
    created_at: int
    text: str = ""


class ToolResult(BaseModel):
    tool_call_id: str
    output: str


class AssistantGateway(ABC):
    """
    Transport binding to the remote assistant service. Every call is one
    network round-trip and may raise TransportError.
    """

    @abstractmethod
    async def create_thread(self, first_message: TurnRequest) -> str:
        """
        Creates a new thread seeded with the first message.
        Returns the thread_id assigned by the service.
        """
        pass

    @abstractmethod
    async def append_message(self, thread_id: str, message: TurnRequest) -> None:
        pass

    @abstractmethod
    async def create_run(self, thread_id: str) -> RunHandle:
        pass

    @abstractmethod
    async def get_run(self, thread_id: str, run_id: str) -> RunHandle:
        pass

    @abstractmethod
    async def submit_tool_results(self, thread_id: str, run_id: str, results: List[ToolResult]) -> None:
        """
        Submits the outputs for the pending tool calls of a run in one request.
        """
        pass

    @abstractmethod
    async def list_messages(self, thread_id: str) -> List[ThreadMessage]:
        pass

    @abstractmethod
    async def delete_thread(self, thread_id: str) -> None:
        """
        Deletes the thread. A thread the service no longer knows about counts
        as deleted.
        """
        pass
