import logging
LOGGER = logging.getLogger(__name__)

import json
from typing import List, Optional
from pydantic import BaseModel
from ecomart.bot.functions import Functions, Tool
from ecomart.bot.gateway import AssistantGateway, TurnRequest, RunHandle, RequiredAction, ToolCall, ThreadMessage, ToolResult


class NumbersArgs(BaseModel):
  a: int
  b: int


class MyFunctions(Functions):

  def __init__(self, *args, **kwargs):
    super().__init__(*args, **kwargs)
    self.calls = []

  def use_numbers(self, args: NumbersArgs):
    self.calls.append(args)
    return json.dumps({"value": args.a - args.b})

  def get_tools(self) -> List[Tool]:
    return [Tool(name="use_numbers", description="Subtracts b from a", args_model=NumbersArgs, handler=self.use_numbers)]


def step(status: str, tool_calls: Optional[List[ToolCall]] = None):
  return (status, tool_calls)


class ScriptedGateway(AssistantGateway):
  """
  In-memory assistant service. Runs follow the scripted steps returned by
  successive get_run calls and post ``reply`` once they complete.
  """

  def __init__(self, reply: str = "Hello from the assistant"):
    self.reply = reply
    self.messages = {}
    self.created_threads = []
    self.deleted_threads = []
    self.submissions = []
    self.get_run_calls = 0
    self.script = []
    self.messages_override = None
    self._clock = 0
    self._runs = 0

  def script_run(self, *steps):
    self.script = list(steps)

  def _add_message(self, thread_id, role, text):
    self._clock += 1
    self.messages[thread_id].append(ThreadMessage(id=f"msg_{self._clock}", role=role, created_at=self._clock, text=text))

  async def create_thread(self, first_message: TurnRequest) -> str:
    thread_id = f"thread_{len(self.created_threads) + 1}"
    self.created_threads.append(thread_id)
    self.messages[thread_id] = []
    self._add_message(thread_id, first_message.role, first_message.content)
    return thread_id

  async def append_message(self, thread_id: str, message: TurnRequest) -> None:
    self._add_message(thread_id, message.role, message.content)

  async def create_run(self, thread_id: str) -> RunHandle:
    self._runs += 1
    return RunHandle(id=f"run_{self._runs}", thread_id=thread_id, status="queued")

  async def get_run(self, thread_id: str, run_id: str) -> RunHandle:
    self.get_run_calls += 1
    status, tool_calls = self.script.pop(0) if self.script else step("completed")
    if status == "completed":
      self._add_message(thread_id, "assistant", self.reply)
    required_action = RequiredAction(tool_calls=tool_calls) if tool_calls else None
    return RunHandle(id=run_id, thread_id=thread_id, status=status, required_action=required_action)

  async def submit_tool_results(self, thread_id: str, run_id: str, results: List[ToolResult]) -> None:
    self.submissions.append((thread_id, run_id, list(results)))

  async def list_messages(self, thread_id: str) -> List[ThreadMessage]:
    if self.messages_override is not None:
      return list(self.messages_override)
    # newest first, like the remote service
    return list(reversed(self.messages[thread_id]))

  async def delete_thread(self, thread_id: str) -> None:
    self.deleted_threads.append(thread_id)
    self.messages.pop(thread_id, None)
