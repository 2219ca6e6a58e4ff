class ChatbotError(Exception):
    """Base class for every error raised while answering a chat turn."""


class TransportError(ChatbotError):
    """
    The remote assistant service could not be reached or rejected a call.
    These are never retried automatically.
    """


class ProtocolError(ChatbotError):
    """
    The remote state does not match what the run protocol expects, e.g. no
    messages after a completed run or a run that ended in a terminal failure.
    """


class RunCancelledError(ProtocolError):
    """The caller cancelled the turn while the run was being polled."""


class ToolError(ChatbotError):
    pass


class UnknownToolError(ToolError):

    def __init__(self, name: str):
        super().__init__(f"No tool is registered with the name '{name}'")
        self.name = name


class ArgumentDecodingError(ToolError):

    def __init__(self, name: str, reason: str):
        super().__init__(f"Could not decode arguments for tool '{name}': {reason}")
        self.name = name
        self.reason = reason
