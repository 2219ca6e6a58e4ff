from ecomart.bot.cache import bot_cache
from ecomart.bot.chatbot import Chatbot, ChatSession
from ecomart.bot.config import Config


def get_chatbot() -> Chatbot:
    """FastAPI dependency to get the process-wide Chatbot."""
    return Config.config().get_chatbot()


@bot_cache
def _default_session() -> ChatSession:
    return ChatSession()


def get_chat_session() -> ChatSession:
    """FastAPI dependency to get the single conversation served over HTTP."""
    return _default_session()
