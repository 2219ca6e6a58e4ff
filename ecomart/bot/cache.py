import functools
import logging

LOGGER = logging.getLogger(__name__)

_CACHED_FUNCTIONS = []


def bot_cache(func):
    """
    Memoize a factory so the same instance is handed out for the same arguments.
    Used for the process-wide singletons (config, chatbot, chat session).
    """
    cached = functools.cache(func)
    _CACHED_FUNCTIONS.append(cached)
    return cached


def bot_cache_clear():
    for cached in _CACHED_FUNCTIONS:
        cached.cache_clear()
    LOGGER.debug(f"Cleared {len(_CACHED_FUNCTIONS)} cached factories")
