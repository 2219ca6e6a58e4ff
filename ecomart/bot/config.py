import logging
LOGGER = logging.getLogger(__name__)

from dotenv import load_dotenv
from openai import AsyncOpenAI, AsyncAzureOpenAI
from typing import Optional
from ecomart.bot.cache import bot_cache
import os

load_dotenv()


class Config:

    chatbot = None

    # credentials and the assistant id are read once here and are not
    # exposed for mutation afterwards
    def __init__(self):
        timeout = float(os.getenv('OPENAI_TIMEOUT', '60'))
        api_key = os.getenv('OPENAI_API_KEY')
        if api_key:
            self._openai_client = AsyncOpenAI(api_key=api_key, project=os.getenv('OPENAI_PROJECT'), timeout=timeout)
            LOGGER.debug("Using OpenAI API")
        elif os.getenv('AZURE_OPENAI_API_KEY'):
            self._openai_client = AsyncAzureOpenAI(
                api_key=os.getenv("AZURE_OPENAI_API_KEY"),
                azure_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT"),
                api_version=os.getenv('AZURE_OPENAI_API_VERSION', "2024-08-01-preview"),
                timeout=timeout,
            )
            LOGGER.debug("Using Azure OpenAI API")
        else:
            raise ValueError("API key is not set. Please ensure the OPENAI_API_KEY or AZURE_OPENAI_API_KEY is set in the .env file.")

        self._assistant_id = os.getenv('OPENAI_ASSISTANT_ID')
        if not self._assistant_id:
            raise ValueError("Assistant id is not set. Please ensure OPENAI_ASSISTANT_ID is set in the .env file.")

        self._poll_interval = float(os.getenv('ECOMART_POLL_INTERVAL', '10'))
        if self._poll_interval < 0:
            raise ValueError(f"ECOMART_POLL_INTERVAL must not be negative: {self._poll_interval}")

        max_polls = os.getenv('ECOMART_MAX_POLLS')
        self._max_polls = int(max_polls) if max_polls else None
        LOGGER.info(f"Created Config instance for assistant {self._assistant_id} polling every {self._poll_interval}s")

    @classmethod
    @bot_cache
    def config(cls):
        return Config()

    def get_openai_client(self):
        return self._openai_client

    def get_assistant_id(self) -> str:
        return self._assistant_id

    def get_poll_interval(self) -> float:
        return self._poll_interval

    def get_max_polls(self) -> Optional[int]:
        return self._max_polls

    def get_chatbot(self):
        """
        Have to lazy init the chatbot here to avoid circular imports.
        """
        if self.chatbot is None:
            from ecomart.bot.chatbot import Chatbot
            from ecomart.bot.functions import ShippingFunctions, ToolDispatcher
            from ecomart.bot.providers.openai.OAIAGateway import OAIAGateway
            gateway = OAIAGateway(openai_client=self.get_openai_client(), assistant_id=self.get_assistant_id())
            dispatcher = ToolDispatcher(ShippingFunctions(config=self))
            self.chatbot = Chatbot(gateway=gateway,
                                   dispatcher=dispatcher,
                                   poll_interval=self.get_poll_interval(),
                                   max_polls=self.get_max_polls())
        return self.chatbot
