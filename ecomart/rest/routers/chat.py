from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse, RedirectResponse
import logging

from ecomart.bot.chatbot import Chatbot, ChatSession
from ecomart.bot.errors import TransportError, ProtocolError, ToolError
from ecomart.rest.models.chat import ChatRequest
from ecomart.rest.dependencies.providers import get_chatbot, get_chat_session

router = APIRouter(prefix="/chat", tags=["Chat"])
LOGGER = logging.getLogger(__name__)


@router.get("", response_model=List[str])
async def get_history(
    chatbot: Chatbot = Depends(get_chatbot),
    session: ChatSession = Depends(get_chat_session)
):
    """Get the conversation history, oldest message first."""
    try:
        return await chatbot.history(session)
    except TransportError as e:
        LOGGER.error(f"Error fetching history for {session}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Could not fetch chat history.")


@router.post("", response_class=PlainTextResponse)
async def ask(
    request_body: ChatRequest,
    chatbot: Chatbot = Depends(get_chatbot),
    session: ChatSession = Depends(get_chat_session)
):
    """Answer a question and return the assistant's reply as text."""
    LOGGER.info(f"Chat request on {session}: {request_body.question[:100]}")
    try:
        return await chatbot.ask(session, request_body.question)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except TransportError as e:
        LOGGER.error(f"Assistant service failed during chat on {session}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="The assistant service is unavailable.")
    except (ProtocolError, ToolError) as e:
        LOGGER.error(f"Error answering question on {session}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not answer the question.")


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_conversation(
    chatbot: Chatbot = Depends(get_chatbot),
    session: ChatSession = Depends(get_chat_session)
):
    """Clear the conversation and delete its thread."""
    try:
        await chatbot.reset(session)
    except TransportError as e:
        LOGGER.error(f"Error clearing conversation {session}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Could not clear the conversation.")


@router.get("/clear")
async def clear_and_redirect(
    chatbot: Chatbot = Depends(get_chatbot),
    session: ChatSession = Depends(get_chat_session)
):
    """Clear the conversation and go back to the chat."""
    await clear_conversation(chatbot=chatbot, session=session)
    return RedirectResponse(url="/chat", status_code=status.HTTP_303_SEE_OTHER)
