"""
Chat API endpoints - Handle conversational interactions.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from .deps import get_assistant
from ..agents import HealthAssistant
from ..config import settings
from ..core import current_time, reference_time
from ..models import ChatMessage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/message", response_model=ChatMessage)
async def send_message(
    message: ChatMessage,
    assistant: HealthAssistant = Depends(get_assistant),
    now: Optional[datetime] = Query(None, description="Reference time for relative dates (defaults to now)")
):
    """
    Send a chat message and get the assistant's reply.

    Args:
        message: Chat message from user
        assistant: Health assistant
        now: Optional reference time, mainly for reproducible answers;
             a value without an offset is read in the configured timezone

    Returns:
        ChatMessage: Assistant reply; always 200, data problems are explained in the text
    """
    reply = await assistant.answer(message.content, reference_time(now, settings.timezone))

    return ChatMessage(
        role="assistant",
        content=reply,
        timestamp=current_time(settings.timezone)
    )
