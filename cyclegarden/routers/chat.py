"""Garden companion chat endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from cyclegarden.dependencies import Chatbot, Engine
from cyclegarden.models.garden import ChatMessageCreate, ChatReplyRead

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatReplyRead)
async def send_message(engine: Engine, chatbot: Chatbot, body: ChatMessageCreate) -> Any:
    status = engine.status()
    reply = await chatbot.ask(body.message, status.phase, status.cycle_day, status.cycle_length)
    return ChatReplyRead(
        reply=reply.text,
        fallback=reply.fallback,
        phase=status.phase,
        cycle_day=status.cycle_day,
    )
