"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException

from cyclegarden.config import Settings, get_settings
from cyclegarden.engine.errors import SetupRequiredError, ValidationError
from cyclegarden.engine.garden import GardenEngine
from cyclegarden.services.chatbot import GardenChatbot
from cyclegarden.services.store import JsonGardenStore


@lru_cache
def get_engine() -> GardenEngine:
    """Return the process-wide engine, loading state from the data dir once."""
    return GardenEngine(JsonGardenStore(get_settings().data_dir))


@lru_cache
def get_chatbot() -> GardenChatbot:
    return GardenChatbot(get_settings())


def as_http_error(exc: ValidationError | SetupRequiredError) -> HTTPException:
    """Map a user-facing engine error to an HTTP response."""
    if isinstance(exc, SetupRequiredError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=422, detail=str(exc))


# Annotated shortcuts for route signatures
Engine = Annotated[GardenEngine, Depends(get_engine)]
Chatbot = Annotated[GardenChatbot, Depends(get_chatbot)]
AppSettings = Annotated[Settings, Depends(get_settings)]
