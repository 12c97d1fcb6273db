"""Garden companion chat backed by the Gemini ``generateContent`` API.

Each message is a one-shot request: a fixed system prompt filled in with the
user's current phase and cycle day, followed by the user's text.  Any
failure (no API key, network error, non-2xx status, unexpected payload) is
turned into a friendly local reply.  The chat never reads or writes cycle
or plant state.

API base: https://generativelanguage.googleapis.com/v1beta

Endpoint used:
    /models/{model}:generateContent
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from cyclegarden.config import Settings, get_settings
from cyclegarden.engine.base import Phase
from cyclegarden.engine.errors import ExternalServiceError

logger = logging.getLogger("cyclegarden.chatbot")

SYSTEM_PROMPT_TEMPLATE = (
    "You are Berry, a warm and supportive garden companion inside a cycle-tracking app. "
    "The user is currently in the {phase} phase, on day {cycle_day} of a "
    "{cycle_length}-day cycle. Offer gentle, practical self-care suggestions that suit "
    "this phase. Keep replies under 120 words, never diagnose, and suggest talking to a "
    "healthcare professional for anything medical.\n\n"
    "User: {user_message}"
)

FALLBACK_REPLIES: dict[Phase, str] = {
    Phase.menstrual: (
        "I can't reach my garden notes right now, but this is a good time to rest, "
        "stay warm and drink plenty of water. 🌧️"
    ),
    Phase.follicular: (
        "I can't reach my garden notes right now, but your energy is building. "
        "It's a lovely time to try something new. 🌱"
    ),
    Phase.ovulation: (
        "I can't reach my garden notes right now, but you're in full bloom. "
        "Enjoy the extra energy and stay hydrated. 🌸"
    ),
    Phase.luteal: (
        "I can't reach my garden notes right now, but be gentle with yourself. "
        "Slow down, nourish yourself and get good sleep. 🍂"
    ),
}


@dataclass(frozen=True)
class ChatReply:
    """A chat response.

    Attributes:
        text:     Reply to show in the conversation.
        fallback: True when the local fallback was used instead of the service.
    """

    text: str
    fallback: bool = False


def build_prompt(phase: Phase, cycle_day: int, cycle_length: int, user_message: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(
        phase=Phase.parse(phase).value,
        cycle_day=cycle_day,
        cycle_length=cycle_length,
        user_message=user_message.strip(),
    )


class GardenChatbot:
    """Stateless client for the garden companion.

    Usage::

        bot = GardenChatbot()
        reply = await bot.ask("Any tips for cramps?", Phase.menstrual, 2, 28)
        print(reply.text)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the chatbot.

        Args:
            settings:    App settings (API key, model, timeout).
            http_client: Optional pre-configured httpx client (for testing).
        """
        self._settings = settings or get_settings()
        self._http_client = http_client

    async def ask(
        self,
        user_message: str,
        phase: Phase,
        cycle_day: int,
        cycle_length: int,
    ) -> ChatReply:
        """Send one message and return the reply, falling back locally on failure."""
        prompt = build_prompt(phase, cycle_day, cycle_length, user_message)
        try:
            text = await self._generate(prompt)
        except ExternalServiceError as exc:
            logger.warning("Chat service unavailable, using fallback reply: %s", exc)
            return ChatReply(text=FALLBACK_REPLIES[Phase.parse(phase)], fallback=True)
        return ChatReply(text=text)

    async def _generate(self, prompt: str) -> str:
        """POST the prompt to Gemini and extract the reply text.

        Raises:
            ExternalServiceError: On any configuration, transport or payload problem.
        """
        s = self._settings
        if not s.gemini_api_key:
            raise ExternalServiceError("GEMINI_API_KEY is not configured")

        url = f"{s.gemini_api_base}/models/{s.gemini_model}:generateContent"
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        params = {"key": s.gemini_api_key}

        try:
            if self._http_client:
                response = await self._http_client.post(
                    url, params=params, json=body, timeout=s.gemini_timeout_seconds
                )
            else:
                async with httpx.AsyncClient(timeout=s.gemini_timeout_seconds) as client:
                    response = await client.post(url, params=params, json=body)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                f"Gemini returned HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ExternalServiceError(f"Gemini request failed: {exc}") from exc

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ExternalServiceError("Unexpected Gemini response shape") from exc
        if not isinstance(text, str) or not text.strip():
            raise ExternalServiceError("Gemini returned an empty reply")
        return text.strip()
