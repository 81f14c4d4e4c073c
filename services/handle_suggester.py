from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from app.core.config import Settings
from services.errors import (
    EmptyUpstreamResponseError,
    MalformedUpstreamContentError,
    UnexpectedFailureError,
    UpstreamRequestFailedError,
)
from services.suggestion_validator import MAX_SUGGESTIONS, Suggestion, validate_suggestions

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are HandleCraft, an expert branding assistant who crafts memorable, "
    "platform-ready social media usernames. Respond strictly with JSON."
)

PROMPT_TEMPLATE = " ".join(
    [
        'Target name: "{name}".',
        "Desired tone: {tone}.",
        "Target platform: {platform}",
        "Produce {count} unique username suggestions that respect the character rules "
        "and keep the name recognizable.",
        'Return JSON with the schema: {{ "suggestions": [ {{ "handle": string, "rationale": string }} ] }}.',
    ]
)


class Tone(str, Enum):
    professional = "professional"
    playful = "playful"
    edgy = "edgy"


class Platform(str, Enum):
    instagram = "instagram"
    twitter = "twitter"
    tiktok = "tiktok"
    youtube = "youtube"


TONE_DESCRIPTIONS: dict[Tone, str] = {
    Tone.professional: "polished, trustworthy, business-forward voice",
    Tone.playful: "creative, upbeat, quirky voice",
    Tone.edgy: "bold, daring, slightly rebellious voice",
}

PLATFORM_GUIDANCE: dict[Platform, str] = {
    Platform.instagram: (
        "optimized for Instagram handle rules "
        "(30 chars max, letters, numbers, underscores, periods)."
    ),
    Platform.twitter: (
        "optimized for X/Twitter handle rules (15 chars max, letters, numbers, underscores)."
    ),
    Platform.tiktok: (
        "optimized for TikTok handle rules "
        "(24 chars max, letters, numbers, underscores, periods)."
    ),
    Platform.youtube: (
        "optimized for YouTube handle rules "
        "(30 chars max, lowercase letters, numbers, underscores, periods)."
    ),
}


def build_messages(name: str, tone: Tone, platform: Platform) -> list[dict[str, str]]:
    prompt = PROMPT_TEMPLATE.format(
        name=name,
        tone=TONE_DESCRIPTIONS[tone],
        platform=PLATFORM_GUIDANCE[platform],
        count=MAX_SUGGESTIONS,
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


def upstream_error_message(response: httpx.Response) -> str:
    """Pull ``error.message`` from a failed completion response, else its reason phrase."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    error = payload.get("error") if isinstance(payload, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if isinstance(message, str) and message:
        return message
    return response.reason_phrase or httpx.codes.get_reason_phrase(response.status_code)


def extract_content(completion: Any) -> str:
    """First decode stage: the message content string inside the completion envelope."""
    # The SDK hands back the raw body text when the envelope itself is not JSON.
    if isinstance(completion, str):
        logger.warning("DeepSeek returned a non-JSON completion envelope")
        raise UnexpectedFailureError("Failed to contact agent.")
    choices = getattr(completion, "choices", None) or []
    message = getattr(choices[0], "message", None) if choices else None
    content = getattr(message, "content", None)
    if not isinstance(content, str) or not content:
        raise EmptyUpstreamResponseError("DeepSeek returned an empty response.")
    return content


def decode_content(content: str) -> Any:
    """Second decode stage: the model's answer, itself a JSON document."""
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise MalformedUpstreamContentError(
            "DeepSeek response was not valid JSON. Try again."
        ) from exc


class HandleSuggesterService:
    """Ask the DeepSeek chat-completion API for social media handle suggestions."""

    def __init__(
        self,
        api_key: str,
        model: str = "deepseek-chat",
        base_url: str = "https://api.deepseek.com/v1",
        temperature: float = 0.7,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )
        self._model = model
        self._temperature = temperature

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> HandleSuggesterService | None:
        api_key = settings.api_key
        if api_key is None:
            return None
        return cls(
            api_key=api_key,
            model=settings.deepseek_model,
            base_url=settings.deepseek_base_url,
            temperature=settings.temperature,
            timeout=settings.request_timeout_seconds,
            http_client=http_client,
        )

    async def suggest(self, name: str, tone: Tone, platform: Platform) -> list[Suggestion]:
        logger.info("Requesting handle suggestions tone=%s platform=%s", tone.value, platform.value)

        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                temperature=self._temperature,
                response_format={"type": "json_object"},
                messages=build_messages(name, tone, platform),
            )
        except APIStatusError as exc:
            message = upstream_error_message(exc.response)
            logger.warning("DeepSeek returned status %s: %s", exc.status_code, message)
            raise UpstreamRequestFailedError(
                f"DeepSeek request failed: {message}", status_code=exc.status_code
            ) from exc
        except APITimeoutError as exc:
            logger.warning("DeepSeek request timed out")
            raise UpstreamRequestFailedError(
                "DeepSeek request failed: request timed out.", status_code=504
            ) from exc
        except APIConnectionError as exc:
            logger.warning("DeepSeek connection failed: %s", exc)
            raise UpstreamRequestFailedError(
                "DeepSeek request failed: could not reach the API.", status_code=502
            ) from exc

        payload = decode_content(extract_content(completion))
        suggestions = validate_suggestions(payload)
        logger.info("DeepSeek produced %s usable suggestions", len(suggestions))
        return suggestions
