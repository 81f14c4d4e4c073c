from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from schemas.suggestions import ErrorResponse, SuggestionItem, SuggestionRequest, SuggestionResponse
from services.errors import (
    HandleSuggestionError,
    InvalidNameError,
    InvalidPayloadError,
    ServerMisconfiguredError,
    UnexpectedFailureError,
)
from services.handle_suggester import HandleSuggesterService, Platform, Tone

logger = logging.getLogger(__name__)

router = APIRouter(tags=["suggestions"])

ALLOWED_VALUES = {
    "tone": ", ".join(item.value for item in Tone),
    "platform": ", ".join(item.value for item in Platform),
}


def get_suggester(request: Request) -> HandleSuggesterService | None:
    return request.app.state.suggester


async def parse_submission(request: Request) -> SuggestionRequest:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidPayloadError("Invalid JSON payload.") from exc

    if not isinstance(payload, dict):
        raise InvalidPayloadError("Invalid JSON payload.")

    try:
        return SuggestionRequest.model_validate(payload)
    except ValidationError as exc:
        fields = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        if "name" in fields:
            raise InvalidNameError("Name must be at least two characters long.") from exc
        field = next((item for item in ("tone", "platform") if item in fields), None)
        if field is None:
            raise InvalidPayloadError("Invalid JSON payload.") from exc
        raise InvalidPayloadError(
            f"{field.capitalize()} must be one of: {ALLOWED_VALUES[field]}."
        ) from exc


@router.post(
    "/suggestions",
    response_model=SuggestionResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def create_suggestions(
    request: Request,
    suggester: HandleSuggesterService | None = Depends(get_suggester),
) -> SuggestionResponse:
    submission = await parse_submission(request)

    if suggester is None:
        raise ServerMisconfiguredError("DeepSeek API key is not configured on the server.")

    try:
        suggestions = await suggester.suggest(
            name=submission.name,
            tone=submission.tone,
            platform=submission.platform,
        )
    except HandleSuggestionError:
        raise
    except Exception as exc:
        logger.exception("Handle suggestion failed")
        raise UnexpectedFailureError("Failed to contact agent.") from exc

    return SuggestionResponse(
        suggestions=[
            SuggestionItem(handle=item.handle, rationale=item.rationale)
            for item in suggestions
        ]
    )
