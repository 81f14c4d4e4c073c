from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from services.handle_suggester import Platform, Tone


class SuggestionRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=2)
    tone: Tone = Tone.professional
    platform: Platform = Platform.instagram

    @field_validator("tone", "platform", mode="before")
    @classmethod
    def _null_means_default(cls, value: object, info: ValidationInfo) -> object:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class SuggestionItem(BaseModel):
    handle: str
    rationale: str


class SuggestionResponse(BaseModel):
    suggestions: list[SuggestionItem] = Field(max_length=5)


class ErrorResponse(BaseModel):
    error: str
