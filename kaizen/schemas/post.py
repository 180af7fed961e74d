"""
API Schemas — Request and Response Models

Pydantic models for the Kaizen API.

Field limits here are transport guards only. Channel length bands are
enforced by the classifier (too_short) and the caller-side ceiling check
(too long), so a 600-character topic reaches the classifier and gets a
descriptor instead of a bare 422.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field

_TRANSPORT_MAX = 5_000
_CHANNEL = "^(topic|audience|edit_instruction)$"
_VERDICT_VALUES = "safe | too_short | gibberish | off_topic | profanity | irrelevant"


class ErrorDescriptorModel(BaseModel):
    title: str
    message: str
    icon: str
    suggestions: list[str]


# ============================================================
# VALIDATE
# ============================================================

class ValidateRequest(BaseModel):
    """POST /validate request body."""
    channel: str = Field(..., pattern=_CHANNEL,
                         description="Field being validated.")
    text: str = Field("", max_length=_TRANSPORT_MAX,
                      description="Raw field value, untrimmed.")

    model_config = {"json_schema_extra": {"examples": [
        {"channel": "topic", "text": "How I grew from junior to senior developer in 2 years"},
    ]}}


class ValidateResponse(BaseModel):
    """POST /validate response body."""
    channel: str
    verdict: str = Field(..., description=_VERDICT_VALUES)
    safe: bool
    too_long: bool
    inline_hint: str
    error: Optional[ErrorDescriptorModel] = None


class FormValidateRequest(BaseModel):
    """POST /validate/form request body (submit-time check)."""
    topic: str = Field("", max_length=_TRANSPORT_MAX)
    audience: str = Field("", max_length=_TRANSPORT_MAX)


class FormValidateResponse(BaseModel):
    """POST /validate/form response body."""
    allowed: bool
    blocking_field: Optional[str] = None
    verdict: Optional[str] = None
    too_long: bool = False
    error: Optional[ErrorDescriptorModel] = None
    inline: dict[str, str]


# ============================================================
# GENERATE / EDIT / SUGGEST
# ============================================================

class GenerateRequest(BaseModel):
    """POST /generate request body."""
    topic: str = Field(..., max_length=_TRANSPORT_MAX)
    audience: str = Field(..., max_length=_TRANSPORT_MAX)
    tone: str = Field("Professional",
                      pattern="^(Professional|Storyteller|Contrarian|Direct|Super Chill)$")
    length: str = Field("medium", pattern="^(short|medium|long)$")
    hook_style: str = Field(
        "auto", pattern="^(bold_statement|question|statistic|story|contrarian|auto)$",
    )
    model: Optional[str] = Field(
        None, pattern=r"^(gemini-2\.5-pro|gemini-2\.5-flash|gemini-2\.5-flash-lite)$",
        description="Generation model; omitted uses the server default.",
    )


class EditRequest(BaseModel):
    """POST /edit request body."""
    current_text: str = Field(..., min_length=1, max_length=20_000)
    action: str = Field(
        ...,
        pattern="^(shorten|refine|retry|add_hashtags|add_emoji|add_cta|custom_selection)$",
    )
    topic: str = Field("", max_length=_TRANSPORT_MAX)
    selected_text: Optional[str] = Field(None, max_length=20_000)
    instruction: Optional[str] = Field(None, max_length=_TRANSPORT_MAX)


class PostResponse(BaseModel):
    """POST /generate and POST /edit response body."""
    content: str


class SuggestRequest(BaseModel):
    """POST /suggest request body."""
    text: str = Field("", max_length=_TRANSPORT_MAX)


class SuggestResponse(BaseModel):
    suggestion: str


class ModelOption(BaseModel):
    value: str
    description: str


class ModelsResponse(BaseModel):
    """GET /models response body."""
    default: str
    models: list[ModelOption]


class RejectionResponse(BaseModel):
    """422 body when a collaborator refuses input."""
    detail: str
    field: str
    verdict: Optional[str] = None
    too_long: bool = False
    error: ErrorDescriptorModel


# ============================================================
# META
# ============================================================

class ChannelThresholds(BaseModel):
    min_length: int
    max_length: int


class ThresholdsResponse(BaseModel):
    channels: dict[str, ChannelThresholds]
    vocabulary: dict[str, int]
    autocomplete_min_chars: int
    debounce_ms: int


class HealthResponse(BaseModel):
    status: str
    version: str
    llm_provider: str
    llm_configured: bool
    suggestion_cache: dict
