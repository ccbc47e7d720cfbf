"""Insight request/response schemas."""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, ConfigDict

from schemas.prompt import Prompt


class FallbackReason(str, Enum):
    """Why a locally synthesized response was returned instead of a model answer."""

    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    INVALID_REQUEST = "invalid_request"
    SERVER_ERROR = "server_error"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNKNOWN = "unknown"


class InsightRequest(BaseModel):
    """A composed prompt addressed to one user's budget."""

    prompt: Prompt
    user_id: str = Field(..., min_length=1, description="User whose budget is charged")
    request_id: Optional[str] = Field(None, description="Optional correlation id for logs")


class TokenUsage(BaseModel):
    """Token accounting reported by the API."""

    prompt_tokens: int = Field(0, ge=0)
    completion_tokens: int = Field(0, ge=0)
    total_tokens: int = Field(0, ge=0)


class InsightResponse(BaseModel):
    """A genuine model answer."""

    content: str = Field(..., description="Generated insight text")
    model: str = Field("", description="Model that produced the answer")
    usage: TokenUsage = Field(default_factory=TokenUsage)
    finish_reason: str = Field("", description="Finish reason reported by the API")
    is_fallback: Literal[False] = False

    model_config = ConfigDict(frozen=True)


class FallbackResponse(BaseModel):
    """Locally generated substitute content tagged with the failure reason."""

    content: str = Field(..., description="Localized fallback insight")
    is_fallback: Literal[True] = True
    reason: FallbackReason = Field(..., description="Classified failure reason")

    model_config = ConfigDict(frozen=True, use_enum_values=False)


InsightResult = Union[InsightResponse, FallbackResponse]
