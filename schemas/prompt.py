"""Prompt schemas."""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, ConfigDict

from schemas.redaction import ScrubOptions


Language = Literal["de", "en"]
InsightKind = Literal["evening", "morning"]


class PromptConfig(BaseModel):
    """Per-call options for prompt composition. None means use the settings default."""

    language: Optional[Language] = Field(None, description="Prompt language")
    redact_pii: Optional[bool] = Field(None, description="Scrub PII from the user data block")
    scrub_options: Optional[ScrubOptions] = Field(None, description="Custom placeholders for redaction")


class Prompt(BaseModel):
    """A system/user prompt pair ready to be sent, with its estimated cost."""

    system_prompt: str = Field(..., description="Persona and output-shape instructions")
    user_prompt: str = Field(..., description="Rendered user data and task")
    estimated_token_count: int = Field(..., ge=0, description="Deterministic token estimate")
    language: Language = Field(..., description="Prompt language")
    kind: InsightKind = Field("evening", description="Insight kind, selects the fallback pool")
    redactions: Dict[str, str] = Field(
        default_factory=dict, description="Placeholder -> original text applied while composing"
    )

    model_config = ConfigDict(frozen=True)
