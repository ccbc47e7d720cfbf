"""PII redaction schemas."""

from typing import Dict, Optional

from pydantic import BaseModel, Field, ConfigDict


class CustomPlaceholders(BaseModel):
    """Base tokens overriding the default [NAME]/[LOCATION]/[EMAIL]/[PHONE]."""

    name: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)


class ScrubOptions(BaseModel):
    """Options for a single scrub call."""

    custom_placeholders: CustomPlaceholders = Field(default_factory=CustomPlaceholders)


class RedactionResult(BaseModel):
    """Scrubbed text plus the mapping needed to restore it."""

    scrubbed_text: str = Field(..., description="Text with PII replaced by placeholders")
    original_map: Dict[str, str] = Field(
        default_factory=dict, description="Placeholder -> original substring, in order of appearance"
    )

    model_config = ConfigDict(frozen=True)
