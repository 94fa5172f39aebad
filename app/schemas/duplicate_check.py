"""Duplicate check request and response."""

from __future__ import annotations

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class DuplicateCheckRequest(BaseModel):
    request_id: str
    message_id: str
    conversation_id: str
    cpa_id: str

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    @field_validator("request_id", "message_id", "conversation_id", "cpa_id")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v


class DuplicateCheckResponse(BaseModel):
    request_id: str
    is_duplicate: bool

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
