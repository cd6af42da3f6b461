"""Pydantic schemas for API key management."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fanout.auth import ALL_SCOPES


class ApiKeyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Descriptive name for this key")
    scopes: list[str] = Field(
        default_factory=lambda: ["integrations"],
        description="Allowed scopes: integrations, admin",
    )

    @field_validator("scopes")
    @classmethod
    def validate_scopes(cls, v: list[str]) -> list[str]:
        invalid = set(v) - set(ALL_SCOPES)
        if invalid:
            raise ValueError(
                f"Invalid scopes: {', '.join(sorted(invalid))}. "
                f"Valid: {', '.join(sorted(ALL_SCOPES))}"
            )
        return list(dict.fromkeys(v))


class ApiKeyResponse(BaseModel):
    id: uuid.UUID
    name: str
    key_prefix: Optional[str] = None
    scopes: list[str]
    is_active: bool
    created_at: datetime
    last_used_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ApiKeyCreated(ApiKeyResponse):
    raw_key: str = Field(..., description="Shown once; store it now")
