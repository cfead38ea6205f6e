"""
Knife Hit - Database Models

Pydantic models that mirror the Supabase table schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class StoredValue(BaseModel):
    """Mirrors the `kv_store` table: one JSON value per profile and key."""

    profile_id: str = Field(max_length=64)
    key: str = Field(max_length=64)
    value: Any = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
