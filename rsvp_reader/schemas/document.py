"""Pydantic schemas for document-related API endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SchemaBase(BaseModel):
    """Base schema with ORM attribute support."""

    model_config = ConfigDict(from_attributes=True)


class TokenPreviewRequest(BaseModel):
    text: str


class TokenPreviewResponse(BaseModel):
    tokens: list[str]
    total: int


class DocumentCreateRequest(BaseModel):
    title: str | None = Field(None, max_length=500)
    text: str = Field(..., min_length=1)


class DocumentRead(SchemaBase):
    id: UUID
    title: str
    tokens: list[str]
    orp_indexes: list[int]
    total_tokens: int
    tokenizer_version: str
    estimated_reading_time: str | None = None
    created_at: datetime | None = None
