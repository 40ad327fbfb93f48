"""Pydantic schemas for reading-state API endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReadingStateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    idx: int
    wpm: int
    extensions: dict[str, Any] = Field(default_factory=dict)
    extensions_version: int = 1


class ReadingStateUpdate(BaseModel):
    idx: int = Field(..., ge=0)
    wpm: int = Field(600, ge=200, le=1200)
    extensions: dict[str, Any] | None = None
