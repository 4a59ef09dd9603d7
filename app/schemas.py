"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

from services.sample_data import MAX_SAMPLE_COUNT


def _is_json_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class ReadingCreate(BaseModel):
    """Body posted by the sensor for a new reading."""

    distance: float = Field(default=None, validate_default=True)

    @field_validator("distance", mode="before")
    @classmethod
    def _check_distance(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Distance value is required")
        if not _is_json_number(value) or value < 0:
            raise ValueError("Distance must be a non-negative number")
        return value


class SampleDataRequest(BaseModel):
    count: Optional[int] = Field(
        default=None, description=f"Number of readings to generate, at most {MAX_SAMPLE_COUNT}."
    )

    @field_validator("count", mode="before")
    @classmethod
    def _check_count(cls, value: Any) -> Any:
        if value is None:
            return None
        if not _is_json_number(value) or value != int(value) or value < 1:
            raise ValueError("Count must be a positive integer")
        if value > MAX_SAMPLE_COUNT:
            raise ValueError(f"Count must not exceed {MAX_SAMPLE_COUNT}")
        return int(value)


class ReadingResponse(BaseModel):
    id: int
    distance: float
    created_at: datetime


class CreatedReadingResponse(ReadingResponse):
    message: str = "Distance recorded successfully"


class StatsResponse(BaseModel):
    """Summary over every stored reading; timestamps are null when the table is empty."""

    total_records: int = Field(..., ge=0)
    avg_distance: Union[str, float]
    min_distance: float
    max_distance: float
    first_record: Optional[datetime] = None
    last_record: Optional[datetime] = None


class DeleteResponse(BaseModel):
    message: str
    id: int


class DeleteAllResponse(BaseModel):
    message: str
    deleted_count: int = Field(..., ge=0)


class SampleDataResponse(BaseModel):
    message: str
    count: int = Field(..., ge=0)


class HealthResponse(BaseModel):
    status: str
    uptime: float
    database: str
    timestamp: datetime
    error: Optional[str] = None
    details: Optional[str] = None


class ErrorResponse(BaseModel):
    """Flat error body shared by every failing route."""

    error: str
    details: Optional[str] = None
