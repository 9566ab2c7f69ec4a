"""Pydantic schemas for presenting decoded readings."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from models.records import PowerStatus


class ReadingView(BaseModel):
    """Display fields derived from a decoded reading."""

    id: int = Field(..., ge=0, le=255)
    timestamp: int
    recorded_at: datetime = Field(..., description="Timestamp as a UTC datetime.")
    whole_degrees: int = Field(..., ge=0)
    tenths_digit: int = Field(..., ge=0, le=9)
    power_status: PowerStatus
    checksum: int = Field(..., ge=0, le=255)
    valid: bool
    source: Optional[str] = Field(
        default=None, description="Address the datagram arrived from, if known."
    )

    @property
    def temperature_label(self) -> str:
        return f"{self.whole_degrees}.{self.tenths_digit}"

    @property
    def validity_label(self) -> str:
        return "valid" if self.valid else "invalid"
