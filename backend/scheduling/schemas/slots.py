# backend/scheduling/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date, datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class WorkingHours(BaseModel):
    """Tenant working hours and booking policy (omitted fields use defaults)."""
    timezone: Optional[str] = None
    schedule: dict[str, Any] = Field(
        default_factory=dict,
        description='Weekly hours: {"mon": [["09:00", "17:00"]], "sat": null, ...} or {"0": [...]}',
    )
    overrides: dict[str, Any] = Field(
        default_factory=dict,
        description='Per-date hours: {"2024-12-31": [["10:00", "15:00"]], "2025-01-01": null}',
    )

    slot_step_minutes: Optional[int] = Field(None, gt=0)
    min_notice_minutes: Optional[int] = Field(None, ge=0)
    buffer_minutes: Optional[int] = Field(None, ge=0)
    lookahead_days: Optional[int] = Field(None, ge=0)


class OccupiedInterval(BaseModel):
    """Booking, hold or external busy block. Naive timestamps are tenant-local."""
    start: datetime
    end: datetime
    source: Optional[str] = None


class SlotsDayRequest(BaseModel):
    """Request for slots of a day."""
    tenant_id: str
    date: str = Field(description="Date in YYYY-MM-DD format")
    duration_minutes: int
    working_hours: WorkingHours
    occupied_intervals: list[OccupiedInterval] = Field(default_factory=list)
    now: Optional[datetime] = Field(None, description="Defaults to request time")


class SlotInfo(BaseModel):
    """A single slot."""
    start: datetime
    end: datetime
    time: str  # "HH:MM" tenant-local
    available: bool = True
    reason: Optional[str] = None

    model_config = {"from_attributes": True}


class SlotsDayResponse(BaseModel):
    """Slots of a day in the tenant's zone."""
    tenant_id: str
    date: date
    timezone: str
    duration_minutes: int
    slots: list[SlotInfo]


class SlotCheckRequest(BaseModel):
    """Re-validation of a chosen slot before committing a booking."""
    tenant_id: str
    start: datetime
    end: datetime
    working_hours: WorkingHours
    occupied_intervals: list[OccupiedInterval] = Field(default_factory=list)
    now: Optional[datetime] = None


class SlotCheckResponse(BaseModel):
    status: str
    available: bool


class SlotsCalendarRequest(BaseModel):
    """Request for slots calendar."""
    tenant_id: str
    duration_minutes: int
    working_hours: WorkingHours
    occupied_intervals: list[OccupiedInterval] = Field(default_factory=list)
    start_date: Optional[str] = None  # Defaults to today
    end_date: Optional[str] = None    # Defaults to today + lookahead_days
    now: Optional[datetime] = None


class SlotsDayStatus(BaseModel):
    """Status of a single day in calendar."""
    date: date
    has_slots: bool
    open_slots_count: int = 0

    model_config = {"from_attributes": True}


class SlotsCalendarResponse(BaseModel):
    """Response with calendar of available days."""
    tenant_id: str
    start_date: date
    end_date: date
    days: list[SlotsDayStatus]

    # Metadata
    lookahead_days: int
    min_notice_minutes: int
    slot_step_minutes: int = Field(description="Grid step in minutes")
