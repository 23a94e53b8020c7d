# backend/scheduling/routers/slots.py
"""
Slots API endpoints.

POST /slots/day      - Bookable slots of a day
POST /slots/grid     - All candidate slots with availability flags (debug)
POST /slots/check    - Re-validate a chosen slot before booking
POST /slots/calendar - Available-slot counts per day over a range

Schedules and occupied intervals come in the request body; nothing is
stored between calls.
"""

from dataclasses import replace
from datetime import datetime, timezone
from fastapi import APIRouter

from ..config import settings
from ..schemas.slots import (
    SlotCheckRequest,
    SlotCheckResponse,
    SlotInfo,
    SlotsCalendarRequest,
    SlotsCalendarResponse,
    SlotsDayRequest,
    SlotsDayResponse,
    SlotsDayStatus,
    WorkingHours,
)
from ..services.dates import parse_calendar_date
from ..services.slots import (
    SlotCheck,
    WorkingHoursConfig,
    calculate_calendar,
    calculate_slot_grid,
    check_slot,
    generate_slots,
    get_booking_config,
)


router = APIRouter(prefix="/slots", tags=["slots"])


@router.post("/day", response_model=SlotsDayResponse)
def get_slots_day(data: SlotsDayRequest):
    """Get bookable slots for a tenant on a specific day."""
    working_hours = _working_hours(data.working_hours)

    slots = generate_slots(
        tenant_id=data.tenant_id,
        target_date=data.date,
        duration_minutes=data.duration_minutes,
        working_hours=working_hours,
        occupied_intervals=data.occupied_intervals,
        now=data.now or _now(),
    )

    return SlotsDayResponse(
        tenant_id=data.tenant_id,
        date=parse_calendar_date(data.date),
        timezone=working_hours.timezone,
        duration_minutes=data.duration_minutes,
        slots=[SlotInfo.model_validate(slot) for slot in slots],
    )


@router.post("/grid", response_model=SlotsDayResponse)
def get_slots_grid(data: SlotsDayRequest):
    """Get every candidate slot of a day with the reason it is unavailable."""
    working_hours = _working_hours(data.working_hours)

    grid = calculate_slot_grid(
        tenant_id=data.tenant_id,
        target_date=data.date,
        duration_minutes=data.duration_minutes,
        working_hours=working_hours,
        occupied_intervals=data.occupied_intervals,
        now=data.now or _now(),
    )

    return SlotsDayResponse(
        tenant_id=data.tenant_id,
        date=parse_calendar_date(data.date),
        timezone=working_hours.timezone,
        duration_minutes=data.duration_minutes,
        slots=[SlotInfo.model_validate(slot) for slot in grid],
    )


@router.post("/check", response_model=SlotCheckResponse)
def check_slot_availability(data: SlotCheckRequest):
    """Re-validate a requested slot (prevents double-booking at commit time)."""
    result = check_slot(
        tenant_id=data.tenant_id,
        start=data.start,
        end=data.end,
        working_hours=_working_hours(data.working_hours),
        occupied_intervals=data.occupied_intervals,
        now=data.now or _now(),
    )
    return SlotCheckResponse(status=result.value, available=result == SlotCheck.AVAILABLE)


@router.post("/calendar", response_model=SlotsCalendarResponse)
def get_slots_calendar(data: SlotsCalendarRequest):
    """Get calendar of available days for a tenant."""
    working_hours = _working_hours(data.working_hours)

    start_date, end_date, days = calculate_calendar(
        tenant_id=data.tenant_id,
        duration_minutes=data.duration_minutes,
        working_hours=working_hours,
        occupied_intervals=data.occupied_intervals,
        now=data.now or _now(),
        start_date=data.start_date,
        end_date=data.end_date,
    )

    booking = working_hours.booking
    return SlotsCalendarResponse(
        tenant_id=data.tenant_id,
        start_date=start_date,
        end_date=end_date,
        days=[
            SlotsDayStatus(date=day.date, has_slots=day.has_slots, open_slots_count=day.open_slots_count)
            for day in days
        ],
        lookahead_days=booking.lookahead_days,
        min_notice_minutes=booking.min_notice_minutes,
        slot_step_minutes=booking.slot_step_minutes,
    )


# ── Helpers ──────────────────────────────────────────────────────────────


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _working_hours(data: WorkingHours) -> WorkingHoursConfig:
    """Build the tenant config, filling omitted policy fields from defaults."""
    policy = {
        name: value
        for name, value in data.model_dump(
            include={"slot_step_minutes", "min_notice_minutes", "buffer_minutes", "lookahead_days"}
        ).items()
        if value is not None
    }
    booking = replace(get_booking_config(), **policy)

    return WorkingHoursConfig.from_schedule(
        data.schedule,
        timezone=data.timezone or settings.default_timezone,
        overrides=data.overrides,
        booking=booking,
    )
