# backend/scheduling/routers/recurrence.py
"""
Recurrence API endpoints.

POST /recurrence/expand  - Occurrence dates of a rule
GET  /recurrence/presets - Standard rules for a start date
"""

import logging

from fastapi import APIRouter, Query

from ..schemas.recurrence import (
    RecurrenceExpandRequest,
    RecurrenceExpandResponse,
    RecurrencePresetRead,
)
from ..services.recurrence import build_presets, describe_rule, expand_recurrence, normalize_rule

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recurrence", tags=["recurrence"])


@router.post("/expand", response_model=RecurrenceExpandResponse)
def expand(data: RecurrenceExpandRequest):
    """Expand a recurrence rule into YYYY-MM-DD dates."""
    occurrences = expand_recurrence(data.start_date, data.rule)
    rule = normalize_rule(data.rule)

    logger.info(f"Expanded {rule.frequency.value} rule to {len(occurrences)} occurrences")

    return RecurrenceExpandResponse(
        start_date=occurrences[0].isoformat(),
        occurrences=[d.isoformat() for d in occurrences],
        total=len(occurrences),
        description=describe_rule(occurrences[0], rule),
        rule=rule.to_wire(),
    )


@router.get("/presets", response_model=list[RecurrencePresetRead])
def list_presets(start_date: str = Query(..., description="Date in YYYY-MM-DD format")):
    """Standard recurrence choices for an event starting on start_date."""
    return [
        RecurrencePresetRead(key=preset.key, label=preset.label, rule=preset.rule.to_wire())
        for preset in build_presets(start_date)
    ]
