# backend/scheduling/schemas/recurrence.py
"""
Pydantic schemas for recurrence API.

Rule fields are loosely typed on purpose: stored rules with unknown values
are normalized by the service, not rejected here.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class RecurrenceEnd(BaseModel):
    after_occurrences: Optional[Any] = Field(None, alias="afterOccurrences")
    on_date: Optional[Any] = Field(None, alias="onDate")

    model_config = ConfigDict(populate_by_name=True)


class RecurrenceRuleSchema(BaseModel):
    frequency: Optional[Any] = None
    interval: Optional[Any] = None
    days_of_week: Optional[Any] = Field(None, alias="daysOfWeek")
    monthly_mode: Optional[Any] = Field(None, alias="monthlyMode")
    end: Optional[RecurrenceEnd] = None

    model_config = ConfigDict(populate_by_name=True)


class RecurrenceExpandRequest(BaseModel):
    start_date: str = Field(alias="startDate", description="Date in YYYY-MM-DD format")
    rule: RecurrenceRuleSchema

    model_config = ConfigDict(populate_by_name=True)


class RecurrenceExpandResponse(BaseModel):
    start_date: str = Field(serialization_alias="startDate")
    occurrences: list[str]
    total: int
    description: str
    rule: dict[str, Any] = Field(description="Normalized rule in wire format")


class RecurrencePresetRead(BaseModel):
    key: str
    label: str
    rule: dict[str, Any]
