# backend/tests/conftest.py
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from scheduling.main import app
from scheduling.services.slots import BookingConfig, WorkingHoursConfig

# Monday
NOW = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)

NINE_TO_FIVE = {
    day: [["09:00", "17:00"]]
    for day in ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
}


def make_hours(
    schedule: dict | None = None,
    timezone_name: str = "UTC",
    overrides: dict | None = None,
    **policy,
) -> WorkingHoursConfig:
    """Working hours with a 30-minute grid and no notice/buffer unless overridden."""
    booking = BookingConfig(**{
        "slot_step_minutes": 30,
        "min_notice_minutes": 0,
        "buffer_minutes": 0,
        "lookahead_days": 60,
        **policy,
    })
    return WorkingHoursConfig.from_schedule(
        NINE_TO_FIVE if schedule is None else schedule,
        timezone=timezone_name,
        overrides=overrides,
        booking=booking,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def hours() -> WorkingHoursConfig:
    return make_hours()


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Shared TestClient for API tests."""
    with TestClient(app) as test_client:
        yield test_client
