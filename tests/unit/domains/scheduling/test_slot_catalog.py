# ============================================================================
# Tests for the daily slot catalog and doctor shifts
# ============================================================================
"""Unit tests for Slot, SlotCatalog and Shift."""

from datetime import time

import pytest

from clinicops.config.settings import DEFAULT_CLINIC_SLOTS
from clinicops.domains.scheduling.domain.value_objects.shift import Shift, schedule_date
from clinicops.domains.scheduling.domain.value_objects.slot import (
    Slot,
    SlotCatalog,
    is_time_between,
    parse_hhmm,
)
from tests.utils import utc


@pytest.mark.unit
class TestSlotDefinitions:
    """Tests for parsing slot definitions."""

    def test_parse_hhmm(self) -> None:
        assert parse_hhmm("07:35") == time(7, 35)
        assert parse_hhmm(" 16:30 ") == time(16, 30)

    @pytest.mark.parametrize("value", ["7", "07-35", "25:00", "ab:cd", ""])
    def test_parse_hhmm_rejects_malformed_values(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_hhmm(value)

    def test_slot_from_definition(self) -> None:
        slot = Slot.from_definition("07:35-08:05")
        assert slot.start == time(7, 35)
        assert slot.end == time(8, 5)
        assert slot.label == "07:35-08:05"

    def test_slot_must_end_after_start(self) -> None:
        with pytest.raises(ValueError):
            Slot.from_definition("08:00-07:30")

    def test_is_time_between_is_inclusive(self) -> None:
        assert is_time_between(time(7, 0), time(7, 0), time(17, 0)) is True
        assert is_time_between(time(17, 0), time(7, 0), time(17, 0)) is True
        assert is_time_between(time(17, 1), time(7, 0), time(17, 0)) is False


@pytest.mark.unit
class TestSlotCatalog:
    """Tests for catalog construction and lookup."""

    def test_default_catalog_has_fourteen_slots(self) -> None:
        """Should load the clinic's default daily slots."""
        catalog = SlotCatalog.from_definitions(DEFAULT_CLINIC_SLOTS)
        assert len(catalog) == 14
        assert catalog.slots[0].label == "07:00-07:30"
        assert catalog.slots[-1].label == "16:30-17:00"

    def test_rejects_empty_catalog(self) -> None:
        with pytest.raises(ValueError):
            SlotCatalog.from_definitions([])

    def test_rejects_overlapping_slots(self) -> None:
        with pytest.raises(ValueError):
            SlotCatalog.from_definitions(["07:00-07:30", "07:15-07:45"])

    def test_find_slot_requires_exact_start(self) -> None:
        catalog = SlotCatalog.from_definitions(DEFAULT_CLINIC_SLOTS)
        assert catalog.find_slot("07:35") == Slot(time(7, 35), time(8, 5))
        assert catalog.find_slot("07:31") is None
        assert catalog.find_slot(time(13, 0)) is not None

    def test_place_returns_utc_bounds(self, slot_catalog: SlotCatalog) -> None:
        """Should pin the slot to the instant's day."""
        placement = slot_catalog.place(utc(2025, 3, 10, 7, 0))

        assert placement is not None
        assert placement.starts_at == utc(2025, 3, 10, 7, 0)
        assert placement.ends_at == utc(2025, 3, 10, 7, 30)
        assert placement.label == "2025-03-10 07:00-07:30"

    def test_place_rejects_seconds(self, slot_catalog: SlotCatalog) -> None:
        """Should not match a slot start with stray seconds."""
        assert slot_catalog.place(utc(2025, 3, 10, 7, 0, 1)) is None

    def test_place_rejects_unknown_start(self, slot_catalog: SlotCatalog) -> None:
        assert slot_catalog.place(utc(2025, 3, 10, 7, 5)) is None

    def test_place_with_wall_clock_offset(self, slot_catalog: SlotCatalog) -> None:
        """Should match on local time and convert the bounds back to UTC."""
        placement = slot_catalog.place(utc(2025, 3, 10, 0, 0), utc_offset_hours=7)

        assert placement is not None
        assert placement.slot.label == "07:00-07:30"
        assert placement.starts_at == utc(2025, 3, 10, 0, 0)
        assert placement.ends_at == utc(2025, 3, 10, 0, 30)


@pytest.mark.unit
class TestShift:
    """Tests for the shift an instant falls into."""

    def test_last_morning_minute(self) -> None:
        """Should keep 17:59Z in the morning shift."""
        assert Shift.of(utc(2025, 3, 10, 17, 59)) is Shift.MORNING

    def test_first_afternoon_minute(self) -> None:
        """Should switch to the afternoon shift at 18:00Z."""
        assert Shift.of(utc(2025, 3, 10, 18, 0)) is Shift.AFTERNOON

    def test_clinic_hours_fall_in_morning_shift(self) -> None:
        assert Shift.of(utc(2025, 3, 10, 7, 0)) is Shift.MORNING
        assert Shift.of(utc(2025, 3, 10, 16, 30)) is Shift.MORNING

    def test_custom_offset_and_cutoff(self) -> None:
        assert Shift.of(utc(2025, 3, 10, 12, 0), utc_offset_hours=0, cutoff_hour=12) is Shift.AFTERNOON
        assert Shift.of(utc(2025, 3, 10, 11, 59), utc_offset_hours=0, cutoff_hour=12) is Shift.MORNING

    def test_schedule_date_is_utc_day(self) -> None:
        assert schedule_date(utc(2025, 3, 10, 23, 59)).isoformat() == "2025-03-10"
