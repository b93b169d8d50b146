# ============================================================================
# Tests for the patient treatment aggregate and date policy
# ============================================================================
"""Unit tests for PatientTreatment, derived treatment state and TreatmentDatePolicy."""

from datetime import timedelta

import pytest

from clinicops.core.domain import ValidationException
from clinicops.domains.treatments.domain.services.date_policy import (
    END_BEFORE_START,
    START_TOO_FAR_FUTURE,
    START_TOO_FAR_PAST,
    TreatmentDatePolicy,
)
from clinicops.domains.treatments.domain.value_objects.treatment_state import (
    Active,
    Ended,
    Scheduled,
    TreatmentStateKind,
)
from tests.utils import TreatmentBuilder, utc

NOW = utc(2025, 1, 15)


@pytest.mark.unit
class TestTreatmentState:
    """Tests for the state derived from dates and now."""

    def test_future_start_is_scheduled(self) -> None:
        treatment = TreatmentBuilder().starting(utc(2025, 2, 1)).build()

        state = treatment.state(NOW)

        assert isinstance(state, Scheduled)
        assert state.kind is TreatmentStateKind.SCHEDULED
        assert treatment.is_active(NOW) is False

    def test_started_without_end_is_active(self) -> None:
        treatment = TreatmentBuilder().starting(utc(2025, 1, 1)).build()

        assert isinstance(treatment.state(NOW), Active)
        assert treatment.is_active(NOW) is True

    def test_start_equal_to_now_is_active(self) -> None:
        treatment = TreatmentBuilder().starting(NOW).build()
        assert treatment.is_active(NOW) is True

    def test_end_equal_to_now_is_ended(self) -> None:
        """Should stop being active at the end instant itself."""
        treatment = TreatmentBuilder().starting(utc(2025, 1, 1)).ending(NOW).build()

        assert isinstance(treatment.state(NOW), Ended)
        assert treatment.is_active(NOW) is False

    def test_missing_start_is_rejected(self) -> None:
        treatment = TreatmentBuilder().starting(None).build()
        with pytest.raises(ValidationException):
            treatment.is_active(NOW)


@pytest.mark.unit
class TestEndAt:
    """Tests for closing a treatment."""

    def test_end_at_sets_end_date(self) -> None:
        treatment = TreatmentBuilder().with_id(1).starting(utc(2025, 1, 1)).build()

        treatment.end_at(utc(2025, 1, 9, 23, 59, 59))

        assert treatment.end_date == utc(2025, 1, 9, 23, 59, 59)
        assert treatment.period.is_open is False

    def test_end_at_before_start_is_rejected(self) -> None:
        treatment = TreatmentBuilder().with_id(1).starting(utc(2025, 1, 10)).build()

        with pytest.raises(ValidationException):
            treatment.end_at(utc(2025, 1, 9))

        assert treatment.end_date is None

    def test_summary(self) -> None:
        treatment = TreatmentBuilder().with_id(4).with_protocol(2).starting(utc(2025, 1, 1)).build()
        assert treatment.summary() == {
            "id": 4,
            "protocol_id": 2,
            "start_date": "2025-01-01T00:00:00+00:00",
            "end_date": None,
        }


@pytest.mark.unit
class TestTreatmentDatePolicy:
    """Tests for the allowed date window."""

    @pytest.fixture
    def policy(self) -> TreatmentDatePolicy:
        return TreatmentDatePolicy()

    def test_accepts_start_within_window(self, policy: TreatmentDatePolicy) -> None:
        policy.validate_window(NOW - timedelta(days=365), None, NOW)
        policy.validate_window(NOW + timedelta(days=730), None, NOW)

    def test_rejects_start_too_far_in_past(self, policy: TreatmentDatePolicy) -> None:
        with pytest.raises(ValidationException) as exc_info:
            policy.validate_window(NOW - timedelta(days=400), None, NOW)
        assert exc_info.value.message == START_TOO_FAR_PAST

    def test_rejects_start_too_far_in_future(self, policy: TreatmentDatePolicy) -> None:
        with pytest.raises(ValidationException) as exc_info:
            policy.validate_window(NOW + timedelta(days=731), None, NOW)
        assert exc_info.value.message == START_TOO_FAR_FUTURE

    def test_rejects_end_not_after_start(self, policy: TreatmentDatePolicy) -> None:
        with pytest.raises(ValidationException) as exc_info:
            policy.validate_window(NOW, NOW, NOW)
        assert exc_info.value.message == END_BEFORE_START
        assert exc_info.value.field == "end_date"

    def test_rejects_long_notes(self) -> None:
        policy = TreatmentDatePolicy(notes_max_length=10)
        with pytest.raises(ValidationException, match="Notes cannot exceed 10 characters"):
            policy.validate_notes("x" * 11)
        policy.validate_notes("x" * 10)
