# ============================================================================
# Tests for the appointment lifecycle
# ============================================================================
"""Unit tests for AppointmentStatus transitions and the Appointment entity."""

import pytest

from clinicops.core.domain import InvalidOperationException
from clinicops.domains.scheduling.domain.value_objects.appointment_status import (
    AppointmentStatus,
    AppointmentType,
    ServiceType,
)
from tests.utils import AppointmentBuilder, utc


@pytest.mark.unit
class TestAppointmentStatus:
    """Tests for the transition table."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (AppointmentStatus.PENDING, AppointmentStatus.CHECKIN),
            (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED),
            (AppointmentStatus.CONFIRMED, AppointmentStatus.CHECKIN),
            (AppointmentStatus.CHECKIN, AppointmentStatus.PAID),
            (AppointmentStatus.PAID, AppointmentStatus.PROCESS),
            (AppointmentStatus.PROCESS, AppointmentStatus.COMPLETED),
            (AppointmentStatus.PROCESS, AppointmentStatus.CANCELLED),
        ],
    )
    def test_allowed_transitions(self, current: AppointmentStatus, target: AppointmentStatus) -> None:
        assert current.can_transition_to(target) is True

    @pytest.mark.parametrize(
        "current,target",
        [
            (AppointmentStatus.PENDING, AppointmentStatus.PAID),
            (AppointmentStatus.CHECKIN, AppointmentStatus.PENDING),
            (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED),
            (AppointmentStatus.CANCELLED, AppointmentStatus.PENDING),
        ],
    )
    def test_rejected_transitions(self, current: AppointmentStatus, target: AppointmentStatus) -> None:
        assert current.can_transition_to(target) is False

    def test_terminal_states(self) -> None:
        assert AppointmentStatus.COMPLETED.is_terminal() is True
        assert AppointmentStatus.CANCELLED.is_terminal() is True
        assert AppointmentStatus.PENDING.is_terminal() is False

    def test_only_pending_and_confirmed_hold_the_slot(self) -> None:
        holding = {s for s in AppointmentStatus if s.holds_slot()}
        assert holding == {AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED}

    def test_service_type_mapping(self) -> None:
        assert ServiceType.CONSULT.appointment_type is AppointmentType.ONLINE
        assert ServiceType.TEST.appointment_type is AppointmentType.OFFLINE
        assert ServiceType.TREATMENT.appointment_type is AppointmentType.OFFLINE
        assert ServiceType.CONSULT.assigns_doctor is True
        assert ServiceType.TEST.assigns_doctor is False

    def test_from_string_is_case_insensitive(self) -> None:
        assert AppointmentStatus.from_string("checkin") is AppointmentStatus.CHECKIN


@pytest.mark.unit
class TestAppointmentEntity:
    """Tests for Appointment behaviour."""

    def test_change_status_moves_along_the_table(self) -> None:
        appointment = AppointmentBuilder().with_id(1).build()

        assert appointment.change_status(AppointmentStatus.CHECKIN) is True
        assert appointment.status is AppointmentStatus.CHECKIN

    def test_change_status_to_same_value_is_a_no_op(self) -> None:
        appointment = AppointmentBuilder().with_id(1).build()
        assert appointment.change_status(AppointmentStatus.PENDING) is False

    def test_change_status_rejects_illegal_transition(self) -> None:
        """Should name the allowed targets in the error."""
        appointment = AppointmentBuilder().with_id(1).with_status(AppointmentStatus.COMPLETED).build()

        with pytest.raises(InvalidOperationException) as exc_info:
            appointment.change_status(AppointmentStatus.PENDING)

        assert "Allowed: none" in exc_info.value.message
        assert appointment.status is AppointmentStatus.COMPLETED

    def test_change_status_without_enforcement(self) -> None:
        appointment = AppointmentBuilder().with_status(AppointmentStatus.COMPLETED).build()
        assert appointment.change_status(AppointmentStatus.PENDING, enforce_transitions=False) is True
        assert appointment.status is AppointmentStatus.PENDING

    def test_occupies_uses_half_open_bounds(self) -> None:
        appointment = AppointmentBuilder().at(utc(2025, 3, 10, 7, 0)).build()

        assert appointment.occupies(utc(2025, 3, 10, 7, 0), utc(2025, 3, 10, 7, 30)) is True
        assert appointment.occupies(utc(2025, 3, 10, 7, 30), utc(2025, 3, 10, 8, 0)) is False

    def test_cancelled_appointment_frees_the_slot(self) -> None:
        appointment = AppointmentBuilder().with_status(AppointmentStatus.CANCELLED).build()
        assert appointment.occupies(utc(2025, 3, 10, 7, 0), utc(2025, 3, 10, 7, 30)) is False

    def test_attach_meeting(self) -> None:
        appointment = AppointmentBuilder().online().build()
        assert appointment.has_meeting is False

        appointment.attach_meeting("https://p", "https://d")

        assert appointment.has_meeting is True
