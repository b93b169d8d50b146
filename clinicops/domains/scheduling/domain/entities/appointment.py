"""
Appointment Entity

A patient's booking of one catalog slot with one doctor.
"""

from dataclasses import dataclass
from datetime import datetime

from clinicops.core.domain import AggregateRoot, InvalidOperationException
from clinicops.domains.shared.domain.intervals import overlaps_half_open

from ..value_objects.appointment_status import AppointmentStatus, AppointmentType


@dataclass
class Appointment(AggregateRoot[int]):
    """
    Appointment aggregate root.

    `appointment_time` and `slot_end` are aware UTC instants bounding the
    half-open slot interval the appointment occupies.

    Example:
        ```python
        appointment = Appointment(
            user_id=7,
            doctor_id=3,
            service_id=2,
            appointment_time=datetime(2025, 3, 10, 7, 0, tzinfo=UTC),
            slot_end=datetime(2025, 3, 10, 7, 30, tzinfo=UTC),
            type=AppointmentType.OFFLINE,
        )
        appointment.change_status(AppointmentStatus.CHECKIN)
        ```
    """

    user_id: int = 0
    doctor_id: int | None = None
    service_id: int = 0
    appointment_time: datetime | None = None
    slot_end: datetime | None = None
    type: AppointmentType = AppointmentType.OFFLINE
    status: AppointmentStatus = AppointmentStatus.PENDING
    is_anonymous: bool = False
    notes: str | None = None

    # Online consultations
    patient_meeting_url: str | None = None
    doctor_meeting_url: str | None = None

    @property
    def holds_slot(self) -> bool:
        return self.status.holds_slot()

    @property
    def has_meeting(self) -> bool:
        return bool(self.patient_meeting_url and self.doctor_meeting_url)

    def occupies(self, start: datetime, end: datetime) -> bool:
        """True when this appointment blocks `[start, end)` for its doctor."""
        if not self.holds_slot or self.appointment_time is None:
            return False
        return overlaps_half_open(self.appointment_time, self.slot_end, start, end)

    def change_status(self, new_status: AppointmentStatus, enforce_transitions: bool = True) -> bool:
        """
        Move to `new_status`.

        Returns:
            False when the appointment already had that status.

        Raises:
            InvalidOperationException: transition not in the table and
                enforcement is on.
        """
        if new_status == self.status:
            return False
        if enforce_transitions and not self.status.can_transition_to(new_status):
            allowed = ", ".join(sorted(s.value for s in self.status.allowed_transitions())) or "none"
            raise InvalidOperationException(
                operation=f"set_status:{new_status.value}",
                current_state=self.status.value,
                message=(
                    f"Cannot change appointment status from {self.status.value} to {new_status.value}. "
                    f"Allowed: {allowed}"
                ),
            )
        self.status = new_status
        self.touch()
        return True

    def attach_meeting(self, patient_url: str, doctor_url: str) -> None:
        self.patient_meeting_url = patient_url
        self.doctor_meeting_url = doctor_url
        self.touch()

    def reschedule(
        self,
        *,
        user_id: int,
        doctor_id: int,
        service_id: int,
        appointment_time: datetime,
        slot_end: datetime,
        type: AppointmentType,
        is_anonymous: bool,
        notes: str | None,
    ) -> None:
        """Replace booking fields; status and meeting links are kept."""
        self.user_id = user_id
        self.doctor_id = doctor_id
        self.service_id = service_id
        self.appointment_time = appointment_time
        self.slot_end = slot_end
        self.type = type
        self.is_anonymous = is_anonymous
        self.notes = notes
        self.touch()
