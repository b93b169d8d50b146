"""
Scheduling Value Objects

Status and type enums for appointments and clinic services.
"""

from clinicops.core.domain import StatusEnum


class AppointmentStatus(StatusEnum):
    """
    Appointment lifecycle states.

    Valid transitions:
    - PENDING -> CHECKIN, CONFIRMED, CANCELLED
    - CONFIRMED -> CHECKIN, CANCELLED
    - CHECKIN -> PAID, CANCELLED
    - PAID -> PROCESS, CANCELLED
    - PROCESS -> COMPLETED, CANCELLED
    - COMPLETED, CANCELLED -> (terminal)
    """

    PENDING = "PENDING"
    CHECKIN = "CHECKIN"
    PAID = "PAID"
    PROCESS = "PROCESS"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def slot_holding(cls) -> tuple["AppointmentStatus", ...]:
        """Statuses that keep a doctor's slot occupied."""
        return (cls.PENDING, cls.CONFIRMED)

    def holds_slot(self) -> bool:
        return self in AppointmentStatus.slot_holding()

    def allowed_transitions(self) -> frozenset["AppointmentStatus"]:
        return _TRANSITIONS[self]

    def can_transition_to(self, new_status: "AppointmentStatus") -> bool:
        """Check if transition to new status is valid."""
        return new_status in _TRANSITIONS[self]

    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]


_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset(
        {AppointmentStatus.CHECKIN, AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.CHECKIN, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CHECKIN: frozenset({AppointmentStatus.PAID, AppointmentStatus.CANCELLED}),
    AppointmentStatus.PAID: frozenset({AppointmentStatus.PROCESS, AppointmentStatus.CANCELLED}),
    AppointmentStatus.PROCESS: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


class AppointmentType(StatusEnum):
    """Where the consultation happens."""

    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class ServiceType(StatusEnum):
    """Clinic service categories."""

    CONSULT = "CONSULT"
    TEST = "TEST"
    TREATMENT = "TREATMENT"

    @property
    def appointment_type(self) -> AppointmentType:
        """CONSULT services are online; everything else is in person."""
        return AppointmentType.ONLINE if self is ServiceType.CONSULT else AppointmentType.OFFLINE

    @property
    def assigns_doctor(self) -> bool:
        """The clinic picks the doctor; patients cannot choose one."""
        return self is ServiceType.CONSULT
