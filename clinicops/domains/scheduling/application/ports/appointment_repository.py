"""
Appointment Repository Port

Interface for appointment data access.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, runtime_checkable

from clinicops.domains.scheduling.domain.entities.appointment import Appointment
from clinicops.domains.scheduling.domain.value_objects.appointment_status import AppointmentStatus


@runtime_checkable
class IAppointmentRepository(Protocol):
    """
    Appointment repository interface.

    Example:
        ```python
        class SQLAlchemyAppointmentRepository(IAppointmentRepository):
            async def find_by_id(self, appointment_id: int) -> Appointment | None:
                ...
        ```
    """

    async def find_by_id(self, appointment_id: int) -> Appointment | None:
        """
        Find appointment by ID.

        Args:
            appointment_id: Unique appointment identifier

        Returns:
            Appointment if found, None otherwise
        """
        ...

    async def find_conflicting(
        self,
        doctor_id: int,
        slot_start: datetime,
        slot_end: datetime,
        statuses: Iterable[AppointmentStatus],
        exclude_id: int | None = None,
    ) -> list[Appointment]:
        """
        Find the doctor's appointments overlapping `[slot_start, slot_end)`.

        Args:
            doctor_id: Doctor ID
            slot_start: Slot start (UTC)
            slot_end: Slot end (UTC, exclusive)
            statuses: Only appointments in these statuses count
            exclude_id: Appointment to ignore (the one being updated)

        Returns:
            Conflicting appointments, empty if the slot is free
        """
        ...

    async def find_by_doctor(self, doctor_id: int, limit: int = 50) -> list[Appointment]:
        """
        Find appointments for a doctor, most recent first.

        Args:
            doctor_id: Doctor ID
            limit: Maximum results

        Returns:
            List of doctor's appointments
        """
        ...

    async def find_by_patient(self, user_id: int, limit: int = 50) -> list[Appointment]:
        """
        Find appointments booked by a patient, most recent first.

        Args:
            user_id: Patient user ID
            limit: Maximum results

        Returns:
            List of patient's appointments
        """
        ...

    async def set_status(self, appointment_id: int, status: AppointmentStatus) -> Appointment | None:
        """
        Write only the status column.

        Args:
            appointment_id: Appointment ID
            status: New status

        Returns:
            Updated appointment, None if it does not exist
        """
        ...

    async def save(self, appointment: Appointment) -> Appointment:
        """
        Save or update appointment.

        Args:
            appointment: Appointment to save

        Returns:
            Saved appointment with ID

        Raises:
            AppointmentConflictException: the store already holds an active
                booking for the same doctor and start
        """
        ...
