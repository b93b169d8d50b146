"""
Shift Directory Port

Which doctors work which shift on which day.
"""

from collections.abc import AsyncIterator
from datetime import date
from typing import Protocol, runtime_checkable

from clinicops.domains.scheduling.domain.entities.doctor_schedule import DoctorSchedule, DoctorShifts
from clinicops.domains.scheduling.domain.value_objects.shift import Shift


@runtime_checkable
class IShiftDirectory(Protocol):
    """
    Doctor shift lookup interface.

    Entries flagged as off are never returned.
    """

    async def find_by_date(self, work_date: date) -> list[DoctorSchedule]:
        """
        Find every working shift on a day.

        Args:
            work_date: Calendar day (UTC)

        Returns:
            Schedule entries in directory order
        """
        ...

    async def find_doctors_working(self, work_date: date) -> list[DoctorShifts]:
        """
        Group a day's working entries by doctor.

        Args:
            work_date: Calendar day (UTC)

        Returns:
            One entry per doctor, in directory order of their first shift
        """
        ...

    def iter_candidates(self, work_date: date, shift: Shift) -> AsyncIterator[int]:
        """
        Lazily yield ids of doctors working `shift` on `work_date`.

        Consumers stop iterating as soon as they find a usable doctor, so
        implementations must not do per-candidate work ahead of demand.

        Args:
            work_date: Calendar day (UTC)
            shift: Shift to look up

        Yields:
            Doctor ids in directory order
        """
        ...

    async def has_shift(self, doctor_id: int, work_date: date, shift: Shift) -> bool:
        """
        Check whether a doctor works `shift` on `work_date`.

        Args:
            doctor_id: Doctor ID
            work_date: Calendar day (UTC)
            shift: Shift to check

        Returns:
            True if a working entry exists
        """
        ...
