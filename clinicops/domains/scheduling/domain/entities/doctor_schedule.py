"""
Doctor Schedule Entity
"""

from dataclasses import dataclass, field
from datetime import date

from clinicops.core.domain import Entity

from ..value_objects.shift import Shift


@dataclass
class DoctorSchedule(Entity[int]):
    """One working shift of a doctor on a calendar day."""

    doctor_id: int = 0
    work_date: date | None = None
    shift: Shift = Shift.MORNING
    is_off: bool = False

    def covers(self, work_date: date, shift: Shift) -> bool:
        return not self.is_off and self.work_date == work_date and self.shift == shift


@dataclass
class DoctorShifts:
    """A doctor together with their working entries on one day."""

    doctor_id: int
    schedules: list[DoctorSchedule] = field(default_factory=list)

    def works(self, work_date: date, shift: Shift) -> bool:
        return any(s.covers(work_date, shift) for s in self.schedules)
