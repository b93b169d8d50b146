"""
Clinic Service Entity
"""

from dataclasses import dataclass, field
from datetime import time
from decimal import Decimal

from clinicops.core.domain import Entity

from ..value_objects.appointment_status import AppointmentType, ServiceType
from ..value_objects.slot import is_time_between


@dataclass
class ClinicService(Entity[int]):
    """A bookable service with its daily operating window."""

    name: str = ""
    type: ServiceType = ServiceType.CONSULT
    start_time: time = time(0, 0)
    end_time: time = time(23, 59)
    price: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def appointment_type(self) -> AppointmentType:
        return self.type.appointment_type

    def is_open_at(self, moment: time) -> bool:
        """Operating window check, inclusive on both ends."""
        return is_time_between(moment, self.start_time, self.end_time)
