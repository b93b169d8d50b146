"""
Directory entities shared by the scheduling and treatment contexts.
"""

from dataclasses import dataclass

from clinicops.core.domain import Entity

ANONYMOUS_PATIENT_NAME = "Anonymous"


@dataclass
class Patient(Entity[int]):
    """A clinic user who books appointments or receives treatments."""

    name: str = ""
    email: str | None = None

    @classmethod
    def anonymous(cls) -> "Patient":
        """Placeholder shown to doctors for anonymous bookings."""
        return cls(id=0, name=ANONYMOUS_PATIENT_NAME, email=None)


@dataclass
class Doctor(Entity[int]):
    """A doctor profile. `id` is the doctor id, `user_id` the owning user."""

    user_id: int = 0
    name: str = ""
    email: str | None = None
