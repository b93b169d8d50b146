"""
People Directory Ports

Read-only lookups of patients and doctors.
"""

from typing import Protocol, runtime_checkable

from clinicops.domains.shared.domain.people import Doctor, Patient


@runtime_checkable
class IPatientDirectory(Protocol):
    """Patient lookup interface."""

    async def find_by_id(self, patient_id: int) -> Patient | None:
        """
        Find patient by ID.

        Args:
            patient_id: User id of the patient

        Returns:
            Patient if found, None otherwise
        """
        ...


@runtime_checkable
class IDoctorDirectory(Protocol):
    """Doctor lookup interface."""

    async def find_by_id(self, doctor_id: int) -> Doctor | None:
        """
        Find doctor by ID.

        Args:
            doctor_id: Doctor profile id

        Returns:
            Doctor if found, None otherwise
        """
        ...
