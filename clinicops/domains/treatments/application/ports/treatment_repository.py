"""
Treatment Repository Port

Interface for patient treatment data access.
"""

from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Protocol, runtime_checkable

from clinicops.domains.treatments.domain.entities.patient_treatment import PatientTreatment


@runtime_checkable
class ITreatmentRepository(Protocol):
    """
    Patient treatment repository interface.

    Example:
        ```python
        async with repository.atomic():
            for old in active:
                old.end_at(cutoff)
                await repository.save(old, commit=False)
            await repository.save(new_treatment, commit=False)
        ```
    """

    async def find_by_id(self, treatment_id: int) -> PatientTreatment | None:
        """
        Find treatment by ID.

        Args:
            treatment_id: Treatment ID

        Returns:
            Treatment if found, None otherwise
        """
        ...

    async def find_active(self, now: datetime, patient_id: int | None = None) -> list[PatientTreatment]:
        """
        Find treatments active at `now`.

        Args:
            now: Reference instant
            patient_id: Restrict to one patient; None scans every patient

        Returns:
            Active treatments ordered by patient, then start date
        """
        ...

    async def find_by_patient(self, patient_id: int) -> list[PatientTreatment]:
        """
        Find all treatments of a patient, oldest start first.

        Args:
            patient_id: Patient ID

        Returns:
            Patient's treatments
        """
        ...

    async def save(self, treatment: PatientTreatment, commit: bool = True) -> PatientTreatment:
        """
        Insert or update a treatment.

        Args:
            treatment: Treatment to save
            commit: False inside `atomic()`; the write is only flushed

        Returns:
            Saved treatment with ID
        """
        ...

    def atomic(self) -> AbstractAsyncContextManager[None]:
        """
        Unit of work: everything saved inside commits together or not at all.
        """
        ...
