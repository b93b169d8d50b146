"""
Treatment Repository Implementation

SQLAlchemy implementation of ITreatmentRepository.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.domains.treatments.application.ports.treatment_repository import ITreatmentRepository
from clinicops.domains.treatments.domain.entities.patient_treatment import PatientTreatment
from clinicops.domains.treatments.infrastructure.persistence.sqlalchemy.models import PatientTreatmentModel

logger = logging.getLogger(__name__)


class SQLAlchemyTreatmentRepository(ITreatmentRepository):
    """
    SQLAlchemy implementation of the patient treatment repository.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Savepoint around the block, committed as a whole on success."""
        try:
            async with self.session.begin_nested():
                yield
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            logger.warning("Treatment unit of work rolled back")
            raise

    async def find_by_id(self, treatment_id: int) -> PatientTreatment | None:
        result = await self.session.execute(
            select(PatientTreatmentModel).where(PatientTreatmentModel.id == treatment_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_active(self, now: datetime, patient_id: int | None = None) -> list[PatientTreatment]:
        query = select(PatientTreatmentModel).where(
            and_(
                PatientTreatmentModel.start_date <= now,
                or_(PatientTreatmentModel.end_date.is_(None), PatientTreatmentModel.end_date > now),
            )
        )
        if patient_id is not None:
            query = query.where(PatientTreatmentModel.patient_id == patient_id)

        result = await self.session.execute(
            query.order_by(PatientTreatmentModel.patient_id, PatientTreatmentModel.start_date)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def find_by_patient(self, patient_id: int) -> list[PatientTreatment]:
        result = await self.session.execute(
            select(PatientTreatmentModel)
            .where(PatientTreatmentModel.patient_id == patient_id)
            .order_by(PatientTreatmentModel.start_date)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def save(self, treatment: PatientTreatment, commit: bool = True) -> PatientTreatment:
        model = None
        if treatment.id:
            result = await self.session.execute(
                select(PatientTreatmentModel).where(PatientTreatmentModel.id == treatment.id)
            )
            model = result.scalar_one_or_none()

        if model is not None:
            self._update_model(model, treatment)
        else:
            model = self._to_model(treatment)
            self.session.add(model)

        if not commit:
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        try:
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error saving treatment {treatment.id}: {e}")
            raise
        await self.session.refresh(model)
        return self._to_entity(model)

    # Mapping methods

    def _to_entity(self, model: PatientTreatmentModel) -> PatientTreatment:
        treatment = PatientTreatment(
            id=model.id,  # type: ignore[arg-type]
            patient_id=model.patient_id,  # type: ignore[arg-type]
            protocol_id=model.protocol_id,  # type: ignore[arg-type]
            doctor_id=model.doctor_id,  # type: ignore[arg-type]
            start_date=model.start_date,  # type: ignore[arg-type]
            end_date=model.end_date,  # type: ignore[arg-type]
            custom_medications=model.custom_medications,
            total=Decimal(model.total or 0),
            notes=model.notes,  # type: ignore[arg-type]
            created_by_id=model.created_by_id,  # type: ignore[arg-type]
        )
        if model.created_at:
            treatment.created_at = model.created_at  # type: ignore[assignment]
        if model.updated_at:
            treatment.updated_at = model.updated_at  # type: ignore[assignment]
        return treatment

    def _to_model(self, treatment: PatientTreatment) -> PatientTreatmentModel:
        return PatientTreatmentModel(
            patient_id=treatment.patient_id,
            protocol_id=treatment.protocol_id,
            doctor_id=treatment.doctor_id,
            created_by_id=treatment.created_by_id,
            start_date=treatment.start_date,
            end_date=treatment.end_date,
            custom_medications=treatment.custom_medications,
            total=treatment.total,
            notes=treatment.notes,
        )

    def _update_model(self, model: PatientTreatmentModel, treatment: PatientTreatment) -> None:
        model.protocol_id = treatment.protocol_id  # type: ignore[assignment]
        model.doctor_id = treatment.doctor_id  # type: ignore[assignment]
        model.start_date = treatment.start_date  # type: ignore[assignment]
        model.end_date = treatment.end_date  # type: ignore[assignment]
        model.custom_medications = treatment.custom_medications
        model.total = treatment.total  # type: ignore[assignment]
        model.notes = treatment.notes  # type: ignore[assignment]
