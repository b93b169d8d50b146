"""
Appointment Repository Implementation

SQLAlchemy implementation of IAppointmentRepository.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.core.domain import AppointmentConflictException
from clinicops.domains.scheduling.application.ports.appointment_repository import IAppointmentRepository
from clinicops.domains.scheduling.domain.entities.appointment import Appointment
from clinicops.domains.scheduling.domain.value_objects.appointment_status import AppointmentStatus
from clinicops.domains.scheduling.infrastructure.persistence.sqlalchemy.models import AppointmentModel

logger = logging.getLogger(__name__)

ACTIVE_SLOT_INDEX = "uq_appointments_doctor_active_slot"


class SQLAlchemyAppointmentRepository(IAppointmentRepository):
    """
    SQLAlchemy implementation of appointment repository.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, appointment_id: int) -> Appointment | None:
        result = await self.session.execute(select(AppointmentModel).where(AppointmentModel.id == appointment_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_conflicting(
        self,
        doctor_id: int,
        slot_start: datetime,
        slot_end: datetime,
        statuses: Iterable[AppointmentStatus],
        exclude_id: int | None = None,
    ) -> list[Appointment]:
        """Half-open overlap: existing.start < slot_end AND existing.end > slot_start."""
        query = select(AppointmentModel).where(
            and_(
                AppointmentModel.doctor_id == doctor_id,
                AppointmentModel.status.in_(list(statuses)),
                AppointmentModel.appointment_time < slot_end,
                AppointmentModel.slot_end > slot_start,
            )
        )
        if exclude_id is not None:
            query = query.where(AppointmentModel.id != exclude_id)

        result = await self.session.execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def find_by_doctor(self, doctor_id: int, limit: int = 50) -> list[Appointment]:
        result = await self.session.execute(
            select(AppointmentModel)
            .where(AppointmentModel.doctor_id == doctor_id)
            .order_by(AppointmentModel.appointment_time.desc())
            .limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def find_by_patient(self, user_id: int, limit: int = 50) -> list[Appointment]:
        result = await self.session.execute(
            select(AppointmentModel)
            .where(AppointmentModel.user_id == user_id)
            .order_by(AppointmentModel.appointment_time.desc())
            .limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def set_status(self, appointment_id: int, status: AppointmentStatus) -> Appointment | None:
        result = await self.session.execute(select(AppointmentModel).where(AppointmentModel.id == appointment_id))
        model = result.scalar_one_or_none()
        if model is None:
            return None

        model.status = status  # type: ignore[assignment]
        await self.session.commit()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def save(self, appointment: Appointment) -> Appointment:
        """Save or update appointment; a unique-index hit becomes a conflict."""
        model = None
        if appointment.id:
            result = await self.session.execute(
                select(AppointmentModel).where(AppointmentModel.id == appointment.id)
            )
            model = result.scalar_one_or_none()

        if model is not None:
            self._update_model(model, appointment)
        else:
            model = self._to_model(appointment)
            self.session.add(model)

        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if ACTIVE_SLOT_INDEX in str(e.orig):
                logger.warning(
                    f"Concurrent booking rejected: doctor={appointment.doctor_id} "
                    f"time={appointment.appointment_time}"
                )
                raise AppointmentConflictException(
                    doctor_id=appointment.doctor_id,
                    time_slot=appointment.appointment_time.isoformat() if appointment.appointment_time else None,
                    message="This slot is already booked",
                ) from e
            raise

        await self.session.refresh(model)
        return self._to_entity(model)

    # Mapping methods

    def _to_entity(self, model: AppointmentModel) -> Appointment:
        appointment = Appointment(
            id=model.id,  # type: ignore[arg-type]
            user_id=model.user_id,  # type: ignore[arg-type]
            doctor_id=model.doctor_id,  # type: ignore[arg-type]
            service_id=model.service_id,  # type: ignore[arg-type]
            appointment_time=model.appointment_time,  # type: ignore[arg-type]
            slot_end=model.slot_end,  # type: ignore[arg-type]
            type=model.type,  # type: ignore[arg-type]
            status=model.status or AppointmentStatus.PENDING,  # type: ignore[arg-type]
            is_anonymous=model.is_anonymous or False,  # type: ignore[arg-type]
            notes=model.notes,  # type: ignore[arg-type]
            patient_meeting_url=model.patient_meeting_url,  # type: ignore[arg-type]
            doctor_meeting_url=model.doctor_meeting_url,  # type: ignore[arg-type]
        )
        if model.created_at:
            appointment.created_at = model.created_at  # type: ignore[assignment]
        if model.updated_at:
            appointment.updated_at = model.updated_at  # type: ignore[assignment]
        return appointment

    def _to_model(self, appointment: Appointment) -> AppointmentModel:
        return AppointmentModel(
            user_id=appointment.user_id,
            doctor_id=appointment.doctor_id,
            service_id=appointment.service_id,
            appointment_time=appointment.appointment_time,
            slot_end=appointment.slot_end,
            type=appointment.type,
            status=appointment.status,
            is_anonymous=appointment.is_anonymous,
            notes=appointment.notes,
            patient_meeting_url=appointment.patient_meeting_url,
            doctor_meeting_url=appointment.doctor_meeting_url,
        )

    def _update_model(self, model: AppointmentModel, appointment: Appointment) -> None:
        model.user_id = appointment.user_id  # type: ignore[assignment]
        model.doctor_id = appointment.doctor_id  # type: ignore[assignment]
        model.service_id = appointment.service_id  # type: ignore[assignment]
        model.appointment_time = appointment.appointment_time  # type: ignore[assignment]
        model.slot_end = appointment.slot_end  # type: ignore[assignment]
        model.type = appointment.type  # type: ignore[assignment]
        model.status = appointment.status  # type: ignore[assignment]
        model.is_anonymous = appointment.is_anonymous  # type: ignore[assignment]
        model.notes = appointment.notes  # type: ignore[assignment]
        model.patient_meeting_url = appointment.patient_meeting_url  # type: ignore[assignment]
        model.doctor_meeting_url = appointment.doctor_meeting_url  # type: ignore[assignment]
