"""
Shift Directory Implementation

SQLAlchemy implementation of IShiftDirectory over `doctor_schedules`.
"""

import logging
from collections.abc import AsyncIterator
from datetime import date

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.domains.scheduling.application.ports.shift_directory import IShiftDirectory
from clinicops.domains.scheduling.domain.entities.doctor_schedule import DoctorSchedule, DoctorShifts
from clinicops.domains.scheduling.domain.value_objects.shift import Shift
from clinicops.domains.scheduling.infrastructure.persistence.sqlalchemy.models import DoctorScheduleModel

logger = logging.getLogger(__name__)


class SQLAlchemyShiftDirectory(IShiftDirectory):
    """Directory order is schedule-entry insertion order (primary key)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_date(self, work_date: date) -> list[DoctorSchedule]:
        result = await self.session.execute(
            select(DoctorScheduleModel)
            .where(and_(DoctorScheduleModel.work_date == work_date, DoctorScheduleModel.is_off.is_(False)))
            .order_by(DoctorScheduleModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def find_doctors_working(self, work_date: date) -> list[DoctorShifts]:
        grouped: dict[int, DoctorShifts] = {}
        for schedule in await self.find_by_date(work_date):
            grouped.setdefault(schedule.doctor_id, DoctorShifts(doctor_id=schedule.doctor_id)).schedules.append(
                schedule
            )
        return list(grouped.values())

    async def iter_candidates(self, work_date: date, shift: Shift) -> AsyncIterator[int]:
        # One query for the roster; conflict checks happen per yielded id
        result = await self.session.execute(
            select(DoctorScheduleModel.doctor_id)
            .where(
                and_(
                    DoctorScheduleModel.work_date == work_date,
                    DoctorScheduleModel.shift == shift,
                    DoctorScheduleModel.is_off.is_(False),
                )
            )
            .order_by(DoctorScheduleModel.id)
        )
        doctor_ids = list(result.scalars().all())
        logger.debug(f"{len(doctor_ids)} doctors on {shift.value} shift for {work_date}")
        for doctor_id in doctor_ids:
            yield doctor_id

    async def has_shift(self, doctor_id: int, work_date: date, shift: Shift) -> bool:
        result = await self.session.execute(
            select(DoctorScheduleModel.id).where(
                and_(
                    DoctorScheduleModel.doctor_id == doctor_id,
                    DoctorScheduleModel.work_date == work_date,
                    DoctorScheduleModel.shift == shift,
                    DoctorScheduleModel.is_off.is_(False),
                )
            )
        )
        return result.first() is not None

    def _to_entity(self, model: DoctorScheduleModel) -> DoctorSchedule:
        return DoctorSchedule(
            id=model.id,  # type: ignore[arg-type]
            doctor_id=model.doctor_id,  # type: ignore[arg-type]
            work_date=model.work_date,  # type: ignore[arg-type]
            shift=model.shift,  # type: ignore[arg-type]
            is_off=model.is_off or False,  # type: ignore[arg-type]
        )
