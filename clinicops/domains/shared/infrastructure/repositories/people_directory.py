"""
People Directory Implementation

SQLAlchemy implementations of IPatientDirectory and IDoctorDirectory.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.domains.shared.application.ports.people_directory import IDoctorDirectory, IPatientDirectory
from clinicops.domains.shared.domain.people import Doctor, Patient
from clinicops.models.db.user import DoctorModel, UserModel

logger = logging.getLogger(__name__)


class SQLAlchemyPatientDirectory(IPatientDirectory):
    """Patients are read from the `users` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, patient_id: int) -> Patient | None:
        result = await self.session.execute(select(UserModel).where(UserModel.id == patient_id))
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return Patient(
            id=model.id,  # type: ignore[arg-type]
            name=model.name,  # type: ignore[arg-type]
            email=model.email,  # type: ignore[arg-type]
        )


class SQLAlchemyDoctorDirectory(IDoctorDirectory):
    """Doctors are `doctors` rows joined with their user."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, doctor_id: int) -> Doctor | None:
        result = await self.session.execute(select(DoctorModel).where(DoctorModel.id == doctor_id))
        model = result.unique().scalar_one_or_none()
        if model is None:
            return None
        user = model.user
        return Doctor(
            id=model.id,  # type: ignore[arg-type]
            user_id=model.user_id,  # type: ignore[arg-type]
            name=user.name if user else "",
            email=user.email if user else None,
        )
