"""
Service Catalog Implementation
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.domains.scheduling.application.ports.service_catalog import IServiceCatalog
from clinicops.domains.scheduling.domain.entities.clinic_service import ClinicService
from clinicops.domains.scheduling.infrastructure.persistence.sqlalchemy.models import ServiceModel


class SQLAlchemyServiceCatalog(IServiceCatalog):
    """Reads clinic services from the `services` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, service_id: int) -> ClinicService | None:
        result = await self.session.execute(select(ServiceModel).where(ServiceModel.id == service_id))
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return ClinicService(
            id=model.id,  # type: ignore[arg-type]
            name=model.name,  # type: ignore[arg-type]
            type=model.type,  # type: ignore[arg-type]
            start_time=model.start_time,  # type: ignore[arg-type]
            end_time=model.end_time,  # type: ignore[arg-type]
            price=Decimal(model.price or 0),
        )
