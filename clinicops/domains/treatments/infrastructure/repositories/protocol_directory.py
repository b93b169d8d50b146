"""
Protocol Directory Implementation
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.domains.treatments.application.ports.protocol_directory import IProtocolDirectory
from clinicops.domains.treatments.domain.entities.treatment_protocol import TreatmentProtocol
from clinicops.domains.treatments.infrastructure.persistence.sqlalchemy.models import TreatmentProtocolModel


class SQLAlchemyProtocolDirectory(IProtocolDirectory):
    """Reads protocols from the `treatment_protocols` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, protocol_id: int) -> TreatmentProtocol | None:
        result = await self.session.execute(
            select(TreatmentProtocolModel).where(TreatmentProtocolModel.id == protocol_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return TreatmentProtocol(
            id=model.id,  # type: ignore[arg-type]
            name=model.name,  # type: ignore[arg-type]
            description=model.description,  # type: ignore[arg-type]
        )
