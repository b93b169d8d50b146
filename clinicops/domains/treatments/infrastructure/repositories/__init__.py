"""
Treatments Infrastructure Repositories
"""

from clinicops.domains.treatments.infrastructure.repositories.protocol_directory import SQLAlchemyProtocolDirectory
from clinicops.domains.treatments.infrastructure.repositories.treatment_repository import (
    SQLAlchemyTreatmentRepository,
)

__all__ = ["SQLAlchemyProtocolDirectory", "SQLAlchemyTreatmentRepository"]
