from clinicops.domains.treatments.infrastructure.persistence.sqlalchemy.models import (
    PatientTreatmentModel,
    TreatmentProtocolModel,
)

__all__ = ["PatientTreatmentModel", "TreatmentProtocolModel"]
