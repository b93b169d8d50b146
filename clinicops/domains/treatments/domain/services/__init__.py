from clinicops.domains.treatments.domain.services.date_policy import TreatmentDatePolicy

__all__ = ["TreatmentDatePolicy"]
