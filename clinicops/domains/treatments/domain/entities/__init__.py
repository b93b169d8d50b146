"""
Treatment Domain Entities
"""

from clinicops.domains.treatments.domain.entities.patient_treatment import PatientTreatment
from clinicops.domains.treatments.domain.entities.treatment_protocol import TreatmentProtocol

__all__ = ["PatientTreatment", "TreatmentProtocol"]
