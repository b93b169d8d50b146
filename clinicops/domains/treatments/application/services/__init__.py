from clinicops.domains.treatments.application.services.continuity_guard import TreatmentContinuityGuard

__all__ = ["TreatmentContinuityGuard"]
