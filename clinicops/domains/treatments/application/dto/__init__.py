from clinicops.domains.treatments.application.dto.treatment_dtos import (
    ContinuityReport,
    PatientViolation,
    QuickCheckResult,
    RepairAction,
    RepairReport,
    TreatmentChanges,
    TreatmentCreateRequest,
    TreatmentSummary,
    ViolationReport,
)

__all__ = [
    "ContinuityReport",
    "PatientViolation",
    "QuickCheckResult",
    "RepairAction",
    "RepairReport",
    "TreatmentChanges",
    "TreatmentCreateRequest",
    "TreatmentSummary",
    "ViolationReport",
]
