"""
Treatments Domain Layer

- Entities: PatientTreatment (aggregate root), TreatmentProtocol
- Value Objects: derived treatment state, RiskLevel
- Services: TreatmentDatePolicy
"""
