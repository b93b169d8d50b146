from clinicops.domains.shared.infrastructure.repositories.people_directory import (
    SQLAlchemyDoctorDirectory,
    SQLAlchemyPatientDirectory,
)

__all__ = ["SQLAlchemyPatientDirectory", "SQLAlchemyDoctorDirectory"]
