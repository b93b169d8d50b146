from clinicops.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    AppointmentModel,
    DoctorScheduleModel,
    ServiceModel,
)

__all__ = ["ServiceModel", "DoctorScheduleModel", "AppointmentModel"]
