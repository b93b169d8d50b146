from clinicops.domains.shared.application.ports.people_directory import IDoctorDirectory, IPatientDirectory

__all__ = ["IPatientDirectory", "IDoctorDirectory"]
