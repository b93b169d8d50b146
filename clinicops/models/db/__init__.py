from clinicops.models.db.base import Base, TimestampMixin
from clinicops.models.db.user import DoctorModel, UserModel

__all__ = ["Base", "TimestampMixin", "UserModel", "DoctorModel"]
