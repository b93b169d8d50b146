"""Initial clinic operations schema.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-03-01

Creates the directory tables (users, doctors, services,
treatment_protocols, doctor_schedules), appointments with the partial
unique index that rejects a second active booking of the same doctor
slot, and patient_treatments.
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SERVICE_TYPE = sa.Enum("CONSULT", "TEST", "TREATMENT", name="service_type")
SHIFT = sa.Enum("MORNING", "AFTERNOON", name="shift")
APPOINTMENT_TYPE = sa.Enum("ONLINE", "OFFLINE", name="appointment_type")
APPOINTMENT_STATUS = sa.Enum(
    "PENDING", "CHECKIN", "PAID", "PROCESS", "CONFIRMED", "COMPLETED", "CANCELLED", name="appointment_status"
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create all tables, enum types and indexes."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "doctors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("specialization", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_doctors_id", "doctors", ["id"])

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", SERVICE_TYPE, nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_services_id", "services", ["id"])

    op.create_table(
        "doctor_schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("doctor_id", sa.Integer(), sa.ForeignKey("doctors.id"), nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("shift", SHIFT, nullable=False),
        sa.Column("is_off", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint("doctor_id", "work_date", "shift", name="uq_doctor_schedules_doctor_day_shift"),
    )
    op.create_index("ix_doctor_schedules_id", "doctor_schedules", ["id"])
    op.create_index("ix_doctor_schedules_doctor_id", "doctor_schedules", ["doctor_id"])
    op.create_index("ix_doctor_schedules_day_shift", "doctor_schedules", ["work_date", "shift"])

    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("doctor_id", sa.Integer(), sa.ForeignKey("doctors.id"), nullable=True),
        sa.Column("service_id", sa.Integer(), sa.ForeignKey("services.id"), nullable=False),
        sa.Column("appointment_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("slot_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("type", APPOINTMENT_TYPE, nullable=False),
        sa.Column("status", APPOINTMENT_STATUS, nullable=False, server_default="PENDING"),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("patient_meeting_url", sa.Text(), nullable=True),
        sa.Column("doctor_meeting_url", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_appointments_id", "appointments", ["id"])
    op.create_index("ix_appointments_user_id", "appointments", ["user_id"])
    op.create_index("ix_appointments_doctor_id", "appointments", ["doctor_id"])
    op.create_index(
        "ix_appointments_doctor_window", "appointments", ["doctor_id", "appointment_time", "slot_end"]
    )
    op.create_index(
        "uq_appointments_doctor_active_slot",
        "appointments",
        ["doctor_id", "appointment_time"],
        unique=True,
        postgresql_where=sa.text("status IN ('PENDING', 'CONFIRMED')"),
    )

    op.create_table(
        "treatment_protocols",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_treatment_protocols_id", "treatment_protocols", ["id"])

    op.create_table(
        "patient_treatments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("protocol_id", sa.Integer(), sa.ForeignKey("treatment_protocols.id"), nullable=False),
        sa.Column("doctor_id", sa.Integer(), sa.ForeignKey("doctors.id"), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("custom_medications", sa.JSON(), nullable=True),
        sa.Column("total", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_patient_treatments_id", "patient_treatments", ["id"])
    op.create_index("ix_patient_treatments_patient_id", "patient_treatments", ["patient_id"])
    op.create_index(
        "ix_patient_treatments_patient_window", "patient_treatments", ["patient_id", "start_date", "end_date"]
    )


def downgrade() -> None:
    """Drop everything created by upgrade()."""
    op.drop_table("patient_treatments")
    op.drop_table("treatment_protocols")
    op.drop_index("uq_appointments_doctor_active_slot", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("doctor_schedules")
    op.drop_table("services")
    op.drop_table("doctors")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (APPOINTMENT_STATUS, APPOINTMENT_TYPE, SHIFT, SERVICE_TYPE):
        enum_type.drop(bind, checkfirst=True)
