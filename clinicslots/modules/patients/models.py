from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Index
from clinicslots.core.base import Base, TimestampedTenantMixin

class Patient(Base, TimestampedTenantMixin):
    legal_name: Mapped[str] = mapped_column(String(255))
    primary_phone: Mapped[str] = mapped_column(String(32))
    primary_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    __table_args__ = (Index("ix_patient_clinic_phone", "clinic_id", "primary_phone"),)
