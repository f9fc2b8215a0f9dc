import uuid
import datetime as dt
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, Text, ForeignKey, Index, CheckConstraint, text
from clinicslots.core.base import Base, TimestampedTenantMixin

BOOKING_STATUSES = ("scheduled", "confirmed", "completed", "cancelled", "no_show")

# Rows matching this predicate hold their slot; cancelled or soft-deleted rows free it.
SLOT_HOLDING = "status <> 'cancelled' AND deleted_at IS NULL"

class Booking(Base, TimestampedTenantMixin):
    practitioner_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("practitioner.id"), nullable=True)
    service_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("service.id"))
    patient_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("patient.id"))

    date: Mapped[dt.date] = mapped_column(Date)
    time: Mapped[str] = mapped_column(String(5))  # zero-padded "HH:MM"
    duration: Mapped[int] = mapped_column(Integer)  # minutes, copied from the service at creation

    status: Mapped[str] = mapped_column(String(16), default="scheduled")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        # One holder per (clinic, practitioner, date, time); enforced by the store, not by the app.
        Index(
            "uq_booking_slot", "clinic_id", "practitioner_id", "date", "time",
            unique=True,
            postgresql_where=text(SLOT_HOLDING),
            sqlite_where=text(SLOT_HOLDING),
        ),
        Index("ix_booking_clinic_date", "clinic_id", "date"),
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in BOOKING_STATUSES) + ")",
            name="ck_booking_status",
        ),
    )
