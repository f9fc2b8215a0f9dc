import uuid
from datetime import date
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, ForeignKey, Index, CheckConstraint
from clinicslots.core.base import Base, TimestampedTenantMixin

# Recurring weekly template: day_of_week 0=Sun..6=Sat, wall-clock "HH:MM" strings.
# A practitioner may hold several rows for one day (split shifts); their slots are unioned.
class PractitionerSchedule(Base, TimestampedTenantMixin):
    practitioner_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("practitioner.id", ondelete="CASCADE"), index=True)
    day_of_week: Mapped[int] = mapped_column(Integer, index=True)  # 0..6
    start_time: Mapped[str] = mapped_column(String(5))  # e.g. "09:00"
    end_time: Mapped[str] = mapped_column(String(5))    # e.g. "18:00"
    break_start: Mapped[str | None] = mapped_column(String(5), nullable=True)
    break_end: Mapped[str | None] = mapped_column(String(5), nullable=True)
    slot_duration: Mapped[int] = mapped_column(Integer, default=30)
    valid_from: Mapped[date | None] = mapped_column(Date, nullable=True)
    valid_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, index=True)

    __table_args__ = (
        Index("ix_schedule_practitioner_day", "practitioner_id", "day_of_week"),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_schedule_day_of_week"),
        CheckConstraint("slot_duration > 0", name="ck_schedule_slot_duration_positive"),
    )
