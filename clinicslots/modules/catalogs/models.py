from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Integer, Numeric, UniqueConstraint, CheckConstraint
from clinicslots.core.base import Base, TimestampedTenantMixin

# A bookable service (consultation, cleaning, ...). Duration is in minutes.
class Service(Base, TimestampedTenantMixin):
    __tablename__ = "service"
    name: Mapped[str] = mapped_column(String(160))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[int] = mapped_column(Integer, default=30)
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    active: Mapped[bool] = mapped_column(default=True)
    __table_args__ = (
        UniqueConstraint("clinic_id", "name", name="uq_service_clinic_name"),
        CheckConstraint("duration > 0", name="ck_service_duration_positive"),
    )
