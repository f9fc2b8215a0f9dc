from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String
from clinicslots.core.base import Base, TimestampedTenantMixin

class Practitioner(Base, TimestampedTenantMixin):
    __tablename__ = "practitioner"
    name: Mapped[str] = mapped_column(String(160), index=True)
    specialty: Mapped[str | None] = mapped_column(String(120), nullable=True)
    active: Mapped[bool] = mapped_column(default=True)
