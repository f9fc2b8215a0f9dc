import uuid
from decimal import Decimal
from pydantic import BaseModel, ConfigDict

class ServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    name: str
    description: str | None = None
    duration: int
    price: Decimal | None = None
