import uuid
from pydantic import BaseModel, ConfigDict

class PractitionerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    name: str
    specialty: str | None = None
