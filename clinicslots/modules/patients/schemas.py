from pydantic import BaseModel, EmailStr, Field

class PatientInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., pattern=r"^\d{10,11}$")  # digits only, with area code
    email: EmailStr | None = None
