from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime
from swimschool.modules.registrations.models import Registration


class RegistrationCreate(BaseModel):
    class_id: str = Field(..., min_length=1, validation_alias=AliasChoices("class_id", "classId"))

class RegistrationResult(BaseModel):
    success: bool = True
    data: Registration
    payment_url: Optional[str] = None
    message: str

class ClassSummary(BaseModel):
    id: str
    title: str
    date: datetime
    time: str
    class_type: str
    instructor: str
    location: str

class RegistrationView(Registration):
    class_: Optional[ClassSummary] = Field(default=None, alias="class")
