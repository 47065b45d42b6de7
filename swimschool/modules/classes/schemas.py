from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from swimschool.modules.classes.models import ClassType, ClassSkillLevel, Instructor, DEFAULT_LOCATION


class ClassCreate(BaseModel):
    title: str = Field(..., min_length=1)
    class_type: ClassType
    description: Optional[str] = None
    duration: int = Field(..., ge=1)
    skill_level: ClassSkillLevel = ClassSkillLevel.all
    date: datetime
    time: str = Field(..., min_length=1)
    max_students: int = Field(..., ge=1)
    price: int = Field(..., ge=0)
    requires_registration: bool = True
    instructor: Instructor
    location: str = DEFAULT_LOCATION
    notes: Optional[str] = None
    equipment: List[str] = []

class ClassUpdate(BaseModel):
    """Partial update; current_students is deliberately not writable here."""
    title: Optional[str] = Field(default=None, min_length=1)
    class_type: Optional[ClassType] = None
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=1)
    skill_level: Optional[ClassSkillLevel] = None
    date: Optional[datetime] = None
    time: Optional[str] = Field(default=None, min_length=1)
    max_students: Optional[int] = Field(default=None, ge=1)
    price: Optional[int] = Field(default=None, ge=0)
    requires_registration: Optional[bool] = None
    instructor: Optional[Instructor] = None
    location: Optional[str] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = None
    equipment: Optional[List[str]] = None
