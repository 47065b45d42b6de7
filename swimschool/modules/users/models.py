from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
from datetime import datetime, timezone
from enum import Enum
import uuid


class UserRole(str, Enum):
    student = "student"
    admin = "admin"

class SwimmingType(str, Enum):
    normal = "normal"
    competition = "competition"

class SkillLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"

class User(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: UserRole = UserRole.student
    name: str
    email: EmailStr
    phone: str
    hashed_password: str
    age: Optional[int] = None
    balance: int = 0
    swimming_type: SwimmingType = SwimmingType.normal
    skill_level: SkillLevel = SkillLevel.beginner
    img: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
