from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
from swimschool.modules.users.models import UserRole, SwimmingType, SkillLevel


class UserResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str
    role: UserRole
    name: str
    email: EmailStr
    phone: str
    age: Optional[int] = None
    balance: int = 0
    swimming_type: SwimmingType = SwimmingType.normal
    skill_level: SkillLevel = SkillLevel.beginner
    img: Optional[str] = None

class UserRegister(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str = Field(..., min_length=5)
    password: str = Field(..., min_length=6)
    age: Optional[int] = Field(default=None, ge=1, le=120)
    swimming_type: SwimmingType = SwimmingType.normal
    skill_level: SkillLevel = SkillLevel.beginner

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    phone: Optional[str] = Field(default=None, min_length=5)
    age: Optional[int] = Field(default=None, ge=1, le=120)
    swimming_type: Optional[SwimmingType] = None
    skill_level: Optional[SkillLevel] = None
