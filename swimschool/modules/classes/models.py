from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
import uuid


class ClassType(str, Enum):
    private_12_sessions = "کلاس خصوصی ۱۲ جلسه"
    parent_and_child = "کلاس پدر و فرزند"
    competition_prep = "کلاس آمادگی مسابقات"
    free_pool_session = "سانس آزاد استخر"
    free_trial = "جلسه آزمایشی رایگان"

class ClassSkillLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    all = "all"

class Instructor(str, Enum):
    first_coach = "مربی اول"
    second_coach = "مربی دوم"
    both_coaches = "هر دو مربی"

DEFAULT_LOCATION = "استخر اصلی"

class ClassSession(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    class_type: ClassType
    description: Optional[str] = None
    duration: int = Field(..., gt=0)  # minutes
    skill_level: ClassSkillLevel = ClassSkillLevel.all
    date: datetime
    time: str  # e.g. "14:00"
    max_students: int = Field(..., gt=0)
    # Only the registration engine writes this, through ClassRepository.reserve_seat.
    current_students: int = Field(default=0, ge=0)
    price: int = Field(..., ge=0)  # Toman
    requires_registration: bool = True
    instructor: Instructor
    location: str = DEFAULT_LOCATION
    is_active: bool = True
    notes: Optional[str] = None
    equipment: List[str] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field
    @property
    def available_spots(self) -> int:
        return max(self.max_students - self.current_students, 0)

    @computed_field
    @property
    def is_full(self) -> bool:
        return self.current_students >= self.max_students
