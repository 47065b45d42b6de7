from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone
from enum import Enum
import uuid


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"

class RegistrationStatus(str, Enum):
    registered = "registered"
    cancelled = "cancelled"
    completed = "completed"

class Registration(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    student_id: str
    class_id: str
    payment_amount: int = Field(..., ge=0)
    payment_status: PaymentStatus = PaymentStatus.pending
    payment_reference: Optional[str] = None  # gateway authority
    status: RegistrationStatus = RegistrationStatus.registered
    seat_reserved: bool = False
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
