from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
import uuid


class PaymentPurpose(str, Enum):
    class_registration = "class_registration"
    balance_charge = "balance_charge"
    cart = "cart"

class CallbackOutcome(str, Enum):
    success = "success"
    failed = "failed"
    notfound = "notfound"
    full = "full"
    error = "error"

class CartLine(BaseModel):
    product_id: str
    name: str
    unit_price: int
    quantity: int

class PaymentAttempt(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    amount: int = Field(..., ge=0)
    reference: str  # gateway authority, unique per attempt
    purpose: PaymentPurpose
    confirmed: bool = False
    credited: bool = False
    registration_id: Optional[str] = None
    items: List[CartLine] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    confirmed_at: Optional[datetime] = None
