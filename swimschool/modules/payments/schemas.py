from pydantic import BaseModel, Field
from typing import List


class ChargeRequest(BaseModel):
    amount: int = Field(..., gt=0)

class CartItem(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)

class CartCheckout(BaseModel):
    items: List[CartItem] = Field(..., min_length=1)

class PaymentRedirect(BaseModel):
    success: bool = True
    payment_url: str
    reference: str
    amount: int
    message: str = "Payment initiated. Redirecting to payment gateway."
