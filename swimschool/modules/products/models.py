from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
import uuid


class ProductCategory(str, Enum):
    swimwear = "swimwear"
    swimgoggles = "swimgoggles"
    swimfins = "swimfins"
    swimequipment = "swimequipment"

class Product(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    price: int = Field(..., ge=0)
    category: ProductCategory
    description: Optional[str] = None
    image: Optional[str] = None
    images: List[str] = []
    in_stock: bool = True
    quantity: int = Field(default=0, ge=0)
    is_active: bool = True
    brand: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
