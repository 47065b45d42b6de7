from pydantic import BaseModel, Field
from typing import Optional, List
from swimschool.modules.products.models import ProductCategory


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    category: ProductCategory
    description: Optional[str] = None
    image: Optional[str] = None
    images: List[str] = []
    in_stock: bool = True
    quantity: int = Field(default=0, ge=0)
    brand: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[int] = Field(default=None, ge=0)
    category: Optional[ProductCategory] = None
    description: Optional[str] = None
    image: Optional[str] = None
    images: Optional[List[str]] = None
    in_stock: Optional[bool] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
