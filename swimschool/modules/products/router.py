from fastapi import APIRouter, Depends
from typing import Optional, Dict, List
from swimschool.modules.auth.utility import get_current_admin
from swimschool.modules.products.models import Product
from swimschool.modules.products.schemas import ProductCreate, ProductUpdate
from swimschool.modules.products.service import ProductService
from swimschool.modules.products.dependencies import get_product_service

product_router = APIRouter(prefix="/products", tags=["Products"])

@product_router.get("/", response_model=List[Product])
async def get_all_products(
    category: Optional[str] = None,
    product_service: ProductService = Depends(get_product_service)
    ):
    return await product_service.get_all_products(category)

@product_router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    product_service: ProductService = Depends(get_product_service)
    ):
    return await product_service.get_product(product_id)

@product_router.post("/", response_model=Product, status_code=201)
async def create_product(
    data: ProductCreate,
    current_admin: Dict = Depends(get_current_admin),
    product_service: ProductService = Depends(get_product_service)
    ):
    return await product_service.create_product(data)

@product_router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    current_admin: Dict = Depends(get_current_admin),
    product_service: ProductService = Depends(get_product_service)
    ):
    return await product_service.update_product(product_id, data)

@product_router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    current_admin: Dict = Depends(get_current_admin),
    product_service: ProductService = Depends(get_product_service)
    ):
    return await product_service.delete_product(product_id)
