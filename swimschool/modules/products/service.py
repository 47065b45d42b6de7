from fastapi import HTTPException
from typing import Optional
from datetime import datetime, timezone
from swimschool.modules.products.repository import ProductRepository
from swimschool.modules.products.models import Product
from swimschool.modules.products.schemas import ProductCreate, ProductUpdate


class ProductService:
    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def get_all_products(self, category: Optional[str] = None):
        query = {"is_active": True}
        if category:
            query["category"] = category
        products = await self.product_repo.find_products(query)
        return [Product(**p) for p in products]

    async def get_product(self, product_id: str) -> Product:
        product = await self.product_repo.find_product(product_id)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        return Product(**product)

    async def create_product(self, data: ProductCreate) -> Product:
        product = Product(**data.model_dump())
        await self.product_repo.add_product(product)
        return product

    async def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            return await self.get_product(product_id)
        update_data["updated_at"] = datetime.now(timezone.utc)
        updated = await self.product_repo.update_product(product_id, update_data)
        if not updated:
            raise HTTPException(status_code=404, detail="Product not found")
        return Product(**updated)

    async def delete_product(self, product_id: str):
        if not await self.product_repo.delete_product(product_id):
            raise HTTPException(status_code=404, detail="Product not found")
        return {"success": True, "message": "Product deleted successfully"}
