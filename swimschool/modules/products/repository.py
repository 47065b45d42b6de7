from pymongo import ReturnDocument
from swimschool.core.database import mongodb
from swimschool.modules.products.models import Product


class ProductRepository:
    async def add_product(self, product: Product):
        return await mongodb.db.products.insert_one(product.model_dump())

    async def find_product(self, product_id: str):
        return await mongodb.db.products.find_one({"id": product_id}, {"_id": 0})

    async def find_products(self, query: dict):
        return await mongodb.db.products.find(query, {"_id": 0}).sort("created_at", -1).to_list(500)

    async def find_products_by_ids(self, product_ids):
        return await mongodb.db.products.find({"id": {"$in": list(product_ids)}}, {"_id": 0}).to_list(len(product_ids))

    async def update_product(self, product_id: str, update_data: dict):
        return await mongodb.db.products.find_one_and_update(
            {"id": product_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_product(self, product_id: str) -> bool:
        result = await mongodb.db.products.delete_one({"id": product_id})
        return result.deleted_count == 1
