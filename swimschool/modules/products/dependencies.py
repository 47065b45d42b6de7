from fastapi import Depends
from swimschool.modules.products.repository import ProductRepository
from swimschool.modules.products.service import ProductService

def get_product_service(
    product_repo: ProductRepository = Depends(),
) -> ProductService:
    return ProductService(product_repo)
