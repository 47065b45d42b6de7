from fastapi import Depends
from swimschool.modules.payments.gateway import ZarinpalGateway, get_payment_gateway
from swimschool.modules.payments.repository import PaymentRepository
from swimschool.modules.payments.service import PaymentService
from swimschool.modules.products.repository import ProductRepository
from swimschool.modules.users.repository import UserRepository

def get_payment_service(
    payment_repo: PaymentRepository = Depends(),
    user_repo: UserRepository = Depends(),
    product_repo: ProductRepository = Depends(),
    gateway: ZarinpalGateway = Depends(get_payment_gateway),
) -> PaymentService:
    return PaymentService(
        payment_repo=payment_repo,
        user_repo=user_repo,
        product_repo=product_repo,
        gateway=gateway,
    )
