import logging
from typing import Dict, Optional
from swimschool.core.config import API_BASE_URL, FRONTEND_URL
from swimschool.core.errors import (
    PaymentInitiationFailedError,
    PaymentVerificationFailedError,
    ProductNotFoundError,
    OutOfStockError,
)
from swimschool.modules.payments.gateway import ZarinpalGateway
from swimschool.modules.payments.models import PaymentAttempt, PaymentPurpose, CallbackOutcome, CartLine
from swimschool.modules.payments.repository import PaymentRepository
from swimschool.modules.payments.schemas import CartCheckout, PaymentRedirect
from swimschool.modules.products.repository import ProductRepository
from swimschool.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

BALANCE_CALLBACK_PATH = "/api/paycallback"
CART_CALLBACK_PATH = "/api/payment/cart-callback"


class PaymentService:
    def __init__(self,
                 payment_repo: PaymentRepository,
                 user_repo: UserRepository,
                 product_repo: ProductRepository,
                 gateway: ZarinpalGateway
                 ):
        self.payment_repo = payment_repo
        self.user_repo = user_repo
        self.product_repo = product_repo
        self.gateway = gateway

    async def _initiate(self, user_id: str, amount: int, callback_path: str,
                        description: str, purpose: PaymentPurpose, **extra) -> PaymentRedirect:
        result = await self.gateway.request_payment(amount, f"{API_BASE_URL}{callback_path}", description)
        if not result.success:
            raise PaymentInitiationFailedError()

        payment = PaymentAttempt(
            user_id=user_id,
            amount=amount,
            reference=result.reference,
            purpose=purpose,
            **extra
        )
        await self.payment_repo.add_payment(payment)
        logger.info("Payment %s (%s) initiated for user %s", payment.reference, purpose.value, user_id)
        return PaymentRedirect(
            payment_url=self.gateway.payment_url(result.reference),
            reference=result.reference,
            amount=amount,
        )

    async def charge_balance(self, amount: int, current_user: Dict) -> PaymentRedirect:
        return await self._initiate(
            user_id=current_user["id"],
            amount=amount,
            callback_path=BALANCE_CALLBACK_PATH,
            description="charging balance",
            purpose=PaymentPurpose.balance_charge,
        )

    async def checkout_cart(self, data: CartCheckout, current_user: Dict) -> PaymentRedirect:
        # Prices come from the catalog, never from the client.
        quantities = {}
        for item in data.items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

        products = await self.product_repo.find_products_by_ids(quantities.keys())
        by_id = {p["id"]: p for p in products}

        lines = []
        for product_id, quantity in quantities.items():
            product = by_id.get(product_id)
            if not product or not product.get("is_active", True):
                raise ProductNotFoundError(product_id)
            if not product.get("in_stock", True):
                raise OutOfStockError(product_id)
            lines.append(CartLine(
                product_id=product_id,
                name=product["name"],
                unit_price=product["price"],
                quantity=quantity,
            ))

        total = sum(line.unit_price * line.quantity for line in lines)
        return await self._initiate(
            user_id=current_user["id"],
            amount=total,
            callback_path=CART_CALLBACK_PATH,
            description="Cart purchase",
            purpose=PaymentPurpose.cart,
            items=lines,
        )

    async def reconcile(self, reference: Optional[str], status: Optional[str],
                        purpose: PaymentPurpose) -> CallbackOutcome:
        """Settle a gateway callback for a balance charge or cart payment.

        Safe to call any number of times for the same reference: the confirmed
        flag is flipped by a conditional update and the balance credit is
        keyed on the reference, so retries finish a half-done settlement
        without applying it twice.
        """
        if status is not None and status != "OK":
            logger.info("Payment %s cancelled at gateway (Status=%s)", reference, status)
            return CallbackOutcome.failed

        payment = await self.payment_repo.find_payment_by_reference(reference) if reference else None
        if not payment or payment.get("purpose") != purpose.value:
            logger.warning("Callback for unknown %s payment %r", purpose.value, reference)
            return CallbackOutcome.notfound

        if not payment.get("confirmed"):
            try:
                verification = await self.gateway.verify_payment(payment["amount"], reference)
            except PaymentVerificationFailedError:
                return CallbackOutcome.error

            if not verification.is_success:
                return CallbackOutcome.failed

            await self.payment_repo.confirm_payment(reference)

        if purpose == PaymentPurpose.balance_charge and not payment.get("credited"):
            await self._credit(payment)
        return CallbackOutcome.success

    async def _credit(self, payment: dict):
        if await self.user_repo.credit_balance(payment["user_id"], payment["amount"], payment["reference"]):
            logger.info("Credited %s to balance of user %s", payment["amount"], payment["user_id"])
        await self.payment_repo.mark_credited(payment["reference"])

    async def handle_balance_callback(self, reference: Optional[str], status: Optional[str]) -> str:
        outcome = await self.reconcile(reference, status, PaymentPurpose.balance_charge)
        return f"{FRONTEND_URL}/dashboard?payment={outcome.value}"

    async def handle_cart_callback(self, reference: Optional[str], status: Optional[str]) -> str:
        outcome = await self.reconcile(reference, status, PaymentPurpose.cart)
        if outcome == CallbackOutcome.success:
            return f"{FRONTEND_URL}/dashboard?payment=success&type=cart"
        return f"{FRONTEND_URL}/cart?payment={outcome.value}"
