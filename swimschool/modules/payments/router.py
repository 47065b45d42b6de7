import logging
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from typing import Optional, Dict
from swimschool.core.config import FRONTEND_URL
from swimschool.modules.auth.utility import get_current_user
from swimschool.modules.payments.schemas import ChargeRequest, CartCheckout, PaymentRedirect
from swimschool.modules.payments.service import PaymentService
from swimschool.modules.payments.dependencies import get_payment_service

logger = logging.getLogger(__name__)

payment_router = APIRouter(prefix="/payment", tags=["Payment"])
# The balance callback address predates the /payment prefix and is kept as is.
paycallback_router = APIRouter(tags=["Payment"])

@payment_router.post("/charge", response_model=PaymentRedirect)
async def charge_balance(
    data: ChargeRequest,
    current_user: Dict = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service)
    ):
    return await payment_service.charge_balance(data.amount, current_user)

@payment_router.post("/cart", response_model=PaymentRedirect)
async def checkout_cart(
    data: CartCheckout,
    current_user: Dict = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service)
    ):
    return await payment_service.checkout_cart(data, current_user)

@payment_router.get("/cart-callback")
async def cart_callback(
    Authority: Optional[str] = None,
    Status: Optional[str] = None,
    payment_service: PaymentService = Depends(get_payment_service)
    ):
    try:
        url = await payment_service.handle_cart_callback(Authority, Status)
    except Exception:
        logger.exception("Cart payment callback failed for %r", Authority)
        url = f"{FRONTEND_URL}/cart?payment=error"
    return RedirectResponse(url, status_code=302)

@paycallback_router.get("/paycallback")
async def balance_callback(
    Authority: Optional[str] = None,
    Status: Optional[str] = None,
    payment_service: PaymentService = Depends(get_payment_service)
    ):
    try:
        url = await payment_service.handle_balance_callback(Authority, Status)
    except Exception:
        logger.exception("Balance payment callback failed for %r", Authority)
        url = f"{FRONTEND_URL}/dashboard?payment=error"
    return RedirectResponse(url, status_code=302)
