import logging
from fastapi import APIRouter, Depends, Response
from fastapi.responses import RedirectResponse
from typing import Optional, Dict, List
from swimschool.core.config import FRONTEND_URL
from swimschool.modules.auth.utility import get_current_user
from swimschool.modules.registrations.schemas import RegistrationCreate, RegistrationResult, RegistrationView
from swimschool.modules.registrations.service import RegistrationService
from swimschool.modules.registrations.dependencies import get_registration_service

logger = logging.getLogger(__name__)

registration_router = APIRouter(prefix="/registrations", tags=["Registration"])

@registration_router.post("/", response_model=RegistrationResult)
async def register_for_class(
    data: RegistrationCreate,
    response: Response,
    current_user: Dict = Depends(get_current_user),
    registration_service: RegistrationService = Depends(get_registration_service)
    ):
    result = await registration_service.register_for_class(data.class_id, current_user)
    # 201 when the seat is taken now, 200 when the client still has to pay.
    response.status_code = 200 if result.payment_url else 201
    return result

@registration_router.get("/payment-callback")
async def payment_callback(
    Authority: Optional[str] = None,
    Status: Optional[str] = None,
    registration_service: RegistrationService = Depends(get_registration_service)
    ):
    try:
        url = await registration_service.payment_callback_redirect(Authority, Status)
    except Exception:
        logger.exception("Class payment callback failed for %r", Authority)
        url = f"{FRONTEND_URL}/dashboard?payment=error"
    return RedirectResponse(url, status_code=302)

@registration_router.get("/my", response_model=List[RegistrationView])
async def get_my_registrations(
    current_user: Dict = Depends(get_current_user),
    registration_service: RegistrationService = Depends(get_registration_service)
    ):
    return await registration_service.get_my_registrations(current_user)
