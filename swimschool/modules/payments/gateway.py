"""
Zarinpal payment gateway client (v4 REST API).

Two calls are used: a payment request that returns an authority code for the
hosted payment page, and a verification that confirms the authority was paid.
Verification is idempotent on the gateway side: code 100 means the payment was
verified now, 101 means it had already been verified before.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import httpx
from swimschool.core.config import ZARINPAL_MERCHANT_ID, ZARINPAL_SANDBOX, PAYMENT_TIMEOUT_SECONDS
from swimschool.core.errors import PaymentVerificationFailedError

logger = logging.getLogger(__name__)

SANDBOX_BASE_URL = "https://sandbox.zarinpal.com"
PRODUCTION_BASE_URL = "https://payment.zarinpal.com"

CODE_SUCCESS = 100
CODE_ALREADY_VERIFIED = 101


class VerificationOutcome(str, Enum):
    verified = "verified"
    already_verified = "already_verified"
    not_verified = "not_verified"

    @property
    def is_success(self) -> bool:
        return self in (VerificationOutcome.verified, VerificationOutcome.already_verified)


@dataclass
class PaymentRequestResult:
    success: bool
    reference: Optional[str] = None
    code: Optional[int] = None


def _response_data(body) -> dict:
    # Failed calls come back as {"data": [], "errors": {...}}.
    if isinstance(body, dict) and isinstance(body.get("data"), dict):
        return body["data"]
    return {}


class ZarinpalGateway:
    def __init__(
        self,
        merchant_id: str = ZARINPAL_MERCHANT_ID,
        sandbox: bool = ZARINPAL_SANDBOX,
        timeout: float = PAYMENT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.merchant_id = merchant_id
        self.base_url = SANDBOX_BASE_URL if sandbox else PRODUCTION_BASE_URL
        self.timeout = timeout
        self.transport = transport

    def payment_url(self, reference: str) -> str:
        return f"{self.base_url}/pg/StartPay/{reference}"

    async def _post(self, path: str, payload: dict):
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            response = await client.post(path, json=payload)
            return response.json()

    async def request_payment(self, amount: int, callback_url: str, description: str) -> PaymentRequestResult:
        payload = {
            "merchant_id": self.merchant_id,
            "amount": amount,
            "callback_url": callback_url,
            "description": description,
        }
        try:
            body = await self._post("/pg/v4/payment/request.json", payload)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Payment request to gateway failed: %s", e)
            return PaymentRequestResult(success=False)

        data = _response_data(body)
        code = data.get("code")
        authority = data.get("authority")
        if code == CODE_SUCCESS and authority:
            logger.info("Gateway issued authority %s for amount %s", authority, amount)
            return PaymentRequestResult(success=True, reference=authority, code=code)

        logger.warning("Gateway rejected payment request: %s", body.get("errors") if isinstance(body, dict) else body)
        return PaymentRequestResult(success=False, code=code)

    async def verify_payment(self, amount: int, reference: str) -> VerificationOutcome:
        """Verify a payment; raises PaymentVerificationFailedError when the gateway is unreachable."""
        payload = {
            "merchant_id": self.merchant_id,
            "amount": amount,
            "authority": reference,
        }
        try:
            body = await self._post("/pg/v4/payment/verify.json", payload)
        except httpx.HTTPError as e:
            logger.error("Payment verification for %s could not reach gateway: %s", reference, e)
            raise PaymentVerificationFailedError(reference) from e
        except ValueError:
            logger.warning("Malformed verification response for %s", reference)
            return VerificationOutcome.not_verified

        code = _response_data(body).get("code")
        logger.info("Gateway verification for %s returned code %s", reference, code)
        if code == CODE_SUCCESS:
            return VerificationOutcome.verified
        if code == CODE_ALREADY_VERIFIED:
            return VerificationOutcome.already_verified
        return VerificationOutcome.not_verified


def get_payment_gateway() -> ZarinpalGateway:
    return ZarinpalGateway()
