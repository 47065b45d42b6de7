"""
Class registration engine.

Seats are only ever taken through ClassRepository.reserve_seat, a conditional
increment that fails once the class is full and records the registration
holding the seat, so repeating it for one registration takes one seat. Payment
state only moves out of ``pending`` through a conditional update keyed on the
current status. A paid registration keeps ``seat_reserved`` false until its
seat is held, and every later callback finishes that step, so a store error
halfway through is settled by the gateway's next delivery.
"""

import logging
from typing import Dict, List, Optional
from swimschool.core.config import API_BASE_URL, FRONTEND_URL
from swimschool.core.errors import (
    CapacityExceededError,
    ClassNotFoundError,
    DuplicateRegistrationError,
    PaymentInitiationFailedError,
    PaymentVerificationFailedError,
    RaceLostError,
    RegistrationNotFoundError,
)
from swimschool.modules.classes.repository import ClassRepository
from swimschool.modules.payments.gateway import ZarinpalGateway
from swimschool.modules.payments.models import PaymentAttempt, PaymentPurpose, CallbackOutcome
from swimschool.modules.payments.repository import PaymentRepository
from swimschool.modules.registrations.models import Registration, PaymentStatus, RegistrationStatus
from swimschool.modules.registrations.repository import RegistrationRepository
from swimschool.modules.registrations.schemas import RegistrationResult, RegistrationView

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/api/registrations/payment-callback"
CLASS_FULL_NOTE = "Class filled up before the registration was confirmed"
SEAT_ERROR_NOTE = "Seat could not be reserved"


class RegistrationService:
    def __init__(self,
                 registration_repo: RegistrationRepository,
                 class_repo: ClassRepository,
                 payment_repo: PaymentRepository,
                 gateway: ZarinpalGateway
                 ):
        self.registration_repo = registration_repo
        self.class_repo = class_repo
        self.payment_repo = payment_repo
        self.gateway = gateway

    async def register_for_class(self, class_id: str, current_user: Dict) -> RegistrationResult:
        """Register the current student for a class.

        Free classes are confirmed immediately. Paid classes get a pending
        registration and a gateway URL; the seat is taken on callback.

        Raises:
            ClassNotFoundError: The class does not exist or is inactive.
            CapacityExceededError: The class is already full.
            DuplicateRegistrationError: The student already registered.
            PaymentInitiationFailedError: The gateway refused the request.
            RaceLostError: The last seat went to a concurrent request.
        """
        student_id = current_user["id"]

        class_doc = await self.class_repo.find_class(class_id)
        if not class_doc or not class_doc.get("is_active", True):
            raise ClassNotFoundError(class_id)

        if class_doc["current_students"] >= class_doc["max_students"]:
            raise CapacityExceededError(class_id)

        # Fast path only; the unique index is what actually guarantees this.
        existing = await self.registration_repo.find_registration(student_id, class_id)
        if existing:
            # A failed attempt holds no seat and does not block a new one.
            if existing["payment_status"] != PaymentStatus.failed.value:
                raise DuplicateRegistrationError(student_id, class_id)
            await self.registration_repo.discard_failed_registration(existing["id"])

        if class_doc["price"] == 0:
            return await self._register_free(student_id, class_doc)
        return await self._register_paid(student_id, class_doc)

    async def _register_free(self, student_id: str, class_doc: dict) -> RegistrationResult:
        registration = Registration(
            student_id=student_id,
            class_id=class_doc["id"],
            payment_amount=0,
            payment_status=PaymentStatus.pending,
        )
        # Claim the (student, class) pair before taking a seat.
        await self.registration_repo.add_registration(registration)

        confirmed = None
        try:
            seated = await self.class_repo.reserve_seat(class_doc["id"], registration.id)
            if seated:
                confirmed = await self.registration_repo.transition_payment_status(
                    registration.id, PaymentStatus.pending, PaymentStatus.paid, {"seat_reserved": True}
                )
        except Exception:
            logger.exception("Free registration %s failed while taking a seat", registration.id)
            await self._abandon_free(registration.id, class_doc["id"], SEAT_ERROR_NOTE)
            raise

        if not seated:
            await self._abandon_free(registration.id, class_doc["id"], CLASS_FULL_NOTE)
            logger.warning("Free registration %s lost the last seat of class %s", registration.id, class_doc["id"])
            raise RaceLostError(class_doc["id"])

        if confirmed is None:
            confirmed = await self.registration_repo.find_registration(student_id, class_doc["id"])
        logger.info("Student %s registered for free class %s", student_id, class_doc["id"])
        return RegistrationResult(
            data=Registration(**confirmed),
            message="Successfully registered for free class",
        )

    async def _abandon_free(self, registration_id: str, class_id: str, notes: str):
        # Only the request that fails the row gives its seat back; a row that
        # already reached paid keeps it.
        abandoned = await self.registration_repo.transition_payment_status(
            registration_id,
            PaymentStatus.pending,
            PaymentStatus.failed,
            {"status": RegistrationStatus.cancelled.value, "notes": notes},
        )
        if abandoned is not None:
            await self.class_repo.release_seat(class_id, registration_id)

    async def _register_paid(self, student_id: str, class_doc: dict) -> RegistrationResult:
        result = await self.gateway.request_payment(
            amount=class_doc["price"],
            callback_url=f"{API_BASE_URL}{CALLBACK_PATH}",
            description=f"Registration for {class_doc['title']}",
        )
        if not result.success:
            raise PaymentInitiationFailedError()

        registration = Registration(
            student_id=student_id,
            class_id=class_doc["id"],
            payment_amount=class_doc["price"],
            payment_status=PaymentStatus.pending,
            payment_reference=result.reference,
        )
        await self.registration_repo.add_registration(registration)
        await self.payment_repo.add_payment(PaymentAttempt(
            user_id=student_id,
            amount=class_doc["price"],
            reference=result.reference,
            purpose=PaymentPurpose.class_registration,
            registration_id=registration.id,
        ))
        logger.info("Registration %s pending payment %s", registration.id, result.reference)
        return RegistrationResult(
            data=registration,
            payment_url=self.gateway.payment_url(result.reference),
            message="Payment initiated. Redirecting to payment gateway.",
        )

    async def _registration_for(self, reference: Optional[str]) -> dict:
        registration = await self.registration_repo.find_by_reference(reference) if reference else None
        if not registration:
            raise RegistrationNotFoundError(reference)
        return registration

    @staticmethod
    def _resolved_outcome(registration: dict) -> Optional[CallbackOutcome]:
        """Outcome of a settled registration, or None while work remains.

        A paid registration that is still registered but holds no seat yet is
        not settled: the seat step has to run again.
        """
        payment_status = registration.get("payment_status")
        if payment_status == PaymentStatus.paid.value:
            if registration.get("status") == RegistrationStatus.cancelled.value:
                return CallbackOutcome.full
            if registration.get("seat_reserved"):
                return CallbackOutcome.success
            return None
        if payment_status == PaymentStatus.failed.value:
            return CallbackOutcome.failed
        return None

    async def handle_payment_callback(self, reference: Optional[str], status: Optional[str]) -> CallbackOutcome:
        """Reconcile a gateway callback with its pending registration.

        Repeated deliveries for an already resolved registration return the
        original outcome without touching any state. A delivery that finds a
        paid registration without a seat finishes the seat step.
        """
        if status is not None and status != "OK":
            if reference:
                registration = await self.registration_repo.find_by_reference(reference)
                if registration:
                    await self.registration_repo.transition_payment_status(
                        registration["id"], PaymentStatus.pending, PaymentStatus.failed
                    )
            logger.info("Payment %s cancelled at gateway (Status=%s)", reference, status)
            return CallbackOutcome.failed

        try:
            registration = await self._registration_for(reference)
        except RegistrationNotFoundError:
            logger.warning("Payment callback for unknown reference %r", reference)
            return CallbackOutcome.notfound

        resolved = self._resolved_outcome(registration)
        if resolved is not None:
            return resolved
        if registration["payment_status"] == PaymentStatus.paid.value:
            logger.info("Resuming seat step for paid registration %s", registration["id"])
            return await self._complete_paid(registration)

        try:
            verification = await self.gateway.verify_payment(registration["payment_amount"], reference)
        except PaymentVerificationFailedError:
            # Left pending so a later delivery can settle it.
            return CallbackOutcome.error

        if not verification.is_success:
            failed = await self.registration_repo.transition_payment_status(
                registration["id"], PaymentStatus.pending, PaymentStatus.failed
            )
            if failed is None:
                return await self._current_outcome(reference)
            logger.info("Payment %s not verified; registration %s failed", reference, registration["id"])
            return CallbackOutcome.failed

        paid = await self.registration_repo.transition_payment_status(
            registration["id"], PaymentStatus.pending, PaymentStatus.paid
        )
        if paid is None:
            return await self._current_outcome(reference)
        return await self._complete_paid(paid)

    async def _complete_paid(self, registration: dict) -> CallbackOutcome:
        """Confirm the payment and take the seat of a paid registration.

        Every step is idempotent, so concurrent or repeated callers converge
        on one confirmed payment and at most one seat.
        """
        reference = registration["payment_reference"]
        await self.payment_repo.confirm_payment(reference)

        if not await self.class_repo.reserve_seat(registration["class_id"], registration["id"]):
            await self.registration_repo.cancel_registration(registration["id"], CLASS_FULL_NOTE)
            logger.error(
                "Registration %s paid (%s) but class %s is full; refund required",
                registration["id"], reference, registration["class_id"],
            )
            return CallbackOutcome.full

        await self.registration_repo.mark_seat_reserved(registration["id"])
        logger.info("Registration %s paid and confirmed", registration["id"])
        return CallbackOutcome.success

    async def _current_outcome(self, reference: str) -> CallbackOutcome:
        latest = await self.registration_repo.find_by_reference(reference)
        if not latest:
            return CallbackOutcome.error
        resolved = self._resolved_outcome(latest)
        if resolved is not None:
            return resolved
        if latest["payment_status"] == PaymentStatus.paid.value:
            return await self._complete_paid(latest)
        return CallbackOutcome.error

    async def payment_callback_redirect(self, reference: Optional[str], status: Optional[str]) -> str:
        outcome = await self.handle_payment_callback(reference, status)
        return f"{FRONTEND_URL}/dashboard?payment={outcome.value}"

    async def get_my_registrations(self, current_user: Dict) -> List[RegistrationView]:
        registrations = await self.registration_repo.find_student_registrations(current_user["id"])
        return [RegistrationView(**r) for r in registrations]
