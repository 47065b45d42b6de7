"""Pytest configuration and shared fixtures.

The fake repositories keep documents in memory and reproduce the two store
guarantees the services rely on: the unique (student, class) index and
single-step conditional updates. Each call yields to the event loop first so
concurrent coroutines interleave the way concurrent requests would.
"""

import asyncio
import copy
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient

from swimschool.core.errors import DuplicateRegistrationError, PaymentVerificationFailedError
from swimschool.main import app
from swimschool.modules.classes.models import ClassSession, ClassType, Instructor
from swimschool.modules.payments.gateway import (
    PaymentRequestResult,
    VerificationOutcome,
    ZarinpalGateway,
)
from swimschool.modules.payments.service import PaymentService
from swimschool.modules.products.models import Product, ProductCategory
from swimschool.modules.registrations.service import RegistrationService


class FakeClassRepository:
    def __init__(self):
        self.classes = {}

    async def find_class(self, class_id):
        await asyncio.sleep(0)
        doc = self.classes.get(class_id)
        return copy.deepcopy(doc) if doc else None

    async def reserve_seat(self, class_id, registration_id) -> bool:
        await asyncio.sleep(0)
        doc = self.classes.get(class_id)
        if doc is None:
            return False
        holders = doc.setdefault("seat_holders", [])
        if registration_id in holders:
            return True
        if doc["current_students"] >= doc["max_students"]:
            return False
        doc["current_students"] += 1
        holders.append(registration_id)
        return True

    async def release_seat(self, class_id, registration_id) -> bool:
        await asyncio.sleep(0)
        doc = self.classes.get(class_id)
        if doc is None or registration_id not in doc.get("seat_holders", []):
            return False
        doc["current_students"] -= 1
        doc["seat_holders"].remove(registration_id)
        return True


class FakeRegistrationRepository:
    def __init__(self, class_repo: FakeClassRepository):
        self.class_repo = class_repo
        self.registrations = {}

    async def add_registration(self, registration):
        await asyncio.sleep(0)
        for doc in self.registrations.values():
            if doc["student_id"] == registration.student_id and doc["class_id"] == registration.class_id:
                raise DuplicateRegistrationError(registration.student_id, registration.class_id)
        self.registrations[registration.id] = registration.model_dump(mode="json")

    async def find_registration(self, student_id, class_id):
        await asyncio.sleep(0)
        for doc in self.registrations.values():
            if doc["student_id"] == student_id and doc["class_id"] == class_id:
                return copy.deepcopy(doc)
        return None

    async def find_by_reference(self, reference):
        await asyncio.sleep(0)
        for doc in self.registrations.values():
            if doc["payment_reference"] == reference:
                return copy.deepcopy(doc)
        return None

    async def transition_payment_status(self, registration_id, from_status, to_status, extra=None):
        await asyncio.sleep(0)
        doc = self.registrations.get(registration_id)
        if doc is None or doc["payment_status"] != from_status.value:
            return None
        doc["payment_status"] = to_status.value
        doc.update(extra or {})
        return copy.deepcopy(doc)

    async def cancel_registration(self, registration_id, notes):
        await asyncio.sleep(0)
        doc = self.registrations.get(registration_id)
        if doc and doc["status"] == "registered":
            doc["status"] = "cancelled"
            doc["notes"] = notes

    async def mark_seat_reserved(self, registration_id):
        await asyncio.sleep(0)
        self.registrations[registration_id]["seat_reserved"] = True

    async def discard_failed_registration(self, registration_id) -> bool:
        await asyncio.sleep(0)
        doc = self.registrations.get(registration_id)
        if doc is None or doc["payment_status"] != "failed":
            return False
        del self.registrations[registration_id]
        return True

    async def find_student_registrations(self, student_id):
        await asyncio.sleep(0)
        docs = [copy.deepcopy(d) for d in self.registrations.values() if d["student_id"] == student_id]
        docs.sort(key=lambda d: d["created_at"], reverse=True)
        for doc in docs:
            class_doc = self.class_repo.classes.get(doc["class_id"])
            if class_doc:
                doc["class"] = copy.deepcopy(class_doc)
        return docs

    def by_reference(self, reference):
        return next(d for d in self.registrations.values() if d["payment_reference"] == reference)


class FakePaymentRepository:
    def __init__(self):
        self.payments = {}

    async def add_payment(self, payment):
        await asyncio.sleep(0)
        self.payments[payment.reference] = payment.model_dump(mode="json")

    async def find_payment_by_reference(self, reference):
        await asyncio.sleep(0)
        doc = self.payments.get(reference)
        return copy.deepcopy(doc) if doc else None

    async def confirm_payment(self, reference) -> bool:
        await asyncio.sleep(0)
        doc = self.payments.get(reference)
        if doc is None or doc["confirmed"]:
            return False
        doc["confirmed"] = True
        return True

    async def mark_credited(self, reference):
        await asyncio.sleep(0)
        self.payments[reference]["credited"] = True


class FakeUserRepository:
    def __init__(self):
        self.users = {}

    async def find_user_by_id(self, id):
        await asyncio.sleep(0)
        return copy.deepcopy(self.users.get(id))

    async def update_user_by_id(self, id, data):
        await asyncio.sleep(0)
        self.users[id].update(data)

    async def credit_balance(self, id, amount, reference) -> bool:
        await asyncio.sleep(0)
        user = self.users[id]
        credited = user.setdefault("credited_payments", [])
        if reference in credited:
            return False
        user["balance"] = user.get("balance", 0) + amount
        credited.append(reference)
        return True


class FakeProductRepository:
    def __init__(self):
        self.products = {}

    async def find_products_by_ids(self, product_ids):
        await asyncio.sleep(0)
        return [copy.deepcopy(self.products[i]) for i in product_ids if i in self.products]


class FakeGateway(ZarinpalGateway):
    """Gateway double: issues sequential authorities and a scripted verify result."""

    def __init__(self):
        super().__init__(merchant_id="test-merchant", sandbox=True)
        self._authorities = count(1)
        self.request_success = True
        self.verification = VerificationOutcome.verified
        self.verify_error = False
        self.requests = []
        self.verifications = []

    async def request_payment(self, amount, callback_url, description):
        self.requests.append({"amount": amount, "callback_url": callback_url, "description": description})
        if not self.request_success:
            return PaymentRequestResult(success=False, code=-9)
        return PaymentRequestResult(success=True, reference=f"A{next(self._authorities):035d}", code=100)

    async def verify_payment(self, amount, reference):
        await asyncio.sleep(0)
        self.verifications.append({"amount": amount, "reference": reference})
        if self.verify_error:
            raise PaymentVerificationFailedError(reference)
        return self.verification


@pytest.fixture
def class_repo() -> FakeClassRepository:
    return FakeClassRepository()


@pytest.fixture
def registration_repo(class_repo) -> FakeRegistrationRepository:
    return FakeRegistrationRepository(class_repo)


@pytest.fixture
def payment_repo() -> FakePaymentRepository:
    return FakePaymentRepository()


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def product_repo() -> FakeProductRepository:
    return FakeProductRepository()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def registration_service(registration_repo, class_repo, payment_repo, gateway) -> RegistrationService:
    return RegistrationService(
        registration_repo=registration_repo,
        class_repo=class_repo,
        payment_repo=payment_repo,
        gateway=gateway,
    )


@pytest.fixture
def payment_service(payment_repo, user_repo, product_repo, gateway) -> PaymentService:
    return PaymentService(
        payment_repo=payment_repo,
        user_repo=user_repo,
        product_repo=product_repo,
        gateway=gateway,
    )


@pytest.fixture
def make_class(class_repo):
    def _make(**overrides) -> str:
        fields = {
            "title": "Beginner freestyle",
            "class_type": ClassType.competition_prep,
            "duration": 60,
            "date": datetime.now(timezone.utc) + timedelta(days=3),
            "time": "14:00",
            "max_students": 8,
            "price": 0,
            "instructor": Instructor.first_coach,
        }
        fields.update(overrides)
        class_session = ClassSession(**fields)
        class_repo.classes[class_session.id] = class_session.model_dump(mode="json", exclude={"available_spots", "is_full"})
        return class_session.id
    return _make


@pytest.fixture
def make_product(product_repo):
    def _make(**overrides) -> str:
        fields = {"name": "Goggles", "price": 120000, "category": ProductCategory.swimgoggles}
        fields.update(overrides)
        product = Product(**fields)
        product_repo.products[product.id] = product.model_dump(mode="json")
        return product.id
    return _make


@pytest.fixture
def student() -> dict:
    return {
        "id": "student-1",
        "role": "student",
        "name": "Sara",
        "email": "sara@gmail.com",
        "phone": "09120000000",
        "balance": 0,
    }


@pytest.fixture
def api_client():
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def fail_once():
    """Wrap a repository method so its first call raises a store error."""
    def _wrap(method):
        calls = []

        async def wrapper(*args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                raise RuntimeError("store unavailable")
            return await method(*args, **kwargs)

        return wrapper
    return _wrap
