"""Unit tests for PaymentService (balance charge and cart checkout).

Run with: pytest tests/test_payment_service.py -v
"""

import asyncio

import pytest

from swimschool.core.errors import OutOfStockError, PaymentInitiationFailedError, ProductNotFoundError
from swimschool.modules.payments.gateway import VerificationOutcome
from swimschool.modules.payments.models import CallbackOutcome, PaymentPurpose
from swimschool.modules.payments.schemas import CartCheckout, CartItem


class TestBalanceCharge:
    """Tests for charging a student's balance through the gateway."""

    @pytest.mark.asyncio
    async def test_charge_creates_unconfirmed_attempt(self, payment_service, payment_repo, gateway, student):
        redirect = await payment_service.charge_balance(50000, student)

        attempt = payment_repo.payments[redirect.reference]
        assert attempt["purpose"] == "balance_charge"
        assert attempt["amount"] == 50000
        assert attempt["confirmed"] is False
        assert redirect.payment_url.endswith(f"/pg/StartPay/{redirect.reference}")
        assert gateway.requests[0]["callback_url"].endswith("/api/paycallback")

    @pytest.mark.asyncio
    async def test_charge_rejected_by_gateway(self, payment_service, payment_repo, gateway, student):
        gateway.request_success = False
        with pytest.raises(PaymentInitiationFailedError):
            await payment_service.charge_balance(50000, student)
        assert payment_repo.payments == {}

    @pytest.mark.asyncio
    async def test_verified_callback_credits_once(self, payment_service, payment_repo, user_repo, student):
        user_repo.users[student["id"]] = dict(student, balance=10000)
        redirect = await payment_service.charge_balance(50000, student)

        first = await payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge)
        second = await payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge)

        assert first == second == CallbackOutcome.success
        assert user_repo.users[student["id"]]["balance"] == 60000
        assert payment_repo.payments[redirect.reference]["confirmed"] is True

    @pytest.mark.asyncio
    async def test_concurrent_callbacks_credit_once(self, payment_service, user_repo, student):
        user_repo.users[student["id"]] = dict(student, balance=0)
        redirect = await payment_service.charge_balance(50000, student)

        await asyncio.gather(
            *(payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge) for _ in range(4))
        )

        assert user_repo.users[student["id"]]["balance"] == 50000

    @pytest.mark.asyncio
    async def test_store_error_while_crediting_is_finished_by_retry(
        self, fail_once, payment_service, payment_repo, user_repo, student, monkeypatch
    ):
        user_repo.users[student["id"]] = dict(student, balance=0)
        redirect = await payment_service.charge_balance(50000, student)
        monkeypatch.setattr(user_repo, "credit_balance", fail_once(user_repo.credit_balance))

        with pytest.raises(RuntimeError):
            await payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge)
        assert payment_repo.payments[redirect.reference]["confirmed"] is True
        assert user_repo.users[student["id"]]["balance"] == 0

        outcome = await payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge)

        assert outcome == CallbackOutcome.success
        assert user_repo.users[student["id"]]["balance"] == 50000
        assert payment_repo.payments[redirect.reference]["credited"] is True

    @pytest.mark.asyncio
    async def test_retry_after_credit_does_not_credit_again(
        self, fail_once, payment_service, payment_repo, user_repo, student, monkeypatch
    ):
        user_repo.users[student["id"]] = dict(student, balance=0)
        redirect = await payment_service.charge_balance(50000, student)
        monkeypatch.setattr(payment_repo, "mark_credited", fail_once(payment_repo.mark_credited))

        with pytest.raises(RuntimeError):
            await payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge)
        await payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge)
        await payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge)

        assert user_repo.users[student["id"]]["balance"] == 50000
        assert payment_repo.payments[redirect.reference]["credited"] is True

    @pytest.mark.asyncio
    async def test_cancelled_and_unverified_do_not_credit(self, payment_service, payment_repo, user_repo, gateway, student):
        user_repo.users[student["id"]] = dict(student, balance=0)
        redirect = await payment_service.charge_balance(50000, student)

        assert await payment_service.reconcile(redirect.reference, "NOK", PaymentPurpose.balance_charge) == CallbackOutcome.failed
        gateway.verification = VerificationOutcome.not_verified
        assert await payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge) == CallbackOutcome.failed

        assert user_repo.users[student["id"]]["balance"] == 0
        assert payment_repo.payments[redirect.reference]["confirmed"] is False

    @pytest.mark.asyncio
    async def test_unknown_or_foreign_reference_not_found(self, payment_service, student, make_product):
        product_id = make_product()
        cart = await payment_service.checkout_cart(CartCheckout(items=[CartItem(product_id=product_id)]), student)

        assert await payment_service.reconcile("missing", "OK", PaymentPurpose.balance_charge) == CallbackOutcome.notfound
        # A cart authority must not credit a balance.
        assert await payment_service.reconcile(cart.reference, "OK", PaymentPurpose.balance_charge) == CallbackOutcome.notfound

    @pytest.mark.asyncio
    async def test_gateway_unreachable_reports_error(self, payment_service, gateway, user_repo, student):
        user_repo.users[student["id"]] = dict(student, balance=0)
        redirect = await payment_service.charge_balance(50000, student)
        gateway.verify_error = True

        outcome = await payment_service.reconcile(redirect.reference, "OK", PaymentPurpose.balance_charge)

        assert outcome == CallbackOutcome.error
        assert user_repo.users[student["id"]]["balance"] == 0

    @pytest.mark.asyncio
    async def test_balance_redirect_url(self, payment_service):
        url = await payment_service.handle_balance_callback("missing", None)
        assert url.endswith("/dashboard?payment=notfound")


class TestCartCheckout:
    """Tests for cart checkout."""

    @pytest.mark.asyncio
    async def test_total_comes_from_catalog(self, payment_service, payment_repo, gateway, make_product, student):
        goggles = make_product(name="Goggles", price=120000)
        fins = make_product(name="Fins", price=300000)

        redirect = await payment_service.checkout_cart(
            CartCheckout(items=[
                CartItem(product_id=goggles, quantity=2),
                CartItem(product_id=fins),
                CartItem(product_id=goggles),
            ]),
            student,
        )

        assert redirect.amount == 3 * 120000 + 300000
        assert gateway.requests[0]["amount"] == redirect.amount
        lines = {line["product_id"]: line["quantity"] for line in payment_repo.payments[redirect.reference]["items"]}
        assert lines == {goggles: 3, fins: 1}

    @pytest.mark.asyncio
    async def test_unknown_product_rejected(self, payment_service, gateway, student):
        with pytest.raises(ProductNotFoundError):
            await payment_service.checkout_cart(CartCheckout(items=[CartItem(product_id="nope")]), student)
        assert gateway.requests == []

    @pytest.mark.asyncio
    async def test_inactive_product_rejected(self, payment_service, make_product, student):
        product_id = make_product(is_active=False)
        with pytest.raises(ProductNotFoundError):
            await payment_service.checkout_cart(CartCheckout(items=[CartItem(product_id=product_id)]), student)

    @pytest.mark.asyncio
    async def test_out_of_stock_rejected(self, payment_service, make_product, student):
        product_id = make_product(in_stock=False)
        with pytest.raises(OutOfStockError):
            await payment_service.checkout_cart(CartCheckout(items=[CartItem(product_id=product_id)]), student)

    @pytest.mark.asyncio
    async def test_cart_callback_redirects(self, payment_service, make_product, student):
        product_id = make_product()
        redirect = await payment_service.checkout_cart(CartCheckout(items=[CartItem(product_id=product_id)]), student)

        assert (await payment_service.handle_cart_callback(redirect.reference, "NOK")).endswith("/cart?payment=failed")
        assert (await payment_service.handle_cart_callback(redirect.reference, "OK")).endswith(
            "/dashboard?payment=success&type=cart"
        )
