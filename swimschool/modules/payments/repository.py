from datetime import datetime, timezone
from swimschool.core.database import mongodb
from swimschool.modules.payments.models import PaymentAttempt


class PaymentRepository:
    async def add_payment(self, payment: PaymentAttempt):
        return await mongodb.db.payments.insert_one(payment.model_dump())

    async def find_payment_by_reference(self, reference: str):
        return await mongodb.db.payments.find_one({"reference": reference}, {"_id": 0})

    async def confirm_payment(self, reference: str) -> bool:
        """Flip confirmed false -> true; only one caller ever gets True."""
        result = await mongodb.db.payments.update_one(
            {"reference": reference, "confirmed": False},
            {"$set": {"confirmed": True, "confirmed_at": datetime.now(timezone.utc)}}
        )
        return result.modified_count == 1

    async def mark_credited(self, reference: str):
        return await mongodb.db.payments.update_one(
            {"reference": reference, "credited": False},
            {"$set": {"credited": True}}
        )
