from datetime import datetime, timezone
from typing import Optional
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from swimschool.core.database import mongodb
from swimschool.core.errors import DuplicateRegistrationError
from swimschool.modules.registrations.models import Registration, PaymentStatus, RegistrationStatus


class RegistrationRepository:
    async def add_registration(self, registration: Registration):
        try:
            return await mongodb.db.registrations.insert_one(registration.model_dump())
        except DuplicateKeyError:
            raise DuplicateRegistrationError(registration.student_id, registration.class_id)

    async def find_registration(self, student_id: str, class_id: str):
        return await mongodb.db.registrations.find_one(
            {"student_id": student_id, "class_id": class_id}, {"_id": 0}
        )

    async def find_by_reference(self, reference: str):
        return await mongodb.db.registrations.find_one({"payment_reference": reference}, {"_id": 0})

    async def transition_payment_status(
        self,
        registration_id: str,
        from_status: PaymentStatus,
        to_status: PaymentStatus,
        extra: Optional[dict] = None,
    ):
        """Move payment_status from one value to another in a single write.

        Returns the updated document, or None when the registration was no
        longer in ``from_status`` (another request already resolved it).
        """
        update = {"payment_status": to_status.value, "updated_at": datetime.now(timezone.utc)}
        if extra:
            update.update(extra)
        return await mongodb.db.registrations.find_one_and_update(
            {"id": registration_id, "payment_status": from_status.value},
            {"$set": update},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def cancel_registration(self, registration_id: str, notes: str):
        return await mongodb.db.registrations.update_one(
            {"id": registration_id, "status": RegistrationStatus.registered.value},
            {"$set": {
                "status": RegistrationStatus.cancelled.value,
                "notes": notes,
                "updated_at": datetime.now(timezone.utc),
            }}
        )

    async def mark_seat_reserved(self, registration_id: str):
        return await mongodb.db.registrations.update_one(
            {"id": registration_id, "seat_reserved": False},
            {"$set": {"seat_reserved": True, "updated_at": datetime.now(timezone.utc)}}
        )

    async def discard_failed_registration(self, registration_id: str) -> bool:
        """Delete a failed registration so the student can register again."""
        result = await mongodb.db.registrations.delete_one(
            {"id": registration_id, "payment_status": PaymentStatus.failed.value}
        )
        return result.deleted_count == 1

    async def find_student_registrations(self, student_id: str):
        return await mongodb.db.registrations.aggregate([
            {"$match": {"student_id": student_id}},
            {"$sort": {"created_at": -1}},
            {"$lookup": {
                "from": "classes",
                "localField": "class_id",
                "foreignField": "id",
                "as": "class",
            }},
            {"$unwind": {"path": "$class", "preserveNullAndEmptyArrays": True}},
            {"$project": {
                "_id": 0,
                "class._id": 0,
                "class.description": 0,
                "class.max_students": 0,
                "class.current_students": 0,
                "class.seat_holders": 0,
                "class.equipment": 0,
                "class.notes": 0,
            }},
        ]).to_list(500)
