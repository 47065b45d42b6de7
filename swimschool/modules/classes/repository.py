from pymongo import ReturnDocument
from swimschool.core.database import mongodb
from swimschool.modules.classes.models import ClassSession


class ClassRepository:
    async def add_class(self, class_doc: ClassSession):
        return await mongodb.db.classes.insert_one(class_doc.model_dump(exclude={"available_spots", "is_full"}))

    async def find_class(self, class_id: str):
        return await mongodb.db.classes.find_one({"id": class_id}, {"_id": 0, "seat_holders": 0})

    async def find_classes(self, query: dict):
        return await mongodb.db.classes.find(query, {"_id": 0, "seat_holders": 0}).sort([("date", 1), ("time", 1)]).to_list(500)

    async def find_available_classes(self, now):
        return await mongodb.db.classes.find({
            "is_active": True,
            "date": {"$gte": now},
            "$expr": {"$lt": ["$current_students", "$max_students"]}  # Not full
        }, {"_id": 0, "seat_holders": 0}).sort([("date", 1), ("time", 1)]).to_list(500)

    async def update_class(self, class_id: str, update_data: dict):
        # max_students may only shrink down to the seats already taken.
        query = {"id": class_id}
        if "max_students" in update_data:
            query["current_students"] = {"$lte": update_data["max_students"]}
        return await mongodb.db.classes.find_one_and_update(
            query,
            {"$set": update_data},
            projection={"_id": 0, "seat_holders": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_class(self, class_id: str) -> bool:
        result = await mongodb.db.classes.delete_one({"id": class_id})
        return result.deleted_count == 1

    async def reserve_seat(self, class_id: str, registration_id: str) -> bool:
        """Take one seat for a registration if, and only if, one is still free.

        Check and increment happen in a single conditional update, so two
        concurrent callers can never both take the last seat. The holder is
        recorded on the class, so repeating the call for the same
        registration never takes a second seat.
        """
        result = await mongodb.db.classes.update_one(
            {
                "id": class_id,
                "seat_holders": {"$ne": registration_id},
                "$expr": {"$lt": ["$current_students", "$max_students"]}
            },
            {
                "$inc": {"current_students": 1},
                "$addToSet": {"seat_holders": registration_id},
            }
        )
        if result.modified_count == 1:
            return True
        return await self.holds_seat(class_id, registration_id)

    async def holds_seat(self, class_id: str, registration_id: str) -> bool:
        held = await mongodb.db.classes.count_documents(
            {"id": class_id, "seat_holders": registration_id}, limit=1
        )
        return held == 1

    async def release_seat(self, class_id: str, registration_id: str) -> bool:
        """Give back the seat held by a registration; a no-op if it holds none."""
        result = await mongodb.db.classes.update_one(
            {"id": class_id, "seat_holders": registration_id},
            {
                "$inc": {"current_students": -1},
                "$pull": {"seat_holders": registration_id},
            }
        )
        return result.modified_count == 1
