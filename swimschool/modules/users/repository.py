from swimschool.core.database import mongodb

class UserRepository:
    async def find_user_by_id(self, id: str):
        return await mongodb.db.users.find_one({"id": id}, {"_id": 0, "hashed_password": 0, "credited_payments": 0})

    async def update_user_by_id(self, id, data):
        return await mongodb.db.users.update_one(
        {"id": id},
        {"$set": data}
    )

    async def credit_balance(self, id: str, amount: int, reference: str) -> bool:
        """Add a payment to the balance once; the reference is recorded on the user."""
        result = await mongodb.db.users.update_one(
            {"id": id, "credited_payments": {"$ne": reference}},
            {
                "$inc": {"balance": amount},
                "$addToSet": {"credited_payments": reference},
            }
        )
        return result.modified_count == 1
