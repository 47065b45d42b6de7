from swimschool.core.database import mongodb
from swimschool.modules.users.models import User


class AuthRepository:
    async def user_exists(self, email: str) -> bool:
        return await mongodb.db.users.find_one({"email": email}) is not None

    async def create_user(self, user: User) -> dict:
        data = user.model_dump()
        await mongodb.db.users.insert_one(data)
        data.pop("_id", None)
        return data

    async def find_user(self, email: str) -> dict:
        return await mongodb.db.users.find_one({"email": email}, {"_id": 0, "credited_payments": 0})

    async def find_user_by_id(self, id: str) -> dict:
        return await mongodb.db.users.find_one({"id": id}, {"_id": 0, "hashed_password": 0, "credited_payments": 0})
