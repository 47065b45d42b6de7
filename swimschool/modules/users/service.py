from fastapi import HTTPException
from datetime import datetime, timezone
from swimschool.modules.users.repository import UserRepository
from swimschool.modules.users.schemas import UserResponse, UserUpdate

class UserService:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def get_profile(self, current_user: dict) -> UserResponse:
        return UserResponse(**current_user)

    async def update_profile(self, current_user: dict, data: UserUpdate):
        update_data = data.model_dump(exclude_none=True)

        if not update_data:
            return {"message": "Nothing to update"}

        update_data["updated_at"] = datetime.now(timezone.utc)

        await self.user_repo.update_user_by_id(
            current_user["id"],
            update_data
        )
        user = await self.user_repo.find_user_by_id(current_user["id"])
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        return {"message": "Profile updated successfully", "user": UserResponse(**user)}
