from fastapi import APIRouter, Depends
from typing import Dict
from swimschool.modules.users.schemas import UserResponse, UserUpdate
from swimschool.modules.users.dependencies import get_user_service
from swimschool.modules.auth.utility import get_current_user
from swimschool.modules.users.service import UserService

user_router = APIRouter(prefix="/user", tags=["User"])

@user_router.get("/me", response_model=UserResponse)
async def get_user_profile(
    current_user: Dict = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
    ):
    return await user_service.get_profile(current_user)

@user_router.put("/me")
async def update_user_profile(
    data: UserUpdate,
    current_user: Dict = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
    ):
    return await user_service.update_profile(current_user=current_user, data=data)
