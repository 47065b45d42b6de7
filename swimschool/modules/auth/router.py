from fastapi import APIRouter, Depends
from typing import Dict
from swimschool.modules.auth.schemas import TokenResponse, AdminLogin, AdminTokenResponse, AdminResponse
from swimschool.modules.users.schemas import UserLogin, UserResponse, UserRegister
from swimschool.modules.auth.service import AuthService
from swimschool.modules.auth.dependencies import get_auth_service
from swimschool.modules.auth.utility import get_current_user, get_current_admin

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
admin_router = APIRouter(prefix="/admin", tags=["Admin"])

@auth_router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    data: UserRegister,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.register(data)

@auth_router.post("/login", response_model=TokenResponse)
async def login(
    data: UserLogin,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.login(data)

@auth_router.get("/me", response_model=UserResponse)
async def get_me(
     current_user: Dict = Depends(get_current_user),
     service: AuthService = Depends(get_auth_service)
    ):
     return await service.get_me(current_user)

@admin_router.post("/login", response_model=AdminTokenResponse)
async def admin_login(
    data: AdminLogin,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.admin_login(data)

@admin_router.get("/me", response_model=AdminResponse)
async def get_admin(current_admin: Dict = Depends(get_current_admin)):
    return AdminResponse(**current_admin)
