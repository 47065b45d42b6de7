from fastapi import HTTPException
import logging
from pymongo.errors import DuplicateKeyError
from swimschool.core.config import ADMIN_USERNAME, ADMIN_PASSWORD_HASH
from swimschool.modules.auth.repository import AuthRepository
from swimschool.modules.auth.schemas import TokenResponse, AdminLogin, AdminTokenResponse, AdminResponse
from swimschool.modules.users.schemas import UserResponse, UserLogin, UserRegister
from swimschool.modules.users.models import User
from swimschool.modules.auth.utility import hash_password, create_token, create_admin_token, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, auth_repo: AuthRepository):
        self.auth_repo = auth_repo

    async def register(self, data: UserRegister) -> TokenResponse:
        if await self.auth_repo.user_exists(data.email):
            raise HTTPException(status_code=400, detail="Email already registered")

        user = User(
            name=data.name,
            email=data.email,
            phone=data.phone,
            age=data.age,
            swimming_type=data.swimming_type,
            skill_level=data.skill_level,
            hashed_password=hash_password(data.password)
        )
        try:
            await self.auth_repo.create_user(user)
        except DuplicateKeyError:
            raise HTTPException(status_code=400, detail="Email already registered")

        logger.info("Registered student %s", user.id)
        token = create_token(user.id, user.role.value)
        return TokenResponse(access_token=token, user=UserResponse(**user.model_dump()))

    async def login(self, data: UserLogin) -> TokenResponse:
        user = await self.auth_repo.find_user(data.email)
        if not user or not verify_password(data.password, user.get("hashed_password", "")):
            raise HTTPException(status_code=401, detail="Invalid credentials")
        if not user.get("is_active", True):
            raise HTTPException(status_code=403, detail="Account disabled")
        token = create_token(user["id"], user["role"])
        return TokenResponse(access_token=token, user=UserResponse(**user))

    async def admin_login(self, data: AdminLogin) -> AdminTokenResponse:
        if data.username != ADMIN_USERNAME or not verify_password(data.password, ADMIN_PASSWORD_HASH):
            logger.warning("Rejected admin login for %r", data.username)
            raise HTTPException(status_code=401, detail="Invalid admin credentials")
        token = create_admin_token(data.username)
        return AdminTokenResponse(access_token=token, admin=AdminResponse(username=data.username))

    async def get_me(self, current_user: dict) -> UserResponse:
        return UserResponse(**current_user)
