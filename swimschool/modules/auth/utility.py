import logging
from fastapi import Depends, HTTPException
from typing import Dict
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import bcrypt
import jwt
from datetime import datetime, timezone, timedelta
from swimschool.modules.auth.repository import AuthRepository
from swimschool.core.config import (
    JWT_ALGORITHM,
    JWT_EXPIRY_HOURS,
    JWT_SECRET,
    ADMIN_JWT_SECRET,
    ADMIN_JWT_EXPIRY_HOURS,
)

logger = logging.getLogger(__name__)

# auto_error is off so a missing header maps to our own 401/403 bodies.
security = HTTPBearer(auto_error=False)

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False

def create_token(user_id: str, role: str) -> str:
    payload = {
        "sub": user_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(hours=JWT_EXPIRY_HOURS)
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

def create_admin_token(username: str) -> str:
    payload = {
        "sub": username,
        "role": "admin",
        "exp": datetime.now(timezone.utc) + timedelta(hours=ADMIN_JWT_EXPIRY_HOURS)
    }
    return jwt.encode(payload, ADMIN_JWT_SECRET, algorithm=JWT_ALGORITHM)

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_repo: AuthRepository = Depends(),
) -> Dict:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        payload = jwt.decode(credentials.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = await auth_repo.find_user_by_id(payload["sub"])
    if not user or not user.get("is_active", True):
        logger.info("Token subject %s does not resolve to an active user", payload.get("sub"))
        raise HTTPException(status_code=401, detail="User not found")
    return user

async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict:
    if credentials is None:
        raise HTTPException(status_code=403, detail="Admin access required (no token)")
    try:
        payload = jwt.decode(credentials.credentials, ADMIN_JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=403, detail="Admin access required (invalid token)")
    if payload.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return {"username": payload["sub"], "role": "admin"}
