from fastapi import Depends
from swimschool.modules.auth.repository import AuthRepository
from swimschool.modules.auth.service import AuthService

def get_auth_service(
    auth_repo: AuthRepository = Depends(),
) -> AuthService:
    return AuthService(auth_repo=auth_repo)
