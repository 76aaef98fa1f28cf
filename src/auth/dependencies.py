from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from src.database import get_db
from src.config import settings
from src.auth.utils import decode_access_token
from src.auth.service import UserService
from src.auth.schemas import Principal, UserRole
from src.exceptions import AuthenticationError, AuthorizationError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/users/login", auto_error=False)

def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Principal:
    """Resolve the bearer credential to the calling principal"""
    if not token:
        raise AuthenticationError("Access denied. No token provided.")

    payload = decode_access_token(token)
    if payload is None or payload.get("sub") is None:
        raise AuthenticationError("Could not validate credentials")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError("Could not validate credentials")

    user = UserService.get_user_by_id(db, user_id=user_id)
    if user is None:
        raise AuthenticationError("Could not validate credentials")

    return Principal(id=user.id, name=user.name, role=UserRole(user.role))

def require_role(role: UserRole):
    """Build a dependency that only admits principals holding ``role``"""
    def _require(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role != role:
            raise AuthorizationError(f"Access denied. {role.value}s only.")
        return principal
    return _require

require_admin = require_role(UserRole.ADMIN)
require_operator = require_role(UserRole.OPERATOR)
require_commuter = require_role(UserRole.COMMUTER)
