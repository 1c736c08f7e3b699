import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import Role, User
from .security_utils import decode_access_token
from .shared.exceptions import AuthenticationError, ForbiddenError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer access token"""

    if not credentials:
        raise AuthenticationError(
            "Not authenticated. Please provide a valid Bearer token in the Authorization header.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise AuthenticationError("Invalid or expired token", headers={"WWW-Authenticate": "Bearer"})

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token claims", headers={"WWW-Authenticate": "Bearer"})

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        # Account was deleted after the token was issued
        logger.warning(f"⚠️ Token presented for missing user_id: {user_id}")
        raise AuthenticationError("Account no longer exists", headers={"WWW-Authenticate": "Bearer"})

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


def require_role(*roles: Role):
    """Build a dependency that only admits callers holding one of ``roles``"""
    allowed = {r.value for r in roles}

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning(f"⚠️ User {user.id} ({user.role}) denied, requires {sorted(allowed)}")
            raise ForbiddenError(f"This action requires role: {', '.join(sorted(allowed))}")
        return user

    return dependency


get_current_trainer = require_role(Role.TRAINER)
get_current_member = require_role(Role.MEMBER)
get_current_admin = require_role(Role.ADMIN)
