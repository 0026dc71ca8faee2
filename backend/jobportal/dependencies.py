import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from jobportal.config import Settings
from jobportal.database import get_db
from jobportal.enums import Role
from jobportal.errors import Forbidden, Unauthenticated
from jobportal.models.user import User
from jobportal.utils.security import TokenError, decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Access denied. No token provided.")

    try:
        user_id = decode_access_token(credentials.credentials, settings)
    except TokenError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise Unauthenticated() from exc

    user = db.get(User, user_id)
    if user is None:
        logger.debug("Bearer token subject %s no longer exists", user_id)
        raise Unauthenticated()
    return user


def require_role(*roles: Role):
    allowed = frozenset(roles)

    async def _check_role(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise Forbidden()
        return user

    return _check_role


require_admin = require_role(Role.ADMIN)
