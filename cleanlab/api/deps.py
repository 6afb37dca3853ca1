import secrets
from fastapi import Depends, Header, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from cleanlab.config import settings
from cleanlab.database import get_db
from cleanlab.errors import ForbiddenError, InvalidCredentialsError
from cleanlab.models import User
from cleanlab.services.auth_service import authenticate

bearer_scheme = HTTPBearer(auto_error=False)


def get_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    return credentials.credentials if credentials else None


def get_current_user(
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
) -> User:
    return authenticate(db, token)


def get_optional_user(
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
) -> User | None:
    if not token:
        return None
    return authenticate(db, token)


def ensure_can_access(booking: dict, user: User | None):
    """
    Account bookings are visible to their owner only. Guest bookings are
    reachable by anyone holding the code.
    """
    owner_id = booking.get("owner_id")
    if owner_id is None:
        return
    if user is None:
        raise InvalidCredentialsError("Authentication required")
    if owner_id != user.id:
        raise ForbiddenError()


async def require_admin(
    x_admin_password: str | None = Header(None),
    password: str | None = Query(None),
):
    """Shared admin password from the X-Admin-Password header or ?password="""
    supplied = x_admin_password or password or ""
    if not settings.admin_password or not secrets.compare_digest(
        supplied.encode(), settings.admin_password.encode()
    ):
        raise ForbiddenError("Invalid admin password")
    return True
