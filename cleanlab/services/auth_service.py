"""
Registration, phone verification and login
"""
import secrets
from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash
from cleanlab.config import settings
from cleanlab.database import store_guard
from cleanlab.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidStateError,
    NotFoundError,
    UnverifiedError,
    ValidationError,
)
from cleanlab.logger import logger
from cleanlab.models import AuthToken, User
from cleanlab.services.codes import generate_verification_code
from cleanlab.services.sms_service import send_verification_code

MIN_PASSWORD_LENGTH = 6


def _now() -> datetime:
    return datetime.now()


def _code_expiry() -> datetime:
    return _now() + timedelta(minutes=settings.verification_code_ttl_minutes)


def _normalize_phone(phone_number: str | None) -> str:
    return (phone_number or "").replace(" ", "").strip()


def find_user_by_phone(db: Session, phone_number: str) -> User | None:
    return db.query(User).filter(User.phone_number == _normalize_phone(phone_number)).first()


def register_user(
    db: Session,
    phone_number: str,
    full_name: str,
    password: str,
    email: str | None = None,
) -> tuple[User, str]:
    """
    Create an unverified user and send a verification code.

    Returns:
        The new user and the verification code issued to it
    """
    phone_number = _normalize_phone(phone_number)
    full_name = (full_name or "").strip()
    if not phone_number or not full_name or not password:
        raise ValidationError("Phone number, full name and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    with store_guard(db, "register_user"):
        if find_user_by_phone(db, phone_number):
            raise ConflictError("User with this phone number already exists")

        code = generate_verification_code()
        user = User(
            phone_number=phone_number,
            email=(email or "").strip() or None,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            verification_code=code,
            code_expires=_code_expiry(),
            is_verified=False,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

    logger.info(f"User {user.id} registered, awaiting verification")
    send_verification_code(user.phone_number, code)
    return user, code


def verify_user(db: Session, phone_number: str, code: str) -> User:
    """
    Mark the user verified when the code matches and has not expired.

    The code is cleared on success, so it can only be used once.
    """
    phone_number = _normalize_phone(phone_number)
    code = (code or "").strip()
    if not phone_number or not code:
        raise ValidationError("Phone number and code are required")

    with store_guard(db, "verify_user"):
        updated = (
            db.query(User)
            .filter(
                User.phone_number == phone_number,
                User.verification_code == code,
                User.code_expires > _now(),
            )
            .update(
                {
                    User.is_verified: True,
                    User.verification_code: None,
                    User.code_expires: None,
                },
                synchronize_session=False,
            )
        )
        db.commit()
        if not updated:
            raise ValidationError("Invalid or expired verification code")

        user = find_user_by_phone(db, phone_number)

    logger.info(f"User {user.id} verified")
    return user


def login_user(db: Session, phone_number: str, password: str) -> tuple[User, AuthToken]:
    """Check credentials and issue a bearer token"""
    with store_guard(db, "login_user"):
        user = find_user_by_phone(db, phone_number)
        if not user or not check_password_hash(user.password_hash, password or ""):
            raise InvalidCredentialsError()
        if not user.is_verified:
            raise UnverifiedError()

        token = AuthToken(
            user_id=user.id,
            token=secrets.token_urlsafe(32),
            expires_at=_now() + timedelta(days=settings.auth_token_ttl_days),
        )
        db.add(token)
        db.commit()
        db.refresh(token)

    logger.info(f"User {user.id} logged in")
    return user, token


def resend_code(db: Session, phone_number: str) -> str:
    """Issue a fresh verification code, replacing the previous one"""
    with store_guard(db, "resend_code"):
        user = find_user_by_phone(db, phone_number)
        if not user:
            raise NotFoundError("User not found")
        if user.is_verified:
            raise InvalidStateError("Phone number is already verified")

        code = generate_verification_code()
        user.verification_code = code
        user.code_expires = _code_expiry()
        db.commit()

    logger.info(f"Verification code reissued for user {user.id}")
    send_verification_code(user.phone_number, code)
    return code


def authenticate(db: Session, token: str | None) -> User:
    """Resolve a bearer token to its user"""
    if not token:
        raise InvalidCredentialsError("Authentication required")

    with store_guard(db, "authenticate"):
        auth_token = (
            db.query(AuthToken)
            .filter(AuthToken.token == token, AuthToken.expires_at > _now())
            .first()
        )
        if not auth_token:
            raise InvalidCredentialsError("Invalid or expired token")
        return auth_token.user


def logout_user(db: Session, token: str) -> None:
    with store_guard(db, "logout_user"):
        db.query(AuthToken).filter(AuthToken.token == token).delete(synchronize_session=False)
        db.commit()


def purge_expired(db: Session) -> tuple[int, int]:
    """
    Clear expired verification codes and delete expired tokens.

    Returns:
        (codes cleared, tokens removed)
    """
    now = _now()
    with store_guard(db, "purge_expired"):
        codes_cleared = (
            db.query(User)
            .filter(User.verification_code.isnot(None), User.code_expires <= now)
            .update(
                {User.verification_code: None, User.code_expires: None},
                synchronize_session=False,
            )
        )
        tokens_removed = (
            db.query(AuthToken)
            .filter(AuthToken.expires_at <= now)
            .delete(synchronize_session=False)
        )
        db.commit()
    return codes_cleared, tokens_removed
