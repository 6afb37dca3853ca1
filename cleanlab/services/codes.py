"""
Booking and verification code generation
"""
import enum
import secrets
import string
import time
from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from cleanlab.config import settings
from cleanlab.logger import logger
from cleanlab.models import Booking

BOOKING_CODE_ALPHABET = string.ascii_uppercase + string.digits
BASE36_ALPHABET = string.digits + string.ascii_uppercase


class CodeKind(str, enum.Enum):
    VERIFICATION = "verification"  # numeric, 6 digits
    BOOKING = "booking"  # prefix + uppercase alphanumeric


def generate_verification_code() -> str:
    """Six digit code drawn uniformly from 100000-999999"""
    return str(100000 + secrets.randbelow(900000))


def _to_base36(number: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits)) or "0"


def _random_booking_code(prefix: str, length: int) -> str:
    suffix = "".join(secrets.choice(BOOKING_CODE_ALPHABET) for _ in range(length))
    return prefix + suffix


def _timestamp_booking_code(prefix: str, length: int) -> str:
    millis = int(time.time() * 1000)
    return prefix + _to_base36(millis)[-length:]


def booking_code_exists(db: Session, code: str) -> bool:
    return db.query(Booking.id).filter(Booking.booking_code == code).first() is not None


def generate_booking_code(
    db: Session,
    prefix: str | None = None,
    length: int | None = None,
    max_attempts: int | None = None,
) -> str:
    """
    Generate a booking code not yet present in the bookings table.

    Random codes are tried up to max_attempts times. After that a code
    derived from the current timestamp is returned without a further check;
    the unique index on bookings.booking_code stays the final authority.

    Args:
        db: Database session
        prefix: Code prefix, defaults to settings.booking_code_prefix
        length: Number of random characters after the prefix
        max_attempts: Random attempts before the timestamp fallback

    Returns:
        Booking code such as "CL-7K2QZ"
    """
    # Codes are matched upper-cased on lookup
    prefix = (settings.booking_code_prefix if prefix is None else prefix).upper()
    length = length or settings.booking_code_length
    max_attempts = max_attempts or settings.booking_code_max_attempts

    for attempt in range(1, max_attempts + 1):
        code = _random_booking_code(prefix, length)
        try:
            if not booking_code_exists(db, code):
                return code
        except (OperationalError, DisconnectionError):
            # The surrounding transaction is no longer usable
            raise
        except SQLAlchemyError as e:
            logger.warning(f"Booking code uniqueness check failed (attempt {attempt}): {type(e).__name__}")

    code = _timestamp_booking_code(prefix, length)
    logger.warning(f"Booking code retries exhausted, using timestamp code {code}")
    return code


def generate_code(kind: CodeKind, db: Session | None = None) -> str:
    """Dispatch on the kind of code requested"""
    kind = CodeKind(kind)
    if kind is CodeKind.VERIFICATION:
        return generate_verification_code()
    if db is None:
        raise ValueError("A database session is required to generate booking codes")
    return generate_booking_code(db)
