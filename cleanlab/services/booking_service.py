"""
Booking lifecycle: create, look up, edit, status changes, cancellation
"""
from datetime import date, datetime, time
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from cleanlab.config import settings
from cleanlab.database import store_guard
from cleanlab.errors import (
    InvalidStateError,
    NotFoundError,
    SlotFullError,
    ValidationError,
)
from cleanlab.logger import logger
from cleanlab.models import Booking, BookingStatus, Service
from cleanlab.models.booking import ACTIVE_STATUSES, ALLOWED_TRANSITIONS
from cleanlab.services.catalog_service import get_active_service
from cleanlab.services.codes import generate_booking_code

ACTIVE_STATUS_VALUES = [s.value for s in ACTIVE_STATUSES]


def count_active_bookings(
    db: Session,
    scheduled_date: date,
    scheduled_time: time,
    exclude_id: int | None = None,
) -> int:
    """Bookings occupying the exact (date, time) slot"""
    query = db.query(func.count(Booking.id)).filter(
        Booking.scheduled_date == scheduled_date,
        Booking.scheduled_time == scheduled_time,
        Booking.status.in_(ACTIVE_STATUS_VALUES),
    )
    if exclude_id is not None:
        query = query.filter(Booking.id != exclude_id)
    return query.scalar() or 0


def _ensure_slot_available(
    db: Session,
    scheduled_date: date,
    scheduled_time: time,
    exclude_id: int | None = None,
):
    # Lock the rows already in the slot where the backend supports it
    db.query(Booking.id).filter(
        Booking.scheduled_date == scheduled_date,
        Booking.scheduled_time == scheduled_time,
        Booking.status.in_(ACTIVE_STATUS_VALUES),
    ).with_for_update().all()

    if count_active_bookings(db, scheduled_date, scheduled_time, exclude_id) >= settings.slot_capacity:
        raise SlotFullError()


def _recheck_slot(db: Session, booking: Booking):
    """Recount after flush so a concurrent insert cannot overbook the slot"""
    db.flush()
    if count_active_bookings(db, booking.scheduled_date, booking.scheduled_time) > settings.slot_capacity:
        raise SlotFullError()


def _find(db: Session, code: str) -> Booking:
    booking = (
        db.query(Booking)
        .options(joinedload(Booking.service), joinedload(Booking.user))
        .filter(Booking.booking_code == (code or "").strip().upper())
        .first()
    )
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _slot_time(value: time) -> time:
    """Slots are whole minutes; seconds and offsets would split a slot"""
    return value.replace(second=0, microsecond=0, tzinfo=None)


def create_booking(
    db: Session,
    service_id: int,
    scheduled_date: date,
    scheduled_time: time,
    address: str,
    notes: str | None = None,
    user_id: int | None = None,
    contact_name: str | None = None,
    contact_phone: str | None = None,
    express: bool = False,
) -> dict:
    """
    Create a pending booking.

    Args:
        db: Database session
        service_id: Catalog service being booked
        scheduled_date: Day of the slot
        scheduled_time: Time of the slot
        address: Pickup / service address
        notes: Optional special instructions
        user_id: Owner for account bookings
        contact_name: Customer name for guest bookings
        contact_phone: Customer phone for guest bookings
        express: Charge the express price when the service has one

    Returns:
        Booking enriched with service and customer details
    """
    address = _clean(address)
    if not address:
        raise ValidationError("Address is required")
    if user_id is None and not (_clean(contact_name) and _clean(contact_phone)):
        raise ValidationError("Name and contact are required for guest bookings")
    if scheduled_date is None or scheduled_time is None:
        raise ValidationError("Scheduled date and time are required")
    scheduled_time = _slot_time(scheduled_time)

    # Guest contact is only stored when there is no owning account
    if user_id is None:
        contact_name, contact_phone = _clean(contact_name), _clean(contact_phone)
    else:
        contact_name = contact_phone = None

    with store_guard(db, "create_booking"):
        service = get_active_service(db, service_id)
        _ensure_slot_available(db, scheduled_date, scheduled_time)

        booking = Booking(
            booking_code=generate_booking_code(db),
            user_id=user_id,
            contact_name=contact_name,
            contact_phone=contact_phone,
            service_id=service.id,
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            address=address,
            notes=_clean(notes),
            express=bool(express),
            status=BookingStatus.PENDING.value,
            total_amount=service.price_for(express),
        )
        db.add(booking)
        _recheck_slot(db, booking)
        db.commit()

        logger.info(f"Booking {booking.booking_code} created for service {service.id} on {scheduled_date} {scheduled_time:%H:%M}")
        return _find(db, booking.booking_code).to_dict()


def get_booking(db: Session, code: str) -> dict:
    """Look up a booking by its public code"""
    with store_guard(db, "get_booking"):
        return _find(db, code).to_dict()


def list_bookings_for_user(db: Session, user_id: int) -> list[dict]:
    """All bookings of a user, newest first"""
    # TODO: paginate once customers accumulate long booking histories
    with store_guard(db, "list_bookings_for_user"):
        bookings = (
            db.query(Booking)
            .options(joinedload(Booking.service), joinedload(Booking.user))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )
        return [b.to_dict() for b in bookings]


def list_all_bookings(db: Session, status: str | None = None) -> list[dict]:
    """Admin listing, newest first"""
    with store_guard(db, "list_all_bookings"):
        query = db.query(Booking).options(joinedload(Booking.service), joinedload(Booking.user))
        if status:
            query = query.filter(Booking.status == _parse_status(status).value)
        bookings = query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
        return [b.to_dict() for b in bookings]


def update_booking(
    db: Session,
    code: str,
    service_id: int | None = None,
    scheduled_date: date | None = None,
    scheduled_time: time | None = None,
    address: str | None = None,
    notes: str | None = None,
    express: bool | None = None,
) -> dict:
    """
    Edit the details of a booking that has not reached a terminal status.

    A changed service or express flag reprices the booking from the
    current catalog. A changed slot is checked for capacity again.
    """
    if all(v is None for v in (service_id, scheduled_date, scheduled_time, address, notes, express)):
        raise ValidationError("No changes provided")

    with store_guard(db, "update_booking"):
        booking = _find(db, code)
        if booking.is_terminal:
            raise InvalidStateError(f"Cannot edit a {booking.status} booking")

        if address is not None:
            if not _clean(address):
                raise ValidationError("Address cannot be empty")
            booking.address = _clean(address)
        if notes is not None:
            booking.notes = _clean(notes)

        if service_id is not None or express is not None:
            service = get_active_service(db, service_id if service_id is not None else booking.service_id)
            booking.service_id = service.id
            booking.service = service
            if express is not None:
                booking.express = express
            booking.total_amount = service.price_for(booking.express)

        new_date = scheduled_date if scheduled_date is not None else booking.scheduled_date
        new_time = _slot_time(scheduled_time) if scheduled_time is not None else booking.scheduled_time
        if (new_date, new_time) != (booking.scheduled_date, booking.scheduled_time):
            _ensure_slot_available(db, new_date, new_time, exclude_id=booking.id)
            booking.scheduled_date = new_date
            booking.scheduled_time = new_time
            _recheck_slot(db, booking)

        booking.updated_at = datetime.now()
        db.commit()

        logger.info(f"Booking {booking.booking_code} updated")
        return _find(db, booking.booking_code).to_dict()


def _parse_status(value: str) -> BookingStatus:
    try:
        return BookingStatus.parse(value)
    except ValueError:
        allowed = ", ".join(s.value for s in BookingStatus)
        raise ValidationError(f"Invalid status '{value}'. Allowed: {allowed}")


def set_status(db: Session, code: str, new_status: str) -> dict:
    """Move a booking along pending -> confirmed -> in_progress -> completed, or cancel it"""
    target = _parse_status(new_status)

    with store_guard(db, "set_status"):
        booking = _find(db, code)
        current = BookingStatus(booking.status)
        if target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidStateError(f"Cannot change status from {current.value} to {target.value}")

        booking.status = target.value
        booking.updated_at = datetime.now()
        db.commit()

        logger.info(f"Booking {booking.booking_code} status updated: {current.value} -> {target.value}")
        return _find(db, booking.booking_code).to_dict()


def cancel_booking(db: Session, code: str) -> dict:
    """Cancel by status flip; the record is kept"""
    return set_status(db, code, BookingStatus.CANCELLED.value)


def delete_booking(db: Session, code: str) -> None:
    """Hard delete, reserved for the admin dashboard"""
    with store_guard(db, "delete_booking"):
        booking = _find(db, code)
        db.delete(booking)
        db.commit()
        logger.info(f"Booking {booking.booking_code} deleted")


def booking_stats(db: Session) -> dict:
    """Totals per status, bookings created today and the catalog size"""
    with store_guard(db, "booking_stats"):
        counts = dict(
            db.query(Booking.status, func.count(Booking.id))
            .group_by(Booking.status)
            .all()
        )
        today_start = datetime.combine(date.today(), time.min)
        today = db.query(func.count(Booking.id)).filter(Booking.created_at >= today_start).scalar()

        stats = {"total": sum(counts.values())}
        for status in BookingStatus:
            stats[status.value] = counts.get(status.value, 0)
        stats["today"] = today or 0
        stats["total_services"] = db.query(func.count(Service.id)).scalar() or 0
        return stats
