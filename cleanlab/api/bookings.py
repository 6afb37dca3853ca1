from datetime import date, time
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session
from cleanlab.api.deps import ensure_can_access, get_current_user, get_optional_user
from cleanlab.database import get_db
from cleanlab.models import User
from cleanlab.services import booking_service
from cleanlab.services.sms_service import send_booking_confirmation

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


class CreateBookingRequest(BaseModel):
    """Request model for account bookings"""

    serviceId: int
    scheduledDate: date
    scheduledTime: time
    address: str
    specialInstructions: str | None = None
    express: bool = False


class GuestBookingRequest(CreateBookingRequest):
    """Request model for bookings made without an account"""

    name: str
    contact: str


class UpdateBookingRequest(BaseModel):
    serviceId: int | None = None
    scheduledDate: date | None = None
    scheduledTime: time | None = None
    address: str | None = None
    notes: str | None = None
    express: bool | None = None


def _created(booking: dict) -> dict:
    return {
        "success": True,
        "message": "Booking created successfully",
        "data": booking,
    }


@router.post("", status_code=201)
def create_booking(
    request: CreateBookingRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    booking = booking_service.create_booking(
        db,
        service_id=request.serviceId,
        scheduled_date=request.scheduledDate,
        scheduled_time=request.scheduledTime,
        address=request.address,
        notes=request.specialInstructions,
        user_id=user.id,
        express=request.express,
    )
    send_booking_confirmation(user.phone_number, booking)
    return _created(booking)


@router.post("/guest", status_code=201)
def create_guest_booking(request: GuestBookingRequest, db: Session = Depends(get_db)):
    booking = booking_service.create_booking(
        db,
        service_id=request.serviceId,
        scheduled_date=request.scheduledDate,
        scheduled_time=request.scheduledTime,
        address=request.address,
        notes=request.specialInstructions,
        contact_name=request.name,
        contact_phone=request.contact,
        express=request.express,
    )
    send_booking_confirmation(booking["customer"]["phone_number"], booking)
    return _created(booking)


@router.get("/my-bookings")
def my_bookings(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"success": True, "data": booking_service.list_bookings_for_user(db, user.id)}


@router.get("/{booking_code}")
def get_booking(
    booking_code: str,
    user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    booking = booking_service.get_booking(db, booking_code)
    ensure_can_access(booking, user)
    return {"success": True, "data": booking}


@router.put("/{booking_code}")
def update_booking(
    booking_code: str,
    request: UpdateBookingRequest,
    user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    ensure_can_access(booking_service.get_booking(db, booking_code), user)
    booking = booking_service.update_booking(
        db,
        booking_code,
        service_id=request.serviceId,
        scheduled_date=request.scheduledDate,
        scheduled_time=request.scheduledTime,
        address=request.address,
        notes=request.notes,
        express=request.express,
    )
    return {"success": True, "message": "Booking updated successfully", "data": booking}


@router.patch("/{booking_code}/cancel")
def cancel_booking(
    booking_code: str,
    user: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    ensure_can_access(booking_service.get_booking(db, booking_code), user)
    booking = booking_service.cancel_booking(db, booking_code)
    return {"success": True, "message": "Booking cancelled successfully", "data": booking}
