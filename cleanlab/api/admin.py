from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session
from cleanlab.api.deps import require_admin
from cleanlab.database import get_db
from cleanlab.services import booking_service
from cleanlab.services.catalog_service import list_all_services

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


class StatusUpdateRequest(BaseModel):
    status: str


@router.get("/bookings")
def list_bookings(status: str | None = None, db: Session = Depends(get_db)):
    """All bookings, newest first"""
    return {"success": True, "data": booking_service.list_all_bookings(db, status)}


@router.put("/bookings/{booking_code}/status")
def update_status(
    booking_code: str,
    request: StatusUpdateRequest,
    db: Session = Depends(get_db),
):
    booking = booking_service.set_status(db, booking_code, request.status)
    return {
        "success": True,
        "message": "Status updated successfully",
        "data": booking,
    }


@router.delete("/bookings/{booking_code}")
def delete_booking(booking_code: str, db: Session = Depends(get_db)):
    booking_service.delete_booking(db, booking_code)
    return {"success": True, "message": "Booking deleted successfully"}


@router.get("/services")
def list_services(db: Session = Depends(get_db)):
    """Full catalog, retired services included"""
    return {"success": True, "data": [s.to_dict() for s in list_all_services(db)]}


@router.get("/stats")
def stats(db: Session = Depends(get_db)):
    return {"success": True, "data": booking_service.booking_stats(db)}
