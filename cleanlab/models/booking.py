import enum
from datetime import datetime
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from cleanlab.database import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str) -> "BookingStatus":
        """Accepts both in_progress and in-progress"""
        return cls((value or "").strip().lower().replace("-", "_"))


# Statuses that occupy a slot
ACTIVE_STATUSES = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.IN_PROGRESS,
)

TERMINAL_STATUSES = (BookingStatus.COMPLETED, BookingStatus.CANCELLED)

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED},
    BookingStatus.IN_PROGRESS: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}


class Booking(Base):
    """Store booking data"""
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_slot", "scheduled_date", "scheduled_time"),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_code = Column(String(32), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    # Guest bookings carry contact details instead of a user
    contact_name = Column(String(255), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(Time, nullable=False)
    address = Column(Text, nullable=False)
    notes = Column(Text, default="")
    express = Column(Boolean, default=False, nullable=False)
    status = Column(String(20), default=BookingStatus.PENDING.value, index=True, nullable=False)
    total_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    user = relationship("User", back_populates="bookings")
    service = relationship("Service")

    @property
    def is_terminal(self) -> bool:
        return self.status in {s.value for s in TERMINAL_STATUSES}

    def to_dict(self) -> dict:
        """Booking enriched with service and customer details"""
        if self.user is not None:
            customer = {
                "full_name": self.user.full_name,
                "phone_number": self.user.phone_number,
                "email": self.user.email,
            }
        else:
            customer = {
                "full_name": self.contact_name,
                "phone_number": self.contact_phone,
                "email": None,
            }

        return {
            "id": self.id,
            "booking_code": self.booking_code,
            "owner_id": self.user_id,
            "service_id": self.service_id,
            "service_name": self.service.name if self.service else None,
            "category": self.service.category if self.service else None,
            "scheduled_date": self.scheduled_date.isoformat(),
            "scheduled_time": self.scheduled_time.strftime("%H:%M"),
            "address": self.address,
            "notes": self.notes or "",
            "express": self.express,
            "status": self.status,
            "total_amount": self.total_amount,
            "customer": customer,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
