from cleanlab.models.user import User, AuthToken
from cleanlab.models.service import Service
from cleanlab.models.booking import Booking, BookingStatus

__all__ = ["User", "AuthToken", "Service", "Booking", "BookingStatus"]
