from app.models.user import User, UserCreate, UserPublic, UserRole
from app.models.refresh_token import RefreshToken
from app.models.appointment import Appointment, AppointmentPublic, BookingDay

__all__ = [
    "User",
    "UserCreate",
    "UserPublic",
    "UserRole",
    "RefreshToken",
    "Appointment",
    "AppointmentPublic",
    "BookingDay",
]
