from database import Base
from .user import User, Role
from .event import Event, Analytics
from .registration import Registration, RegistrationStatus, Notification

# This list helps when you do "from models import *"
__all__ = ["Base", "User", "Role", "Event", "Analytics", "Registration", "RegistrationStatus", "Notification"]
