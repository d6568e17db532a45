"""
User roles enumeration.

Defines the caller roles carried in identity tokens.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Platform staff, may override parcel status
        MERCHANT: Books parcels and manages their own bookings
        RIDER: Picks up and delivers parcels, posts tracking events
        USER: Registered customer without booking rights (default role)
    """
    ADMIN = "ADMIN"
    MERCHANT = "MERCHANT"
    RIDER = "RIDER"
    USER = "USER"
