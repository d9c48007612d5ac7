"""
The Hillside Echo - User Enums
==============================
Staff and contributor accounts with role-based access.
"""

import enum


class UserRole(str, enum.Enum):
    guest = "guest"
    hillsider = "hillsider"
    alumni = "alumni"
    admin = "admin"


class AccountStatus(str, enum.Enum):
    approved = "approved"
    pending = "pending"
    rejected = "rejected"


# Roles that carry department/course/position profile fields.
PROFILED_ROLES = frozenset({UserRole.hillsider, UserRole.alumni})
