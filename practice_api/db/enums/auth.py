"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    Staff roles.

    - FRONTDESK: Scheduling and intake at the front desk
    - STAFF: General clinical support staff
    - THERAPIST: Clinicians carrying a caseload
    - SUPERVISOR: Clinical supervisors (review discharge requests)
    - ADMIN: Practice administrators
    """

    FRONTDESK = "frontdesk"
    STAFF = "staff"
    THERAPIST = "therapist"
    SUPERVISOR = "supervisor"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_
