"""Role permission helper sets."""

from practice_api.db.enums.auth import Role

# Any staff-class role may file a discharge request
ROLES_CAN_REQUEST_DISCHARGE = frozenset(
    {Role.FRONTDESK, Role.STAFF, Role.THERAPIST, Role.SUPERVISOR, Role.ADMIN}
)

# Roles that decide (approve/deny) discharge requests
ROLES_CAN_REVIEW_DISCHARGE = frozenset({Role.SUPERVISOR, Role.ADMIN})

# Roles that may open the pending-requests queue
ROLES_CAN_VIEW_DISCHARGE_QUEUE = frozenset({Role.SUPERVISOR, Role.ADMIN})
