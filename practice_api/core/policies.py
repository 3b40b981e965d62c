"""
Review Authority: role policy for the discharge-request workflow.

Stateless. Checks return booleans and never raise; services translate a
False into AuthorizationError and routers into HTTP 403.
"""

from dataclasses import dataclass

from practice_api.db.enums import (
    ROLES_CAN_REQUEST_DISCHARGE,
    ROLES_CAN_REVIEW_DISCHARGE,
    ROLES_CAN_VIEW_DISCHARGE_QUEUE,
    Role,
)


@dataclass(frozen=True)
class ResourcePolicy:
    """Default role set + per-action overrides for a resource."""

    default: frozenset[Role]
    actions: dict[str, frozenset[Role]]

    def roles_for(self, action: str | None) -> frozenset[Role]:
        if action is None:
            return self.default
        return self.actions.get(action, self.default)


POLICIES: dict[str, ResourcePolicy] = {
    "discharge_requests": ResourcePolicy(
        default=ROLES_CAN_REQUEST_DISCHARGE,
        actions={
            "create": ROLES_CAN_REQUEST_DISCHARGE,
            "view": ROLES_CAN_REQUEST_DISCHARGE,
            "review": ROLES_CAN_REVIEW_DISCHARGE,
            # Stricter than "view": the queue exposes approve/deny directly
            "view_pending": ROLES_CAN_VIEW_DISCHARGE_QUEUE,
        },
    ),
}


def get_policy(resource: str) -> ResourcePolicy:
    """Fetch a resource policy or raise KeyError."""
    return POLICIES[resource]


def _coerce_role(role: Role | str | None) -> Role | None:
    if role is None:
        return None
    if isinstance(role, Role):
        return role
    if Role.has_value(role):
        return Role(role)
    return None


def is_allowed(resource: str, action: str | None, role: Role | str | None) -> bool:
    """True if `role` may perform `action` on `resource`. Unknown roles are denied."""
    coerced = _coerce_role(role)
    if coerced is None:
        return False
    return coerced in get_policy(resource).roles_for(action)


def can_create(role: Role | str | None) -> bool:
    """Any staff-class role may file a discharge request."""
    return is_allowed("discharge_requests", "create", role)


def can_review(role: Role | str | None) -> bool:
    """Only admins and supervisors decide discharge requests."""
    return is_allowed("discharge_requests", "review", role)


def can_view_pending(role: Role | str | None) -> bool:
    return is_allowed("discharge_requests", "view_pending", role)
