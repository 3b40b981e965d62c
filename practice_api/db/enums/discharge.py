"""Discharge request enums."""

from enum import Enum


class DischargeRequestStatus(str, Enum):
    """
    Discharge request lifecycle.

    pending -> approved | denied. Both outcomes are terminal.
    """

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"

    @property
    def is_terminal(self) -> bool:
        return self is not DischargeRequestStatus.PENDING


# Outcomes a reviewer may choose
REVIEW_DECISIONS = frozenset({DischargeRequestStatus.APPROVED, DischargeRequestStatus.DENIED})
