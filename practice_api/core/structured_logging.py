"""Structured logging helpers (PHI-safe)."""

import logging
from typing import Any


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install the process-wide log format (no-op if handlers exist)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_log_context(
    *,
    user_id: str | None = None,
    patient_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
    status: str | None = None,
) -> dict[str, Any]:
    """Return a PHI-safe log context dict (identifiers only, never names or reasons)."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if patient_id:
        context["patient_id"] = patient_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    if status:
        context["status"] = status
    return context
