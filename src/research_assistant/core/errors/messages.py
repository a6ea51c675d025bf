"""User-facing messages and UI error responses.

Usage:
    from research_assistant.core.errors.messages import error_to_response

    try:
        data = await service.fetch_data()
    except Exception as exc:
        state["error"] = error_to_response(exc)["error"]
"""

from __future__ import annotations

from typing import Any, Dict

from research_assistant.core.errors.base import ErrorKind, PluginError

GENERIC_MESSAGE = "An unexpected error occurred. Please try again."
NETWORK_MESSAGE = "Unable to reach the server. Please check your connection and try again."


def _humanize(name: str) -> str:
    return name.replace("_", " ").replace("-", " ").strip()


def to_user_message(error: BaseException) -> str:
    """Translate an error into a short message suitable for display.

    Technical text is never echoed for Network or Service errors; validation
    messages are echoed since they are written for the user.
    """
    if not isinstance(error, PluginError):
        return GENERIC_MESSAGE

    record = error.record
    kind = record.kind

    if kind is ErrorKind.VALIDATION:
        field = _humanize(record.field or "input")
        return f"Please check the {field} field: {record.message}"
    if kind is ErrorKind.NETWORK:
        return NETWORK_MESSAGE
    if kind is ErrorKind.CONFIGURATION:
        setting = _humanize(record.config_key or "unknown")
        return f"A required setting is missing: {setting}. Please update the plugin settings."
    if kind.is_a(ErrorKind.SERVICE):
        service = _humanize(record.service or "requested")
        return f"The {service} service is currently unavailable. Please try again later."
    return GENERIC_MESSAGE


def error_to_response(exc: BaseException) -> Dict[str, Any]:
    """Convert any exception into the dict the UI layer renders.

    Args:
        exc: The exception to convert.

    Returns:
        A dict with ``success=False``, the user message, and the error's
        code, kind and flags. Foreign exceptions map to ``UNEXPECTED_ERROR``.
    """
    if isinstance(exc, PluginError):
        record = exc.record
        return {
            "success": False,
            "error": to_user_message(exc),
            "error_code": record.code,
            "error_kind": record.kind.value,
            "recoverable": record.recoverable,
            "requires_user_action": record.requires_user_action,
            "details": dict(record.details),
        }
    return {
        "success": False,
        "error": GENERIC_MESSAGE,
        "error_code": "UNEXPECTED_ERROR",
        "error_kind": ErrorKind.PLUGIN.value,
        "recoverable": True,
        "requires_user_action": False,
        "details": {"original_type": type(exc).__name__},
    }
