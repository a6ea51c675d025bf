"""Error taxonomy for the research assistant plugin.

Every failure is a ``PluginError`` carrying an immutable ``ErrorRecord``.
The record's ``kind`` tag selects the branch of the taxonomy; use the
constructors below rather than building records by hand.

Usage:
    from research_assistant.core.errors import network_error, to_user_message

    raise network_error("Upstream returned 502", status=502, url="/api/data")
"""

from research_assistant.core.errors.base import (
    DEFAULT_CODES,
    DEFAULT_SEVERITIES,
    ErrorKind,
    ErrorRecord,
    ErrorSeverity,
    PluginError,
    normalize_error,
)
from research_assistant.core.errors.constructors import (
    configuration_error,
    network_error,
    plugin_error,
    service_error,
    validation_error,
)
from research_assistant.core.errors.messages import (
    error_to_response,
    to_user_message,
)

__all__ = [
    # Record / kinds
    "ErrorKind",
    "ErrorRecord",
    "ErrorSeverity",
    "PluginError",
    "DEFAULT_CODES",
    "DEFAULT_SEVERITIES",
    "normalize_error",
    # Constructors
    "plugin_error",
    "service_error",
    "validation_error",
    "network_error",
    "configuration_error",
    # Messages
    "to_user_message",
    "error_to_response",
]
