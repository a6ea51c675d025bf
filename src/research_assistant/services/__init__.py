"""Service facades built on the error-handling framework."""

from research_assistant.services.plugin_service import ApiService, PluginService

__all__ = [
    "ApiService",
    "PluginService",
]
