"""Plugin data service backed by the host's API bridge.

All host calls go through one ErrorHandler so failures are classified,
counted, retried or escalated consistently. The API bridge itself is a
host-supplied collaborator described by the ``ApiService`` protocol.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from research_assistant.config.error_handling import StrategyConfig
from research_assistant.core.error_handling import (
    ErrorHandler,
    ErrorStrategy,
    ExecutionContext,
    of_type,
    required,
)
from research_assistant.core.errors import (
    PluginError,
    network_error,
    service_error,
)

logger = logging.getLogger(__name__)

DATA_ENDPOINT = "/api/plugin-template/data"


class ApiService(Protocol):
    """Host HTTP bridge. Responses are mappings with ``data`` and ``status``."""

    async def get(self, url: str, options: Optional[Dict[str, Any]] = None) -> Any: ...

    async def post(self, url: str, data: Any, options: Optional[Dict[str, Any]] = None) -> Any: ...

    async def put(self, url: str, data: Any, options: Optional[Dict[str, Any]] = None) -> Any: ...

    async def delete(self, url: str, options: Optional[Dict[str, Any]] = None) -> Any: ...


def default_service_config() -> StrategyConfig:
    return StrategyConfig(
        max_retries=3,
        retry_delay_ms=1000,
        enable_logging=True,
        enable_reporting=True,
        fallback_values={
            "plugindata": None,
            "emptyarray": [],
            "defaultobject": {},
        },
    )


class PluginService:
    """CRUD access to plugin data with consistent error handling.

    Args:
        api_service: Host API bridge; None when the host did not provide one.
        config: Handler configuration (defaults to ``default_service_config()``).
        handler: Pre-built handler, e.g. to share statistics or inject sleep.
    """

    def __init__(
        self,
        api_service: Optional[ApiService] = None,
        config: Optional[StrategyConfig] = None,
        handler: Optional[ErrorHandler] = None,
    ) -> None:
        self.api_service = api_service
        self.error_handler = handler or ErrorHandler(
            config or default_service_config(),
            ExecutionContext(
                component="PluginService",
                additional_data={"service": "plugin-template"},
            ),
        )

    def _require_api(self, method: str) -> ApiService:
        if self.api_service is None:
            raise service_error(
                "API service not available",
                "api",
                "SERVICE_UNAVAILABLE",
                {"method": method},
                False,
            )
        return self.api_service

    async def fetch_data(self) -> Optional[Dict[str, Any]]:
        """Fetch plugin data, retrying transient failures with backoff.

        Returns:
            The validated data, or None once retries are exhausted or the
            failure is not retryable (no API bridge, malformed payload).
            Every failed attempt is still logged and counted.
        """

        async def _fetch() -> Dict[str, Any]:
            api = self._require_api("fetch_data")
            try:
                response = await api.get(DATA_ENDPOINT)
            except PluginError:
                raise
            except Exception as e:
                raise network_error(
                    f"Failed to fetch plugin data: {e}",
                    url=DATA_ENDPOINT,
                    details={"original_type": type(e).__name__},
                ) from e

            if not isinstance(response, Mapping):
                raise network_error("Invalid response format from API", url=DATA_ENDPOINT)

            data = response.get("data")
            if not data:
                raise network_error(
                    "No data received from API",
                    status=response.get("status"),
                    url=DATA_ENDPOINT,
                )

            self.validate_data(data)
            logger.debug("PluginService: data fetched successfully")
            return data

        return await self.error_handler.run_safely(_fetch, None, ErrorStrategy.RETRY)

    async def save_data(self, data: Dict[str, Any]) -> Any:
        """Create plugin data; failures are reported and re-raised."""

        async def _save() -> Any:
            return await self._require_api("save_data").post(DATA_ENDPOINT, data)

        return await self.error_handler.run_safely(_save, strategy=ErrorStrategy.ESCALATE)

    async def update_data(self, item_id: str, data: Dict[str, Any]) -> Any:
        """Update one plugin data item; failures are reported and re-raised."""
        self.error_handler.validate(item_id, [required()], "id")

        async def _update() -> Any:
            return await self._require_api("update_data").put(f"{DATA_ENDPOINT}/{item_id}", data)

        return await self.error_handler.run_safely(_update, strategy=ErrorStrategy.ESCALATE)

    async def delete_data(self, item_id: str) -> Any:
        """Delete one plugin data item; failures are reported and re-raised."""
        self.error_handler.validate(item_id, [required()], "id")

        async def _delete() -> Any:
            return await self._require_api("delete_data").delete(f"{DATA_ENDPOINT}/{item_id}")

        return await self.error_handler.run_safely(_delete, strategy=ErrorStrategy.ESCALATE)

    def validate_data(self, data: Mapping[str, Any]) -> Mapping[str, Any]:
        """Check that ``name`` is a non-empty string and ``value`` a number if set."""
        validate = self.error_handler.validate
        validate(data.get("name"), [required(), of_type(str)], "name")
        if data.get("value") is not None:
            validate(data["value"], [of_type(int, float, message="must be a number")], "value")
        return data
