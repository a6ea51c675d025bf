"""Strategy configuration for the error handler."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from research_assistant.config.parsing import _parse_bool, _parse_optional_int


class StrategyConfig(BaseModel):
    """Retry, logging, reporting and fallback settings for an ErrorHandler.

    Attributes:
        max_retries: Retries after the first attempt under the Retry strategy
        retry_delay_ms: Base delay for exponential backoff
        max_retry_delay_ms: Cap on a single backoff delay (None = uncapped)
        enable_logging: Emit diagnostic traces for handled errors
        enable_reporting: Invoke the reporter for escalated errors
        fallback_values: Substitutes keyed by lower-cased kind name
    """

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    retry_delay_ms: int = Field(default=1000, ge=0, description="Base backoff delay in milliseconds")
    max_retry_delay_ms: Optional[int] = Field(default=None, ge=0, description="Cap on a single backoff delay")
    enable_logging: bool = Field(default=True, description="Emit diagnostic traces")
    enable_reporting: bool = Field(default=False, description="Report escalated errors")
    fallback_values: Dict[str, Any] = Field(default_factory=dict, description="Substitutes by kind key")

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "StrategyConfig":
        """Create config from TOML dict (typically [error_handling] section).

        Args:
            data: Dict from TOML parsing

        Returns:
            StrategyConfig instance
        """
        return cls(
            max_retries=int(data.get("max_retries", 3)),
            retry_delay_ms=int(data.get("retry_delay_ms", 1000)),
            max_retry_delay_ms=_parse_optional_int(data.get("max_retry_delay_ms")),
            enable_logging=_parse_bool(data.get("enable_logging", True)),
            enable_reporting=_parse_bool(data.get("enable_reporting", False)),
            fallback_values={str(k).lower(): v for k, v in dict(data.get("fallback_values", {})).items()},
        )
