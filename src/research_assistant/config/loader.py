"""Layered loading of StrategyConfig from TOML files and environment variables.

Priority (highest to lowest):
1. Environment variables (RESEARCH_ASSISTANT_*)
2. TOML config file ([error_handling] section)
3. Default values
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from research_assistant.config.error_handling import StrategyConfig
from research_assistant.core.errors import configuration_error

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "RESEARCH_ASSISTANT_CONFIG_FILE"
DEFAULT_CONFIG_FILES = ("research-assistant.toml", ".research-assistant.toml")

_ENV_OVERRIDES: Dict[str, str] = {
    "RESEARCH_ASSISTANT_MAX_RETRIES": "max_retries",
    "RESEARCH_ASSISTANT_RETRY_DELAY_MS": "retry_delay_ms",
    "RESEARCH_ASSISTANT_MAX_RETRY_DELAY_MS": "max_retry_delay_ms",
    "RESEARCH_ASSISTANT_ENABLE_LOGGING": "enable_logging",
    "RESEARCH_ASSISTANT_ENABLE_REPORTING": "enable_reporting",
}


def _read_toml_section(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        raise configuration_error(
            f"Config file not found: {path}",
            config_key="config_file",
            details={"path": str(path)},
        ) from None
    except tomllib.TOMLDecodeError as e:
        raise configuration_error(
            f"Invalid TOML in {path}: {e}",
            config_key="config_file",
            details={"path": str(path)},
            recoverable=False,
        ) from e

    section = data.get("error_handling", {})
    logger.debug("Loaded error_handling config from %s", path)
    return dict(section)


def _resolve_config_path(config_file: Optional[str], environ: Mapping[str, str]) -> Optional[Path]:
    explicit = config_file or environ.get(CONFIG_FILE_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()
    for name in DEFAULT_CONFIG_FILES:
        candidate = Path.cwd() / name
        if candidate.exists():
            return candidate
    return None


def load_strategy_config(
    config_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> StrategyConfig:
    """Build a StrategyConfig from defaults, TOML, and environment variables.

    Args:
        config_file: Explicit TOML path; falls back to
            ``RESEARCH_ASSISTANT_CONFIG_FILE`` and then to a project-local
            ``research-assistant.toml``.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        The merged StrategyConfig.

    Raises:
        PluginError: Configuration-kind error naming the offending key when a
            value is missing, malformed, or out of range.
    """
    env = os.environ if environ is None else environ
    data: Dict[str, Any] = {}

    path = _resolve_config_path(config_file, env)
    if path is not None:
        data.update(_read_toml_section(path))

    for env_var, key in _ENV_OVERRIDES.items():
        if env_var in env:
            data[key] = env[env_var]
            logger.debug("Config override %s from %s", key, env_var)

    try:
        return StrategyConfig.from_toml_dict(data)
    except ValidationError as e:
        first = e.errors()[0]
        key = str(first["loc"][0]) if first.get("loc") else "error_handling"
        raise configuration_error(
            f"Invalid value for {key}: {first.get('msg', e)}",
            config_key=key,
            details={"value": data.get(key)},
            recoverable=False,
        ) from e
    except (TypeError, ValueError) as e:
        raise configuration_error(
            f"Invalid error_handling configuration: {e}",
            config_key="error_handling",
            recoverable=False,
        ) from e
