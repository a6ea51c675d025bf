"""Configuration for the research assistant plugin."""

from research_assistant.config.error_handling import StrategyConfig
from research_assistant.config.loader import load_strategy_config

__all__ = [
    "StrategyConfig",
    "load_strategy_config",
]
