"""Error-handling framework for the research assistant plugin.

Wraps fallible operations, classifies their failures, and applies a recovery
strategy:
- ErrorHandler: async/sync operation wrapper with retry and backoff
- resolve_strategy: pure (error, strategy, attempts) -> decision logic
- validate: rule-based input validation raising Validation errors
- ErrorStatistics: per-owner counters keyed by "<kind>:<code>"
"""

from research_assistant.config.error_handling import StrategyConfig
from research_assistant.core.error_handling.handler import (
    NO_FALLBACK,
    ErrorHandler,
    audit_reporter,
)
from research_assistant.core.error_handling.models import (
    DecisionAction,
    ErrorReporter,
    ErrorStrategy,
    ExecutionContext,
    SleepFunc,
    StrategyDecision,
)
from research_assistant.core.error_handling.resolver import (
    backoff_delay_ms,
    lookup_fallback,
    resolve_strategy,
)
from research_assistant.core.error_handling.statistics import (
    ErrorStatistics,
    statistics_key,
)
from research_assistant.core.error_handling.validation import (
    Rule,
    in_range,
    max_length,
    min_length,
    of_type,
    required,
    validate,
)
from research_assistant.core.errors.messages import to_user_message

__all__ = [
    # Models & enums
    "ErrorStrategy",
    "DecisionAction",
    "StrategyDecision",
    "ExecutionContext",
    "StrategyConfig",
    "SleepFunc",
    "ErrorReporter",
    # Handler
    "ErrorHandler",
    "NO_FALLBACK",
    "audit_reporter",
    # Resolver
    "resolve_strategy",
    "backoff_delay_ms",
    "lookup_fallback",
    # Statistics
    "ErrorStatistics",
    "statistics_key",
    # Validation
    "Rule",
    "validate",
    "required",
    "of_type",
    "min_length",
    "max_length",
    "in_range",
    # Messages
    "to_user_message",
]
