"""Strategy resolution: map (error, strategy, attempts) to a decision.

Pure decision logic with no side effects. Statistics, logging, reporting and
sleeping are the operation wrapper's job.
"""

from typing import Any

from research_assistant.config.error_handling import StrategyConfig
from research_assistant.core.error_handling.models import ErrorStrategy, StrategyDecision
from research_assistant.core.errors.base import ErrorKind, PluginError

_MISSING = object()


def backoff_delay_ms(attempts: int, config: StrategyConfig) -> int:
    """Delay before the retry that follows ``attempts`` prior retries.

    ``retry_delay_ms * 2**attempts``, capped by ``max_retry_delay_ms``.
    """
    delay = config.retry_delay_ms * (2**attempts)
    if config.max_retry_delay_ms is not None:
        delay = min(delay, config.max_retry_delay_ms)
    return delay


def lookup_fallback(kind: ErrorKind, config: StrategyConfig) -> Any:
    """Find a configured substitute for ``kind``, walking up its parents.

    Returns None when no key along the lineage is configured.
    """
    for candidate in kind.lineage():
        value = config.fallback_values.get(candidate.fallback_key, _MISSING)
        if value is not _MISSING:
            return value
    return None


def resolve_strategy(
    error: PluginError,
    strategy: ErrorStrategy,
    attempts: int,
    config: StrategyConfig,
) -> StrategyDecision:
    """Decide how to handle ``error`` under ``strategy``.

    Args:
        error: The normalized error just caught.
        strategy: The recovery policy requested by the caller.
        attempts: Retries already performed for this operation (zero-indexed).
        config: Handler configuration.

    Returns:
        StrategyDecision describing the next step.

    Raises:
        ValueError: If ``strategy`` is not a known ErrorStrategy.
    """
    strategy = ErrorStrategy(strategy)

    if strategy is ErrorStrategy.RETRY:
        # Non-recoverable input (validation) cannot succeed on a second try.
        if not error.recoverable:
            return StrategyDecision.propagate()
        if attempts < config.max_retries:
            return StrategyDecision.retry(backoff_delay_ms(attempts, config))
        return StrategyDecision.propagate()

    if strategy is ErrorStrategy.FALLBACK:
        return StrategyDecision.substitute_with(lookup_fallback(error.kind, config))

    if strategy is ErrorStrategy.IGNORE:
        return StrategyDecision.proceed()

    if strategy is ErrorStrategy.ESCALATE:
        return StrategyDecision.escalate()

    if strategy is ErrorStrategy.USER_ACTION:
        return StrategyDecision.user_action()

    raise ValueError(f"Unknown error strategy: {strategy!r}")
