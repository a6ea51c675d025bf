"""Operation wrapper that applies a recovery strategy to failures.

``ErrorHandler`` invokes a caller-supplied operation, normalizes any failure
into a PluginError, records it, asks the resolver what to do, and then
retries, substitutes a value, or raises.

Example:
    >>> handler = ErrorHandler(
    ...     StrategyConfig(max_retries=3, retry_delay_ms=1000),
    ...     ExecutionContext(component="PluginService"),
    ... )
    >>> data = await handler.run_safely(
    ...     lambda: api.get("/api/data"),
    ...     strategy=ErrorStrategy.RETRY,
    ... )

Testing example:
    >>> sleeps = []
    >>> async def fake_sleep(s): sleeps.append(s)
    >>> handler = ErrorHandler(sleep_func=fake_sleep)
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, TypeVar, Union

from research_assistant.config.error_handling import StrategyConfig
from research_assistant.core.error_handling.models import (
    DecisionAction,
    ErrorReporter,
    ErrorStrategy,
    ExecutionContext,
    SleepFunc,
    StrategyDecision,
)
from research_assistant.core.error_handling.resolver import resolve_strategy
from research_assistant.core.error_handling.statistics import ErrorStatistics
from research_assistant.core.error_handling.validation import Rule, validate
from research_assistant.core.errors.base import (
    ErrorRecord,
    ErrorSeverity,
    PluginError,
    normalize_error,
)
from research_assistant.core.observability.audit import audit_log, get_audit_logger

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Missing:
    def __repr__(self) -> str:
        return "NO_FALLBACK"


NO_FALLBACK: Any = _Missing()

_SEVERITY_LEVELS = {
    ErrorSeverity.LOW: logging.INFO,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def audit_reporter(record: ErrorRecord, context: ExecutionContext) -> None:
    """Default escalation reporter: write an ``error_escalated`` audit event."""
    get_audit_logger().error_escalated(record.to_dict(), component=context.component)


class ErrorHandler:
    """Wraps fallible operations with retry, fallback and escalation policies.

    One handler is created per logical owner (e.g. per service instance) and
    owns that owner's error statistics unless a shared ErrorStatistics is
    passed in. The async and sync entry points apply identical policy, except
    that the sync path never sleeps: under the Retry strategy it re-invokes
    the operation immediately.

    Context is attached once per error instance: when the same PluginError
    passes through nested handlers, the innermost handler's context is kept
    and outer handlers only count and log it.
    """

    def __init__(
        self,
        config: Optional[StrategyConfig] = None,
        context: Optional[ExecutionContext] = None,
        *,
        statistics: Optional[ErrorStatistics] = None,
        reporter: Optional[ErrorReporter] = None,
        sleep_func: Optional[SleepFunc] = None,
    ) -> None:
        self.config = config or StrategyConfig()
        self.context = context or ExecutionContext()
        self.statistics = statistics if statistics is not None else ErrorStatistics()
        self._reporter = reporter or audit_reporter
        self._sleep = sleep_func or asyncio.sleep

    async def run_safely(
        self,
        operation: Callable[[], Union[Awaitable[T], T]],
        fallback_value: Any = NO_FALLBACK,
        strategy: ErrorStrategy = ErrorStrategy.RETRY,
    ) -> Any:
        """Run ``operation`` and apply ``strategy`` if it fails.

        Args:
            operation: Zero-argument callable returning an awaitable (use a
                lambda for arguments). Plain return values are accepted too.
            fallback_value: Value returned instead of raising once retries are
                exhausted or for non-retry strategies. ``None`` counts as a
                supplied fallback; omit the argument to have none.
            strategy: Recovery policy to apply.

        Returns:
            The operation's result, the caller's fallback, or the strategy's
            substitute value.

        Raises:
            PluginError: When the failure is left unhandled (exhausted retries
                without fallback, Escalate, UserAction, non-recoverable error).
            asyncio.CancelledError: Propagated untouched; cancellation is
                never treated as a failure.
        """
        attempts = 0
        while True:
            try:
                result = operation()
                if inspect.isawaitable(result):
                    result = await result
                return result
            except Exception as exc:
                error = self._capture(exc, attempts)
                decision = resolve_strategy(error, strategy, attempts, self.config)
                if decision.should_retry:
                    self._on_retry(error, attempts, decision)
                    await self._sleep(decision.delay_ms / 1000.0)
                    attempts += 1
                    continue
                return self._conclude(error, decision, fallback_value)

    def run_safely_sync(
        self,
        operation: Callable[[], T],
        fallback_value: Any = NO_FALLBACK,
        strategy: ErrorStrategy = ErrorStrategy.FALLBACK,
    ) -> Any:
        """Synchronous variant of ``run_safely``.

        Never sleeps. Under the Retry strategy a failed operation is
        re-invoked immediately, up to ``max_retries + 1`` invocations in
        total.

        Raises:
            TypeError: If ``operation`` returns an awaitable.
            PluginError: When the failure is left unhandled.
        """
        attempts = 0
        while True:
            try:
                result = operation()
            except Exception as exc:
                error = self._capture(exc, attempts)
                decision = resolve_strategy(error, strategy, attempts, self.config)
                if decision.should_retry:
                    self._on_retry(error, attempts, decision, immediate=True)
                    attempts += 1
                    continue
                return self._conclude(error, decision, fallback_value)

            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError("run_safely_sync received an awaitable; use run_safely for async operations")
            return result

    def validate(self, value: T, rules: Sequence[Rule], field_name: str) -> T:
        """Validate ``value`` against ``rules``; see ``validation.validate``."""
        return validate(value, rules, field_name)

    def get_statistics(self) -> Mapping[str, int]:
        """Read-only copy of ``"<kind>:<code>" -> count``."""
        return self.statistics.snapshot()

    def reset_statistics(self) -> None:
        self.statistics.reset()

    # --- internals ---

    def _capture(self, exc: Exception, attempts: int) -> PluginError:
        """Normalize, attach context if not already set, count and (optionally) log a failure."""
        error = normalize_error(exc)
        if "context" not in error.details:
            error.replace_record(error.record.with_details(context=self.context.to_dict()))
        self.statistics.record(error)

        if self.config.enable_logging:
            record = error.record
            logger.log(
                _SEVERITY_LEVELS.get(record.severity, logging.WARNING),
                "%s: %s [%s] on attempt %d: %s",
                self.context.component,
                record.kind.value,
                record.code,
                attempts + 1,
                record.message,
                extra={"plugin_error": record.to_dict()},
            )
        return error

    def _on_retry(
        self,
        error: PluginError,
        attempts: int,
        decision: StrategyDecision,
        immediate: bool = False,
    ) -> None:
        delay_ms = 0 if immediate else decision.delay_ms
        if self.config.enable_logging:
            logger.info(
                "%s: retrying after %s (retry %d of %d, delay %dms)",
                self.context.component,
                error.code,
                attempts + 1,
                self.config.max_retries,
                delay_ms,
            )
        if self.config.enable_reporting:
            audit_log(
                "retry_attempt",
                component=self.context.component,
                code=error.code,
                attempt=attempts + 1,
                max_attempts=self.config.max_retries + 1,
                delay_ms=delay_ms,
            )

    def _conclude(self, error: PluginError, decision: StrategyDecision, fallback_value: Any) -> Any:
        """Apply a non-retry decision: return a value or raise ``error``."""
        if decision.action is DecisionAction.ESCALATE:
            self._report(error)
            raise error

        if decision.action is DecisionAction.USER_ACTION:
            error.replace_record(error.record.model_copy(update={"requires_user_action": True}))
            if self.config.enable_reporting:
                audit_log("user_action_required", component=self.context.component, code=error.code)
            raise error

        if fallback_value is not NO_FALLBACK:
            self._note_handled("fallback_applied", error)
            return fallback_value

        if decision.handled:
            event = "fallback_applied" if decision.action is DecisionAction.SUBSTITUTE else "error_handled"
            self._note_handled(event, error)
            return decision.substitute

        raise error

    def _note_handled(self, event_type: str, error: PluginError) -> None:
        if self.config.enable_logging:
            logger.debug("%s: %s handled via %s", self.context.component, error.code, event_type)
        if self.config.enable_reporting:
            audit_log(event_type, component=self.context.component, code=error.code, kind=error.kind.value)

    def _report(self, error: PluginError) -> None:
        """Best-effort reporting; a failing reporter never changes the outcome."""
        if not self.config.enable_reporting:
            return
        try:
            self._reporter(error.record, self.context)
        except Exception as report_exc:
            logger.warning(
                "%s: error reporter failed for %s: %s",
                self.context.component,
                error.code,
                report_exc,
                exc_info=True,
            )
