"""Error-handling data models, enums, and protocols.

Defines the core types used across the error_handling sub-package:
- ErrorStrategy enum naming the recovery policies
- DecisionAction / StrategyDecision describing a resolver outcome
- ExecutionContext for caller metadata attached to raised errors
- SleepFunc and ErrorReporter protocols for injectable collaborators
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from research_assistant.core.errors.base import ErrorRecord


class ErrorStrategy(str, Enum):
    """Recovery policy applied to a failed operation."""

    RETRY = "retry"
    FALLBACK = "fallback"
    IGNORE = "ignore"
    ESCALATE = "escalate"
    USER_ACTION = "user_action"


class DecisionAction(str, Enum):
    """What the operation wrapper should do next."""

    RETRY = "retry"
    SUBSTITUTE = "substitute"
    CONTINUE = "continue"
    ESCALATE = "escalate"
    USER_ACTION = "user_action"
    PROPAGATE = "propagate"


@dataclass(frozen=True)
class StrategyDecision:
    """Outcome of resolving an error against a strategy.

    ``handled`` is True when the error is suppressed (a value is returned to
    the caller) and False when it must propagate.
    """

    action: DecisionAction
    handled: bool
    delay_ms: Optional[int] = None
    substitute: Any = None

    @property
    def should_retry(self) -> bool:
        return self.action is DecisionAction.RETRY

    @classmethod
    def retry(cls, delay_ms: int) -> "StrategyDecision":
        return cls(action=DecisionAction.RETRY, handled=True, delay_ms=delay_ms)

    @classmethod
    def substitute_with(cls, value: Any) -> "StrategyDecision":
        return cls(action=DecisionAction.SUBSTITUTE, handled=True, substitute=value)

    @classmethod
    def proceed(cls) -> "StrategyDecision":
        return cls(action=DecisionAction.CONTINUE, handled=True)

    @classmethod
    def escalate(cls) -> "StrategyDecision":
        return cls(action=DecisionAction.ESCALATE, handled=False)

    @classmethod
    def user_action(cls) -> "StrategyDecision":
        return cls(action=DecisionAction.USER_ACTION, handled=False)

    @classmethod
    def propagate(cls) -> "StrategyDecision":
        return cls(action=DecisionAction.PROPAGATE, handled=False)


@dataclass(frozen=True)
class ExecutionContext:
    """Caller metadata attached to every error raised through a handler.

    Attributes:
        component: Name of the owning component (e.g. "PluginService")
        plugin_id: Host plugin identifier
        module_id: Host module identifier
        instance_id: Host module instance identifier
        additional_data: Free-form descriptive metadata
    """

    component: str = "unknown"
    plugin_id: Optional[str] = None
    module_id: Optional[str] = None
    instance_id: Optional[str] = None
    additional_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting unset identifiers."""
        result: Dict[str, Any] = {"component": self.component}
        if self.plugin_id:
            result["plugin_id"] = self.plugin_id
        if self.module_id:
            result["module_id"] = self.module_id
        if self.instance_id:
            result["instance_id"] = self.instance_id
        if self.additional_data:
            result["additional_data"] = dict(self.additional_data)
        return result


class SleepFunc(Protocol):
    """Protocol for injectable async sleep function."""

    async def __call__(self, seconds: float) -> None: ...


class ErrorReporter(Protocol):
    """Protocol for the escalation reporting hook."""

    def __call__(self, record: ErrorRecord, context: ExecutionContext) -> None: ...
