"""Rule-based value validation.

A rule is a callable taking the value and returning ``True`` when it passes,
or ``False`` / a violation message when it fails. ``validate`` raises a
Validation-kind PluginError on the first failing rule. Exceptions raised by
a rule itself are programmer errors and propagate untouched.

Usage:
    from research_assistant.core.error_handling.validation import validate, in_range

    age = validate(raw_age, [in_range(minimum=1)], "age")
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Callable, Optional, Sequence, TypeVar, Union

from research_assistant.core.errors.constructors import validation_error

T = TypeVar("T")

RuleResult = Union[bool, str]
Rule = Callable[[Any], RuleResult]


def validate(value: T, rules: Sequence[Rule], field_name: str) -> T:
    """Apply ``rules`` in order and return ``value`` if all pass.

    Args:
        value: The value to check.
        rules: Ordered predicates returning True, False, or a message.
        field_name: Name reported on the validation error.

    Returns:
        ``value`` unchanged, for chaining.

    Raises:
        PluginError: Validation-kind, non-recoverable, carrying
            ``field_name`` and the offending ``value``.
    """
    for index, rule in enumerate(rules):
        result = rule(value)
        if isinstance(result, str):
            message = result or f"{field_name} is invalid"
        elif result:
            continue
        else:
            message = f"{field_name} is invalid"
        raise validation_error(
            message,
            field=field_name,
            value=value,
            details={"rule_index": index},
        )
    return value


def required(message: str = "is required") -> Rule:
    """Reject None and empty strings/collections."""

    def rule(value: Any) -> RuleResult:
        if value is None:
            return message
        if isinstance(value, (str, bytes)) and not value.strip():
            return message
        if isinstance(value, (list, tuple, dict, set)) and not value:
            return message
        return True

    return rule


def of_type(*types: type, message: Optional[str] = None) -> Rule:
    """Require an instance of one of ``types`` (bool is not a number)."""
    names = " or ".join(t.__name__ for t in types)

    def rule(value: Any) -> RuleResult:
        if isinstance(value, bool) and bool not in types:
            return message or f"must be of type {names}"
        if isinstance(value, types):
            return True
        return message or f"must be of type {names}"

    return rule


def min_length(length: int, message: Optional[str] = None) -> Rule:
    def rule(value: Any) -> RuleResult:
        return len(value) >= length or (message or f"must be at least {length} characters")

    return rule


def max_length(length: int, message: Optional[str] = None) -> Rule:
    def rule(value: Any) -> RuleResult:
        return len(value) <= length or (message or f"must be at most {length} characters")

    return rule


def in_range(
    minimum: Optional[Real] = None,
    maximum: Optional[Real] = None,
    message: Optional[str] = None,
) -> Rule:
    """Require ``minimum <= value <= maximum`` (either bound optional)."""

    def rule(value: Any) -> RuleResult:
        if minimum is not None and value < minimum:
            return message or f"must be at least {minimum}"
        if maximum is not None and value > maximum:
            return message or f"must be at most {maximum}"
        return True

    return rule
