"""Declarative field rules.

A ``FieldRule`` is a chain of sanitizers and checks bound to a field path.
Paths use dots for nested keys and ``*`` to fan out over array elements, so
``metrics.*.value`` runs once per metric and reports ``metrics[2].value``.

Rules never short-circuit: every check in every rule runs, and failures are
collected in rule declaration order, then element order, then check order.
Sanitizers (``trim``) write their result back into the payload being
validated, which is how the coerced payload that is echoed to clients is
produced.
"""
from __future__ import annotations

import copy
import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from mylife.core.schemas.validation import FieldError
from mylife.utils.arrays import contains_duplicates
from mylife.utils.dates import is_calendar_date, is_iso8601

_INT = re.compile(r"^-?\d+$")
_NUMBER = re.compile(r"^-?\d+(\.\d+)?$")


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

# check(value, payload) -> passed
Check = Callable[[Any, Mapping[str, Any]], bool]


@dataclass
class _Step:
    check: Check | None = None
    sanitize: Callable[[Any], Any] | None = None
    message: str | None = None


@dataclass
class _Target:
    parent: Any
    key: str | int
    param: str

    def get(self) -> Any:
        if isinstance(self.parent, dict):
            return self.parent.get(self.key, MISSING)
        if isinstance(self.parent, list) and isinstance(self.key, int) and self.key < len(self.parent):
            return self.parent[self.key]
        return MISSING

    def set(self, value: Any) -> None:
        if isinstance(self.parent, (dict, list)):
            self.parent[self.key] = value


def to_trimmed_string(value: Any) -> Any:
    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INT.match(value):
        return int(value)
    return None


def as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str) and _NUMBER.match(value):
        return float(value)
    return None


def _in_range(number: float | None, min: float | None, max: float | None) -> bool:
    if number is None:
        return False
    if min is not None and number < min:
        return False
    return not (max is not None and number > max)


@dataclass
class FieldRule:
    path: str
    message: str | None = None
    _optional: bool = field(default=False, init=False)
    _steps: list[_Step] = field(default_factory=list, init=False)

    # -- chain builders -------------------------------------------------

    def optional(self) -> FieldRule:
        """Skip the whole chain when the field is absent or null."""
        self._optional = True
        return self

    def trim(self) -> FieldRule:
        self._steps.append(_Step(sanitize=to_trimmed_string))
        return self

    def exists(self, message: str | None = None) -> FieldRule:
        return self.check(lambda v, _: v is not MISSING, message)

    def not_empty(self, message: str | None = None) -> FieldRule:
        return self.check(lambda v, _: v is not MISSING and v is not None and v != "", message)

    def length(self, min: int = 0, max: int | None = None, message: str | None = None) -> FieldRule:
        return self.check(
            lambda v, _: isinstance(v, str) and len(v) >= min and (max is None or len(v) <= max),
            message,
        )

    def is_boolean(self, message: str | None = None) -> FieldRule:
        return self.check(lambda v, _: v in ("true", "false") or isinstance(v, bool), message)

    def is_in(self, choices: Sequence[str], message: str | None = None) -> FieldRule:
        allowed = tuple(choices)
        return self.check(lambda v, _: isinstance(v, str) and v in allowed, message)

    def is_date(self, message: str | None = None) -> FieldRule:
        return self.check(lambda v, _: is_calendar_date(v), message)

    def is_iso8601(self, message: str | None = None) -> FieldRule:
        return self.check(lambda v, _: is_iso8601(v), message)

    def is_int(self, min: int | None = None, max: int | None = None, message: str | None = None) -> FieldRule:
        return self.check(lambda v, _: _in_range(as_int(v), min, max), message)

    def is_number(
        self, min: float | None = None, max: float | None = None, message: str | None = None
    ) -> FieldRule:
        return self.check(lambda v, _: _in_range(as_number(v), min, max), message)

    def is_list(self, message: str | None = None) -> FieldRule:
        return self.check(lambda v, _: isinstance(v, list), message)

    def min_items(self, count: int, message: str | None = None) -> FieldRule:
        # A present non-list is already reported by is_list.
        def _check(v: Any, _: Mapping[str, Any]) -> bool:
            if v is MISSING or v is None:
                return False
            return not isinstance(v, list) or len(v) >= count

        return self.check(_check, message)

    def no_duplicates(self, message: str | None = None) -> FieldRule:
        return self.check(lambda v, _: not isinstance(v, list) or not contains_duplicates(v), message)

    def check(self, func: Check, message: str | None = None) -> FieldRule:
        self._steps.append(_Step(check=func, message=message))
        return self

    # -- execution --------------------------------------------------------

    def run(self, payload: dict[str, Any]) -> list[FieldError]:
        errors: list[FieldError] = []
        for target in self._targets(payload):
            errors.extend(self._run_target(target, payload))
        return errors

    def _run_target(self, target: _Target, payload: Mapping[str, Any]) -> list[FieldError]:
        value = target.get()
        if self._optional and (value is MISSING or value is None):
            return []

        # Sanitizers fill in absent fields; errors still report them as absent.
        missing = value is MISSING
        errors: list[FieldError] = []
        for step in self._steps:
            if step.sanitize is not None:
                value = step.sanitize(value)
                target.set(value)
            elif step.check is not None and not step.check(value, payload):
                errors.append(self._error(step, MISSING if missing else value, target.param))
        return errors

    def _error(self, step: _Step, value: Any, param: str) -> FieldError:
        msg = step.message or self.message or "Invalid value."
        if value is MISSING:
            return FieldError(msg=msg, param=param)
        return FieldError(value=copy.deepcopy(value), msg=msg, param=param)

    def _targets(self, payload: dict[str, Any]) -> list[_Target]:
        segments = self.path.split(".")
        frontier: list[tuple[Any, str]] = [(payload, "")]
        targets: list[_Target] = []
        for index, segment in enumerate(segments):
            last = index == len(segments) - 1
            next_frontier: list[tuple[Any, str]] = []
            for node, prefix in frontier:
                if segment == "*":
                    if not isinstance(node, list):
                        continue
                    for position, item in enumerate(node):
                        param = f"{prefix}[{position}]"
                        if last:
                            targets.append(_Target(node, position, param))
                        else:
                            next_frontier.append((item, param))
                else:
                    param = f"{prefix}.{segment}" if prefix else segment
                    if last:
                        targets.append(_Target(node, segment, param))
                    else:
                        child = node.get(segment, MISSING) if isinstance(node, dict) else MISSING
                        next_frontier.append((child, param))
            frontier = next_frontier
        return targets


def body(path: str, message: str | None = None) -> FieldRule:
    """Start a rule for a request body field."""
    return FieldRule(path, message)


@dataclass
class ValidationResult:
    errors: list[FieldError]
    normalized: dict[str, Any]

    @property
    def ok(self) -> bool:
        return not self.errors


# extra validator: normalized payload -> additional errors
ExtraValidator = Callable[[Mapping[str, Any]], list[FieldError]]


def run_rules(
    rules: Sequence[FieldRule],
    payload: Mapping[str, Any],
    extra_validators: Sequence[ExtraValidator] = (),
) -> ValidationResult:
    """Run every rule over a copy of ``payload`` and collect all errors."""
    data = copy.deepcopy(dict(payload))
    errors: list[FieldError] = []
    for rule in rules:
        errors.extend(rule.run(data))
    for validator in extra_validators:
        errors.extend(validator(data))
    return ValidationResult(errors=errors, normalized=data)
