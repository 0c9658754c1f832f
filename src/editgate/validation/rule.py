"""Rule contract and the explicit rule registry.

Rule authors either export objects satisfying :class:`ValidationRule` from a
module in the rules directory, or call :func:`register` at import time::

    from editgate import Rule, register

    register(Rule(
        name="no-console-log",
        description="Disallow console.log in TypeScript sources",
        should_run=lambda ctx: ctx.file_path.endswith(".ts"),
        validate=lambda ctx: ["console.log is not allowed"] if "console.log" in ctx.content else [],
    ))
"""

import logging
from collections.abc import Awaitable, Callable, Iterator, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar, runtime_checkable

from ..errors import InvalidRuleError
from ..models import ValidationContext

logger = logging.getLogger(__name__)

Diagnostics = Sequence[str]
RuleOutcome = Diagnostics | Awaitable[Diagnostics]


@runtime_checkable
class ValidationRule(Protocol):
    """Shape every validation rule must satisfy."""

    name: str
    description: str

    def should_run(self, context: ValidationContext) -> bool:
        """Return True if this rule applies to ``context``."""
        ...

    def validate(self, context: ValidationContext) -> RuleOutcome:
        """Return diagnostics for ``context``, directly or as an awaitable."""
        ...


@dataclass(frozen=True)
class Rule:
    """Validation rule assembled from a predicate and a check function."""
    name: str
    description: str
    should_run: Callable[[ValidationContext], bool]
    validate: Callable[[ValidationContext], RuleOutcome]


R = TypeVar("R")


def define_rule(rule: R) -> R:
    """Mark ``rule`` as a validation rule. Returns it unchanged."""
    return rule


def is_validation_rule(obj: Any) -> bool:
    """Structural check used at the discovery and registration boundaries."""
    if obj is None or isinstance(obj, type):
        return False
    return (
        isinstance(getattr(obj, "name", None), str)
        and isinstance(getattr(obj, "description", None), str)
        and callable(getattr(obj, "should_run", None))
        and callable(getattr(obj, "validate", None))
    )


class RuleRegistry:
    """Ordered collection of rules registered through :func:`register`."""

    def __init__(self) -> None:
        self._rules: list[ValidationRule] = []

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[ValidationRule]:
        return iter(list(self._rules))

    @property
    def rules(self) -> list[ValidationRule]:
        return list(self._rules)

    def add(self, rule: ValidationRule) -> ValidationRule:
        """Add a rule after checking its shape.

        Raises:
            InvalidRuleError: If ``rule`` does not satisfy the rule contract
        """
        if not is_validation_rule(rule):
            raise InvalidRuleError(
                f"{rule!r} is not a validation rule: expected string 'name' and "
                f"'description' plus callable 'should_run' and 'validate'"
            )
        logger.debug(f"Registered rule: {rule.name}")
        self._rules.append(rule)
        return rule

    def clear(self) -> None:
        self._rules.clear()

    @contextmanager
    def collecting(self) -> Iterator["RuleRegistry"]:
        """Route :func:`register` calls to this registry while active."""
        token = _collecting.set(self)
        try:
            yield self
        finally:
            _collecting.reset(token)


default_registry = RuleRegistry()

_collecting: ContextVar[RuleRegistry | None] = ContextVar("editgate_collecting", default=None)


def register(rule: R) -> R:
    """Register ``rule`` with the registry currently collecting rules.

    During rule discovery this is the registry of the module being loaded;
    otherwise it is :data:`default_registry`. Returns ``rule`` unchanged.
    """
    registry = _collecting.get()
    if registry is None:
        registry = default_registry
    registry.add(rule)
    return rule
