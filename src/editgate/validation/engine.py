"""Validation engine: sequences rules over a context and aggregates diagnostics.

Rules run one at a time in registration order. A rule whose ``should_run``
returns False is skipped without firing its hook channel. Exceptions raised by
a rule or a hook handler are not caught: a broken rule must never turn into a
passing verdict.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..context import build_context
from ..hooks import AFTER_VALIDATE, BEFORE_VALIDATE, Handler, HookBus, rule_event
from ..models import ValidationContext, ValidationResult
from .rule import ValidationRule

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Owns an ordered rule set and the hook bus that runs it."""

    def __init__(self, hooks: HookBus | None = None):
        self._hooks = hooks or HookBus()
        self._rules: list[ValidationRule] = []

    @property
    def rules(self) -> tuple[ValidationRule, ...]:
        return tuple(self._rules)

    @property
    def hooks(self) -> HookBus:
        """Underlying hook bus, for custom event handlers."""
        return self._hooks

    def register_rule(self, rule: ValidationRule) -> None:
        """Add a rule and bind its check to the ``validate:<name>`` channel.

        Rule names are not required to be unique; every handler bound to a
        channel fires whenever that channel is emitted, and the last handler's
        result is what the emission contributes.
        """
        self._rules.append(rule)

        def run_rule(context: ValidationContext) -> Any:
            return rule.validate(context)

        self._hooks.on(rule_event(rule.name), run_rule)

    def register_rules(self, rules: Iterable[ValidationRule]) -> None:
        for rule in rules:
            self.register_rule(rule)

    def on_before(self, handler: Handler):
        return self._hooks.on(BEFORE_VALIDATE, handler)

    def on_after(self, handler: Handler):
        return self._hooks.on(AFTER_VALIDATE, handler)

    def on_rule(self, rule_name: str, handler: Handler):
        """Add a handler to a rule's channel. Its result replaces the rule's diagnostics."""
        return self._hooks.on(rule_event(rule_name), handler)

    async def validate(self, context: ValidationContext) -> ValidationResult:
        """Run all applicable rules against ``context``.

        Args:
            context: Context of the proposed write or edit

        Returns:
            ValidationResult with diagnostics in rule order, then emission order
        """
        logger.info(f"Validating {context.operation.value} of {context.file_path or '<unknown>'}")
        logger.info(f"Running {len(self._rules)} validation rules")

        await self._hooks.emit(BEFORE_VALIDATE, context)

        errors: list[str] = []
        for rule in self._rules:
            if not rule.should_run(context):
                logger.debug(f"Skipping rule: {rule.name}")
                continue

            logger.debug(f"Executing rule: {rule.name}")
            diagnostics = await self._hooks.call(rule_event(rule.name), context)
            if diagnostics:
                errors.extend(diagnostics)

        await self._hooks.emit(AFTER_VALIDATE, context, errors)

        logger.info(f"Validation completed with {len(errors)} errors")
        return ValidationResult(errors=errors)

    def validate_sync(self, context: ValidationContext) -> ValidationResult:
        """Blocking wrapper around :meth:`validate` for callers without a loop."""
        return asyncio.run(self.validate(context))

    async def validate_input(self, raw: Mapping[str, Any]) -> ValidationResult:
        """Build the context from a raw hook payload and validate it."""
        return await self.validate(build_context(raw))
