"""Lifecycle hook bus for the validation engine.

Events fired by :class:`editgate.validation.engine.ValidationEngine`:

- ``validate:before`` with the context, once per validation call
- ``validate:<rule name>`` with the context, once per applicable rule; all
  handlers run and the last one's result is the rule's contribution, so a
  handler added after the rule intercepts its check
- ``validate:after`` with the context and the final diagnostics
"""

import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

BEFORE_VALIDATE = "validate:before"
AFTER_VALIDATE = "validate:after"

Handler = Callable[..., Any]


def rule_event(rule_name: str) -> str:
    """Name of the event channel that runs the rule called ``rule_name``."""
    return f"validate:{rule_name}"


class HookBus:
    """Named-event dispatcher running handlers one at a time."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def on(self, event: str, handler: Handler) -> Callable[[], None]:
        """Register ``handler`` for ``event``.

        Returns:
            Function that removes this registration when called
        """
        self._handlers[event].append(handler)

        def unregister() -> None:
            handlers = self._handlers.get(event)
            if handlers and handler in handlers:
                handlers.remove(handler)
                if not handlers:
                    del self._handlers[event]

        return unregister

    async def emit(self, event: str, *args: Any) -> list[Any]:
        """Call the handlers of ``event`` in registration order.

        Each handler's result is awaited, if awaitable, before the next
        handler is called. Handler exceptions propagate.

        Returns:
            Resolved handler results, in registration order
        """
        handlers = self.handlers(event)
        if not handlers:
            return []

        logger.debug(f"Emitting {event} to {len(handlers)} handler(s)")
        results = []
        for handler in handlers:
            result = handler(*args)
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results

    async def call(self, event: str, *args: Any) -> Any:
        """Emit ``event`` and resolve to the last handler's result.

        Returns:
            Result of the last handler, or None if ``event`` has no handlers
        """
        results = await self.emit(event, *args)
        return results[-1] if results else None

    def handlers(self, event: str) -> tuple[Handler, ...]:
        return tuple(self._handlers.get(event, ()))

    def events(self) -> list[str]:
        return list(self._handlers)
