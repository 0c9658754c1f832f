"""Build validation contexts from raw pre-tool-use hook payloads.

The payload is read permissively: unknown tools, missing keys and values of
the wrong type all degrade to empty strings. Rules decide what an empty
context means; the builder never rejects a payload it can read as a mapping.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from .errors import InvalidHookInputError
from .models import Operation, ValidationContext

logger = logging.getLogger(__name__)

EDIT_TOOL = "Edit"


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def build_context(raw: Mapping[str, Any]) -> ValidationContext:
    """Normalize a ``{"tool_name": ..., "tool_input": {...}}`` payload.

    ``content`` comes from ``tool_input.content`` for whole-file writes and
    falls back to ``tool_input.new_string`` for find/replace edits.

    Raises:
        InvalidHookInputError: If ``raw`` is not a mapping
    """
    if not isinstance(raw, Mapping):
        raise InvalidHookInputError(
            f"Hook input must be a JSON object, got {type(raw).__name__}"
        )

    tool_name = _text(raw, "tool_name")
    tool_input = raw.get("tool_input")
    if not isinstance(tool_input, Mapping):
        if tool_input is not None:
            logger.debug(f"Ignoring non-object tool_input for tool '{tool_name}'")
        tool_input = {}

    return ValidationContext(
        tool_name=tool_name,
        file_path=_text(tool_input, "file_path"),
        content=_text(tool_input, "content") or _text(tool_input, "new_string"),
        old_content=_text(tool_input, "old_string"),
        operation=Operation.EDIT if tool_name == EDIT_TOOL else Operation.WRITE,
    )


def parse_hook_input(text: str) -> ValidationContext:
    """Decode JSON hook input and build its context.

    Raises:
        InvalidHookInputError: If ``text`` is not valid JSON or not an object
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidHookInputError(f"Invalid JSON hook input: {e}") from e
    return build_context(raw)
