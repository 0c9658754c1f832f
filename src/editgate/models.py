"""Data model shared by the context builder, rules and the validation engine."""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict

ERRORS_HEADER = "\n⚠️  VALIDATION ERRORS:\n\n"

EXIT_VALID = 0
EXIT_INVALID = 2


class Operation(str, Enum):
    """Kind of file operation being validated."""
    EDIT = "edit"
    WRITE = "write"


class ValidationContext(BaseModel):
    """Normalized description of one proposed file write or edit."""
    tool_name: str = ""
    file_path: str = ""
    content: str = ""
    old_content: str = ""
    operation: Operation = Operation.WRITE

    model_config = ConfigDict(frozen=True)

    @property
    def is_edit(self) -> bool:
        return self.operation == Operation.EDIT


@dataclass
class ValidationResult:
    """Aggregated verdict of one validation call."""
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def exit_code(self) -> int:
        """Exit code for hooks: 0 = valid, 2 = block the operation."""
        return EXIT_VALID if self.valid else EXIT_INVALID

    def format_errors(self) -> str:
        """Render diagnostics for display, or an empty string when valid."""
        if not self.errors:
            return ""
        return ERRORS_HEADER + "\n\n".join(self.errors)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "valid": self.valid,
            "exit_code": self.exit_code,
            "errors": list(self.errors),
        }
