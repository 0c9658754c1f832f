"""editgate - Pre-write validation gate for code-generation agent hooks.

editgate receives a proposed file write or edit, runs project-defined rules
against it and returns a pass/fail verdict with diagnostics before the write
lands.
"""

__version__ = "0.1.0"
__description__ = "Pre-write validation gate for code-generation agent hooks"

from editgate.config import EditGateConfig, load_config
from editgate.context import build_context, parse_hook_input
from editgate.hooks import HookBus
from editgate.models import Operation, ValidationContext, ValidationResult
from editgate.validation import (
    Rule,
    RuleDiscovery,
    ValidationEngine,
    ValidationRule,
    define_rule,
    load_rules,
    register,
)

__all__ = [
    "__version__",
    "__description__",
    "EditGateConfig",
    "HookBus",
    "Operation",
    "Rule",
    "RuleDiscovery",
    "ValidationContext",
    "ValidationEngine",
    "ValidationResult",
    "ValidationRule",
    "build_context",
    "define_rule",
    "load_config",
    "load_rules",
    "parse_hook_input",
    "register",
]
