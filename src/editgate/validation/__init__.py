"""Validation core: rule contract, rule discovery and the validation engine."""

from .discovery import RuleDiscovery, load_rules
from .engine import ValidationEngine
from .rule import (
    Rule,
    RuleRegistry,
    ValidationRule,
    default_registry,
    define_rule,
    is_validation_rule,
    register,
)

__all__ = [
    "ValidationEngine",
    "ValidationRule",
    "Rule",
    "RuleRegistry",
    "RuleDiscovery",
    "default_registry",
    "define_rule",
    "is_validation_rule",
    "load_rules",
    "register",
]
