"""Tests for the rule contract and rule registry."""

import pytest

from editgate.errors import InvalidRuleError
from editgate.models import ValidationContext
from editgate.validation.rule import (
    Rule,
    RuleRegistry,
    ValidationRule,
    default_registry,
    define_rule,
    is_validation_rule,
    register,
)


class ClassRule:
    name = "class-rule"
    description = "Rule written as a class"

    def should_run(self, context):
        return context.file_path.endswith(".py")

    def validate(self, context):
        return ["TODO found"] if "TODO" in context.content else []


@pytest.fixture
def rule():
    return Rule(
        name="always",
        description="Always complains",
        should_run=lambda ctx: True,
        validate=lambda ctx: ["complaint"],
    )


class TestDefineRule:
    """Test define_rule identity."""

    def test_returns_same_object(self, rule):
        assert define_rule(rule) is rule

    def test_does_not_alter_instance(self):
        instance = ClassRule()
        assert define_rule(instance) is instance
        assert instance.name == "class-rule"


class TestIsValidationRule:
    """Test the structural rule check."""

    def test_rule_dataclass(self, rule):
        assert is_validation_rule(rule)
        assert isinstance(rule, ValidationRule)

    def test_class_instance(self):
        assert is_validation_rule(ClassRule())

    def test_class_itself_rejected(self):
        assert not is_validation_rule(ClassRule)

    def test_missing_validate(self):
        class NoValidate:
            name = "x"
            description = "y"

            def should_run(self, context):
                return True

        assert not is_validation_rule(NoValidate())

    def test_non_string_name(self):
        class BadName(ClassRule):
            name = 42

        assert not is_validation_rule(BadName())

    def test_non_callable_should_run(self):
        class BadPredicate(ClassRule):
            should_run = True

        assert not is_validation_rule(BadPredicate())

    @pytest.mark.parametrize("value", [None, "rule", 3, {"name": "x", "description": "y"}])
    def test_plain_values(self, value):
        assert not is_validation_rule(value)


class TestRuleRegistry:
    """Test RuleRegistry and register()."""

    def test_add_keeps_order(self, rule):
        registry = RuleRegistry()
        other = ClassRule()

        registry.add(rule)
        registry.add(other)

        assert registry.rules == [rule, other]
        assert len(registry) == 2

    def test_add_rejects_invalid(self):
        registry = RuleRegistry()
        with pytest.raises(InvalidRuleError):
            registry.add(object())
        assert len(registry) == 0

    def test_invalid_rule_error_is_type_error(self):
        with pytest.raises(TypeError):
            RuleRegistry().add("not a rule")

    def test_register_targets_collecting_registry(self, rule):
        registry = RuleRegistry()
        before = len(default_registry)

        with registry.collecting():
            returned = register(rule)

        assert returned is rule
        assert registry.rules == [rule]
        assert len(default_registry) == before

    def test_register_defaults_to_default_registry(self, rule):
        try:
            register(rule)
            assert default_registry.rules[-1] is rule
        finally:
            default_registry.clear()

    def test_collecting_restores_previous_target(self, rule):
        outer = RuleRegistry()
        inner = RuleRegistry()

        with outer.collecting():
            with inner.collecting():
                register(rule)
            register(ClassRule())

        assert inner.rules == [rule]
        assert [r.name for r in outer.rules] == ["class-rule"]


class TestClassRuleBehaviour:
    """Class-based rules behave like Rule instances."""

    def test_class_rule_checks(self):
        instance = ClassRule()
        ctx = ValidationContext(file_path="a.py", content="# TODO later")
        assert instance.should_run(ctx)
        assert instance.validate(ctx) == ["TODO found"]
