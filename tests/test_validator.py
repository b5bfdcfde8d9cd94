"""Tests for covenant.validator and covenant.builder — the validation engine.

Coverage:
    - violations in rule declaration order, never short-circuited across fields
    - per-field FAIL_FAST (default) vs COLLECT_ALL, builder default_mode
    - message rendering: field name as {0}, predicate arguments, locale
    - groups (ConstraintGroup, Enum, str, None as DEFAULT) and conditions
    - nest / for_each path prefixes, None sub-targets skipped
    - registry lookup (MRO), automatic recursion into registered field values
    - depth guard on cyclic graphs
    - absent fields, strict accessors
    - None target raises before any predicate runs
    - contract errors from the builder and from rules with no predicates
"""

from __future__ import annotations

from enum import Enum

import pytest

from covenant import (
    ConstraintGroup,
    ConstraintRule,
    ContractViolationError,
    DictMessageSource,
    ErrorCode,
    NestingDepthExceededError,
    ObjectConstraint,
    ValidationMode,
    Validator,
    ValidatorRegistry,
)
from covenant.constraints import CharSequenceConstraint, predicate
from conftest import Address, Item, Node, Order, User


class Phase(Enum):
    CREATE = "create"
    UPDATE = "update"


# ─── Aggregation ──────────────────────────────────────────────────────────────


class TestAggregation:
    """Every field is evaluated; results keep declaration order."""

    def test_valid_target(self, user_validator: Validator) -> None:
        user = User(name="alice", email="alice@example.com", age=30, address=Address("Tokyo", "1000001"))
        assert user_validator.validate(user).is_valid()

    def test_order_follows_declaration(self, user_validator: Validator) -> None:
        violations = user_validator.validate(User(name="", email="bad", age=200))
        assert [v.name for v in violations] == ["name", "email", "age"]
        assert [v.message_key for v in violations] == ["charSequence.notBlank", "charSequence.email", "numeric.between"]

    def test_messages_rendered(self, user_validator: Validator) -> None:
        violations = user_validator.validate(User(name="x" * 21, email="a@b.c", age=1))
        (v,) = violations
        assert v.message == 'The size of "name" must be less than or equal to 20. The given size is 21'
        assert v.args == ("name", 20, 21)
        assert v.value == "x" * 21

    def test_second_field_checked_after_first_fails(self) -> None:
        validator = (
            Validator.builder()
            .constraint_str("a", lambda t: t["a"], lambda c: c.not_blank())
            .constraint_str("b", lambda t: t["b"], lambda c: c.not_blank())
            .build()
        )
        violations = validator.validate({"a": "", "b": ""})
        assert [v.name for v in violations] == ["a", "b"]


class TestFieldMode:
    """FAIL_FAST stops at the first failing predicate of a field."""

    def _validator(self, **options: object) -> Validator:
        return (
            Validator.builder()
            .constraint_str("code", lambda t: t, lambda c: c.greater_than(5).pattern(r"[0-9]+"), **options)
            .build()
        )

    def test_fail_fast_default(self) -> None:
        violations = self._validator().validate("ab")
        assert [v.message_key for v in violations] == ["container.greaterThan"]

    def test_collect_all(self) -> None:
        violations = self._validator(mode=ValidationMode.COLLECT_ALL).validate("ab")
        assert [v.message_key for v in violations] == ["container.greaterThan", "charSequence.pattern"]

    def test_builder_default_mode(self) -> None:
        validator = (
            Validator.builder()
            .constraint_str("code", lambda t: t, lambda c: c.greater_than(5).pattern(r"[0-9]+"))
            .default_mode(ValidationMode.COLLECT_ALL)
            .build()
        )
        assert len(validator.validate("ab")) == 2

    def test_explicit_mode_wins_over_default(self) -> None:
        validator = (
            Validator.builder()
            .default_mode(ValidationMode.COLLECT_ALL)
            .constraint_str("code", lambda t: t, lambda c: c.greater_than(5).pattern(r"[0-9]+"),
                mode=ValidationMode.FAIL_FAST)
            .build()
        )
        assert len(validator.validate("ab")) == 1


# ─── Messages ─────────────────────────────────────────────────────────────────


class TestMessages:
    def test_custom_source_and_locale(self) -> None:
        source = DictMessageSource({"fr": {"charSequence.notBlank": "{0} est obligatoire"}})
        validator = (
            Validator.builder()
            .constraint_str("nom", lambda t: t, lambda c: c.not_blank())
            .message_source(source)
            .build()
        )
        assert validator.validate("", locale="fr-FR").messages() == ["nom est obligatoire"]
        assert validator.validate("", locale="en").messages() == ['"nom" must not be blank']

    def test_bundled_japanese(self) -> None:
        validator = Validator.builder().constraint_str("name", lambda t: t, lambda c: c.not_blank()).build()
        assert validator.validate("", locale="ja").messages() == ['"name"は空白であってはいけません']

    def test_custom_predicate_message(self) -> None:
        even = predicate(lambda n: n % 2 == 0, "custom.even", '"{0}" must be even')
        validator = Validator.builder().constraint("n", lambda t: t, [even]).build()
        assert validator.validate(3).messages() == ['"n" must be even']


# ─── Groups and Conditions ────────────────────────────────────────────────────


class TestGroups:
    @pytest.fixture
    def validator(self) -> Validator:
        return (
            Validator.builder()
            .constraint_str("name", lambda u: u.name, lambda c: c.not_blank())
            .constraint_on_group(Phase.UPDATE, "email", lambda u: u.email, lambda c: c.not_blank(),
                kind=CharSequenceConstraint)
            .constraint_str("age", lambda u: u.age, lambda c: c.not_null(), groups=[Phase.CREATE, "ADMIN"])
            .build()
        )

    def test_default_group_runs_unrestricted_rules_only(self, validator: Validator) -> None:
        assert [v.name for v in validator.validate(User())] == ["name"]

    def test_enum_group(self, validator: Validator) -> None:
        assert [v.name for v in validator.validate(User(), group=Phase.UPDATE)] == ["name", "email"]

    @pytest.mark.parametrize("group", [Phase.CREATE, "CREATE", ConstraintGroup("CREATE"), "ADMIN"])
    def test_group_coercion(self, validator: Validator, group: object) -> None:
        assert [v.name for v in validator.validate(User(), group=group)] == ["name", "age"]

    def test_none_group_is_default(self) -> None:
        validator = Validator.builder().constraint_on_group(ConstraintGroup.DEFAULT, "name", lambda u: u.name,
            lambda c: c.not_null()).build()
        assert len(validator.validate(User())) == 1
        assert len(validator.validate(User(), None, None)) == 1
        assert ConstraintGroup.of(None) is ConstraintGroup.DEFAULT


class TestConditions:
    def test_condition_on_target(self) -> None:
        validator = (
            Validator.builder()
            .constraint_on_condition(lambda u: u.age is not None and u.age >= 18, "email", lambda u: u.email,
                lambda c: c.not_blank(), kind=CharSequenceConstraint)
            .build()
        )
        assert validator.validate(User(age=10)).is_valid()
        assert [v.name for v in validator.validate(User(age=20))] == ["email"]


# ─── Nested and Collections ───────────────────────────────────────────────────


class TestNesting:
    def test_nested_paths(self, user_validator: Validator) -> None:
        user = User(name="a", email="a@b.c", age=1, address=Address(city="", zip_code="12"))
        violations = user_validator.validate(user)
        assert [v.name for v in violations] == ["address.city", "address.zip_code"]
        assert violations[0].message == '"address.city" must not be blank'

    def test_none_sub_target_skipped(self, user_validator: Validator) -> None:
        assert user_validator.validate(User(name="a", email="a@b.c", age=1, address=None)).is_valid()

    def test_for_each_indexes(self) -> None:
        item_validator = Validator.builder().constraint_str("name", lambda i: i.name, lambda c: c.not_blank()).build()
        order_validator = Validator.builder().for_each("items", lambda o: o.items, item_validator).build()
        order = Order(id="o1", items=[Item("ok"), Item(""), None, Item(" ")])
        assert [v.name for v in order_validator.validate(order)] == ["items[1].name", "items[3].name"]

    def test_for_each_mapping_uses_keys(self) -> None:
        item_validator = Validator.builder().constraint_str("name", lambda i: i.name, lambda c: c.not_blank()).build()
        validator = Validator.builder().for_each("labels", lambda t: t, item_validator).build()
        violations = validator.validate({"en": Item("x"), "ja": Item("")})
        assert [v.name for v in violations] == ["labels[ja].name"]

    def test_nested_group_propagates(self) -> None:
        inner = Validator.builder().constraint_on_group("STRICT", "city", lambda a: a.city, lambda c: c.not_null()).build()
        outer = Validator.builder().nest("address", lambda u: u.address, inner).build()
        assert outer.validate(User(address=Address())).is_valid()
        assert [v.name for v in outer.validate(User(address=Address()), group="STRICT")] == ["address.city"]

    def test_nested_names_fixed_at_construction(self, user_validator: Validator) -> None:
        assert user_validator.nested_names == frozenset({"address"})
        assert user_validator.nested_names is user_validator.nested_names


class TestRegistry:
    def test_lookup_walks_mro(self) -> None:
        class Base: ...
        class Child(Base): ...
        validator = Validator.builder().constraint("x", lambda t: 1, lambda c: c.not_null()).build()
        registry = ValidatorRegistry().register(Base, validator)
        assert registry.lookup(Child) is validator
        assert registry.lookup(int) is None
        assert Child in registry

    def test_nest_without_validator_uses_registry(self, address_validator: Validator) -> None:
        registry = ValidatorRegistry({Address: address_validator})
        validator = Validator.builder().nest("address", lambda u: u.address).registry(registry).build()
        assert [v.name for v in validator.validate(User(address=Address(city="x")))] == ["address.zip_code"]

    def test_unregistered_nested_type_is_leaf(self) -> None:
        validator = Validator.builder().nest("address", lambda u: u.address).registry(ValidatorRegistry()).build()
        assert validator.validate(User(address=Address())).is_valid()

    def test_registered_field_values_recurse(self, address_validator: Validator) -> None:
        registry = ValidatorRegistry({Address: address_validator, Item: Validator.builder()
            .constraint_str("name", lambda i: i.name, lambda c: c.not_blank()).build()})
        validator = (
            Validator.builder()
            .constraint("address", lambda u: u.address, lambda c: c.not_null())
            .constraint("items", lambda u: u.tags, lambda c: c.not_null())
            .registry(registry)
            .build()
        )
        user = User(address=Address(city="", zip_code="1234567"), tags=[Item("a"), Item("")])
        assert [v.name for v in validator.validate(user)] == ["address.city", "items[1].name"]

    def test_self_referencing_type(self) -> None:
        registry = ValidatorRegistry()
        node_validator = (
            Validator.builder()
            .constraint_str("label", lambda n: n.label, lambda c: c.not_blank())
            .nest("next", lambda n: n.next)
            .registry(registry)
            .build()
        )
        registry.register(Node, node_validator)
        chain = Node("a", Node("b", Node("")))
        assert [v.name for v in node_validator.validate(chain)] == ["next.next.label"]


class TestDepthGuard:
    def test_cycle_raises(self) -> None:
        registry = ValidatorRegistry()
        node_validator = Validator.builder().nest("next", lambda n: n.next).registry(registry).max_depth(5).build()
        registry.register(Node, node_validator)
        node = Node("loop")
        node.next = node
        with pytest.raises(NestingDepthExceededError) as exc_info:
            node_validator.validate(node)
        assert exc_info.value.code is ErrorCode.E2032_NESTING_TOO_DEEP
        assert exc_info.value.error.metadata["max_depth"] == 5

    def test_depth_within_limit(self) -> None:
        registry = ValidatorRegistry()
        node_validator = Validator.builder().nest("next", lambda n: n.next).registry(registry).max_depth(2).build()
        registry.register(Node, node_validator)
        assert node_validator.validate(Node("a", Node("b", Node("c")))).is_valid()
        with pytest.raises(NestingDepthExceededError):
            node_validator.validate(Node("a", Node("b", Node("c", Node("d")))))


# ─── Accessors ────────────────────────────────────────────────────────────────


class TestAccessors:
    def test_failing_accessor_means_absent(self) -> None:
        validator = (
            Validator.builder()
            .constraint_str("city", lambda u: u.address.city, lambda c: c.not_null())
            .constraint_str("zip", lambda u: u.address.zip_code, lambda c: c.less_than(3))
            .build()
        )
        violations = validator.validate(User(address=None))
        assert [(v.name, v.message_key) for v in violations] == [("city", "object.notNull")]

    def test_strict_accessors_propagate(self) -> None:
        validator = (
            Validator.builder()
            .constraint_str("city", lambda u: u.address.city, lambda c: c.not_null())
            .strict_accessors()
            .build()
        )
        with pytest.raises(AttributeError):
            validator.validate(User(address=None))

    def test_attribute_path_accessor(self) -> None:
        validator = Validator.builder().constraint_str("city", "address.city", lambda c: c.not_blank()).build()
        assert [v.name for v in validator.validate(User(address=Address(city="")))] == ["city"]


# ─── Contract Violations ──────────────────────────────────────────────────────


class TestContract:
    def test_none_target_raises_before_predicates(self) -> None:
        calls: list[object] = []
        spy = predicate(lambda v: calls.append(v) or True, "custom.spy", null_as=None)
        validator = Validator.builder().constraint("x", lambda t: t, [spy]).build()
        with pytest.raises(ContractViolationError) as exc_info:
            validator.validate(None)
        assert exc_info.value.code is ErrorCode.E2030_NULL_TARGET
        assert calls == []

    def test_none_target_is_value_error(self, user_validator: Validator) -> None:
        with pytest.raises(ValueError):
            user_validator.validate(None)

    def test_empty_predicates(self) -> None:
        with pytest.raises(ContractViolationError) as exc_info:
            Validator.builder().constraint_str("name", lambda u: u.name, lambda c: c)
        assert exc_info.value.code is ErrorCode.E2031_EMPTY_PREDICATES

    def test_empty_predicate_generator(self) -> None:
        with pytest.raises(ContractViolationError) as exc_info:
            ConstraintRule(name="x", accessor=lambda t: t, predicates=(p for p in ()))
        assert exc_info.value.code is ErrorCode.E2031_EMPTY_PREDICATES

    def test_predicate_generator_is_materialized(self) -> None:
        predicates = ObjectConstraint().not_null().predicates
        rule = ConstraintRule(name="x", accessor=lambda t: t, predicates=(p for p in predicates))
        assert isinstance(rule.predicates, tuple) and len(rule.predicates) == 1

    def test_constraint_function_must_return_constraint(self) -> None:
        with pytest.raises(ContractViolationError):
            Validator.builder().constraint("name", lambda u: u.name, lambda c: None)

    def test_max_depth_must_be_positive(self) -> None:
        with pytest.raises(ContractViolationError):
            Validator.builder().max_depth(0)

    def test_build_uses_settings_defaults(self) -> None:
        validator = Validator.builder().constraint("x", lambda t: t, lambda c: c.not_null()).build()
        assert validator.max_depth == 32
        assert validator.strict_accessors is False
