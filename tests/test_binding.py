# tests/test_binding.py
import pytest

from bindery import (
    Binding,
    Container,
    InvalidFunctionBindingError,
    InvalidToSelfValueError,
    Token,
    identifier_to_string,
    injectable,
)
from bindery.constants import (
    BINDING_CONSTANT_VALUE,
    BINDING_CONSTRUCTOR,
    BINDING_DYNAMIC_VALUE,
    BINDING_FACTORY,
    BINDING_FUNCTION,
    BINDING_INSTANCE,
    BINDING_INVALID,
    BINDING_PROVIDER,
)


@injectable
class Katana:
    pass


def test_new_binding_defaults():
    b = Binding("Weapon", "transient")
    assert b.type == BINDING_INVALID
    assert b.activated is False
    assert b.cache is None
    assert b.module_id is None
    assert b.constraint(None) is True


def test_binding_ids_are_unique():
    assert Binding("a", "transient").id != Binding("a", "transient").id


def test_clone_keeps_singleton_cache():
    b = Binding("Weapon", "singleton")
    b.type = BINDING_INSTANCE
    b.implementation_type = Katana
    b.cache = Katana()
    b.activated = True
    b.module_id = 7
    b.on_deactivation = print

    clone = b.clone()

    assert clone.id != b.id
    assert clone.activated is True
    assert clone.cache is b.cache
    assert clone.module_id == 7
    assert clone.on_deactivation is print
    assert clone.implementation_type is Katana


def test_clone_of_transient_is_not_activated():
    b = Binding("Weapon", "transient")
    b.activated = True
    b.cache = object()
    clone = b.clone()
    assert clone.activated is False
    assert clone.cache is None


def test_syntax_sets_binding_types(container):
    def fn():
        return 1

    assert container.bind("a").to(Katana).binding.type == BINDING_INSTANCE
    assert container.bind("b").to_constant_value(1).binding.type == BINDING_CONSTANT_VALUE
    assert container.bind("c").to_dynamic_value(lambda ctx: 1).binding.type == BINDING_DYNAMIC_VALUE
    assert container.bind("d").to_constructor(Katana).binding.type == BINDING_CONSTRUCTOR
    assert container.bind("e").to_function(fn).binding.type == BINDING_FUNCTION
    assert container.bind("f").to_factory(lambda ctx: fn).binding.type == BINDING_FACTORY
    assert container.bind("g").to_provider(lambda ctx: fn).binding.type == BINDING_PROVIDER


def test_constant_value_is_a_singleton_activated_on_first_get(container):
    binding = container.bind("Port").to_constant_value(8080).binding
    assert binding.scope == "singleton"
    assert binding.activated is False
    assert binding.cache == 8080

    assert container.get("Port") == 8080
    assert binding.activated is True


def test_clone_keeps_unresolved_constant_value(container):
    binding = container.bind("Port").to_constant_value(8080).binding
    clone = binding.clone()
    assert clone.activated is False
    assert clone.cache == 8080


def test_to_self_requires_a_class(container):
    with pytest.raises(InvalidToSelfValueError):
        container.bind("Katana").to_self()
    assert container.bind(Katana).to_self().binding.implementation_type is Katana


def test_to_function_requires_a_callable(container):
    with pytest.raises(InvalidFunctionBindingError, match="must be a function"):
        container.bind("fn").to_function(5)


def test_bind_uses_container_default_scope():
    c = Container({"default_scope": "request"})
    assert c.bind("Weapon").binding.scope == "request"


def test_scope_steps_chain_into_constraints(container):
    syntax = container.bind("Weapon").to(Katana).in_singleton_scope().when_target_named("strong")
    assert syntax.binding.scope == "singleton"
    assert syntax.binding.constraint.description == "named: strong"


# --- identifiers ---

def test_tokens_compare_by_identity():
    assert Token("Weapon") != Token("Weapon")
    assert Token.for_name("Weapon") is Token.for_name("Weapon")


def test_identifier_to_string():
    assert identifier_to_string("Weapon") == "Weapon"
    assert identifier_to_string(Katana) == "Katana"
    assert identifier_to_string(Token("Weapon")) == "Token(Weapon)"


def test_tokens_are_distinct_container_keys(container):
    first, second = Token("Weapon"), Token("Weapon")
    container.bind(first).to_constant_value("katana")
    container.bind(second).to_constant_value("shuriken")
    assert container.get(first) == "katana"
    assert container.get(second) == "shuriken"
