# tests/test_resolution.py
import asyncio
from typing import Annotated, Any, List

import pytest

from bindery import Container, Inject, MultiInject, Named, NotRegisteredError, injectable, optional


@injectable
class Katana:
    def hit(self):
        return "cut!"


@injectable
class Shuriken:
    def throw(self):
        return "hit!"


@injectable
class Ninja:
    def __init__(
        self,
        katana: Annotated[Katana, Inject("Weapon")],
        shuriken: Annotated[Shuriken, Inject("ThrowableWeapon")],
    ):
        self.katana = katana
        self.shuriken = shuriken

    def fight(self):
        return self.katana.hit()

    def sneak(self):
        return self.shuriken.throw()


@injectable
class Samurai:
    def __init__(self, weapon: Annotated[Any, Inject("Weapon"), optional]):
        self.weapon = weapon


@injectable
class Monk:
    def __init__(self, weapon: Annotated[Any, Inject("Weapon")] = "bare hands"):
        self.weapon = weapon


@injectable
class Guard:
    helmet: Annotated[Any, Inject("Helmet")]
    shield: Annotated[Any, Inject("Shield"), optional]


@injectable
class Arsenal:
    def __init__(self, weapons: Annotated[List[Any], MultiInject("Weapon")]):
        self.weapons = weapons


@injectable
class Engine:
    pass


@injectable
class Car:
    def __init__(self, front: Annotated[Any, Inject("Engine")], back: Annotated[Any, Inject("Engine")]):
        self.front = front
        self.back = back


def test_resolves_constructor_dependencies(container):
    container.bind("Ninja").to(Ninja)
    container.bind("Weapon").to(Katana)
    container.bind("ThrowableWeapon").to(Shuriken)

    ninja = container.get("Ninja")

    assert ninja.fight() == "cut!"
    assert ninja.sneak() == "hit!"


def test_optional_dependency_resolves_to_none(container):
    container.bind(Samurai).to_self()
    assert container.get(Samurai).weapon is None


def test_default_value_is_used_when_unbound(container):
    container.bind(Monk).to_self()
    assert container.get(Monk).weapon == "bare hands"
    container.bind("Weapon").to(Katana)
    assert isinstance(container.get(Monk).weapon, Katana)


def test_property_injection(container):
    container.bind(Guard).to_self()
    container.bind("Helmet").to_constant_value("steel helmet")

    guard = container.get(Guard)

    assert guard.helmet == "steel helmet"
    assert not hasattr(guard, "shield")


def test_multi_inject_constructor_argument(container):
    container.bind(Arsenal).to_self()
    container.bind("Weapon").to(Katana)
    container.bind("Weapon").to(Shuriken)

    weapons = container.get(Arsenal).weapons

    assert [type(w) for w in weapons] == [Katana, Shuriken]


def test_get_all_ignores_constraints(container):
    container.bind("Weapon").to(Katana).when_target_named("katana")
    container.bind("Weapon").to(Shuriken).when_target_named("shuriken")

    assert len(container.get_all("Weapon")) == 2
    assert [type(w) for w in container.get_all_named("Weapon", "katana")] == [Katana]


def test_get_all_tagged_without_match_is_not_registered(container):
    container.bind("Weapon").to(Katana).when_target_tagged("canThrow", False)
    with pytest.raises(NotRegisteredError):
        container.get_all_tagged("Weapon", "canThrow", True)


def test_get_all_with_single_binding_returns_list(container):
    container.bind("Weapon").to(Katana)
    result = container.get_all("Weapon")
    assert isinstance(result, list) and len(result) == 1


# --- scopes ---

def test_transient_scope_builds_every_time(container):
    container.bind("Engine").to(Engine)
    container.bind(Car).to_self()
    car = container.get(Car)
    assert car.front is not car.back
    assert container.get("Engine") is not container.get("Engine")


def test_singleton_scope_is_shared(container):
    container.bind("Engine").to(Engine).in_singleton_scope()
    container.bind(Car).to_self()
    first, second = container.get(Car), container.get(Car)
    assert first.front is first.back is second.front


def test_request_scope_is_shared_within_one_lookup(container):
    container.bind("Engine").to(Engine).in_request_scope()
    container.bind(Car).to_self()
    first, second = container.get(Car), container.get(Car)
    assert first.front is first.back
    assert first.front is not second.front


def test_dynamic_value_scopes(container):
    calls = []
    container.bind("Counter").to_dynamic_value(lambda ctx: calls.append(1) or len(calls)).in_singleton_scope()
    assert container.get("Counter") == 1
    assert container.get("Counter") == 1
    assert calls == [1]


def test_constant_none_value(container):
    container.bind("Nothing").to_constant_value(None)
    assert container.get("Nothing") is None


# --- value producers ---

def test_dynamic_value_receives_context(container):
    container.bind("Who").to_dynamic_value(lambda ctx: (ctx.container, ctx.current_request.service_identifier))
    owner, sid = container.get("Who")
    assert owner is container
    assert sid == "Who"


def test_constructor_binding_returns_the_class(container):
    container.bind("Newable<Katana>").to_constructor(Katana)
    assert container.get("Newable<Katana>") is Katana


def test_function_binding(container):
    def double(x):
        return x * 2

    container.bind("double").to_function(double)
    assert container.get("double")(3) == 6


def test_factory_is_never_cached(container):
    container.bind("Weapon").to(Katana)
    container.bind("Factory<Weapon>").to_factory(lambda ctx: lambda: ctx.container.get("Weapon"))

    factory = container.get("Factory<Weapon>")

    assert isinstance(factory(), Katana)
    assert container.get("Factory<Weapon>") is not factory


def test_auto_factory(container):
    container.bind("Katana").to(Katana)
    container.bind("Factory<Katana>").to_auto_factory("Katana")
    make_katana = container.get("Factory<Katana>")
    assert isinstance(make_katana(), Katana)
    assert make_katana() is not make_katana()


def test_auto_named_factory(container):
    container.bind("Weapon").to(Katana).when_target_named("katana")
    container.bind("Weapon").to(Shuriken).when_target_named("shuriken")
    container.bind("Factory<Weapon>").to_auto_named_factory("Weapon")

    make = container.get("Factory<Weapon>")

    assert isinstance(make("katana"), Katana)
    assert isinstance(make("shuriken"), Shuriken)


@pytest.mark.asyncio
async def test_provider_returns_async_producer(container):
    async def make_katana():
        await asyncio.sleep(0)
        return Katana()

    container.bind("Provider<Katana>").to_provider(lambda ctx: make_katana)

    provider = container.get("Provider<Katana>")
    katana = await provider()

    assert katana.hit() == "cut!"


def test_to_service_aliases_another_identifier(container):
    container.bind(Katana).to_self().in_singleton_scope()
    assert container.bind("Weapon").to_service(Katana) is None
    assert container.get("Weapon") is container.get(Katana)


def test_resolve_constructs_unbound_class(container):
    container.bind("Weapon").to(Katana)
    container.bind("ThrowableWeapon").to(Shuriken)

    ninja = container.resolve(Ninja)

    assert isinstance(ninja, Ninja)
    assert not container.is_bound(Ninja)


@injectable
class Garage:
    def __init__(
        self,
        engines: Annotated[List[Any], MultiInject("Engine")],
        front: Annotated[Any, Inject("Engine"), Named("front")],
        back: Annotated[Any, Inject("Engine"), Named("back")],
        spare: Annotated[Any, Inject("Engine"), Named("back")],
    ):
        self.engines = engines
        self.front = front
        self.back = back
        self.spare = spare


def _unnamed_or(name):
    return lambda request: not request.target.is_named() or request.target.matches_named_tag(name)


def test_request_scope_is_cached_per_binding(container):
    container.bind(Garage).to_self()
    container.bind("Engine").to(Engine).in_request_scope().when(_unnamed_or("front"))
    container.bind("Engine").to(Engine).in_request_scope().when(_unnamed_or("back"))

    garage = container.get(Garage)

    assert garage.front is not garage.back
    assert garage.engines[0] is garage.front
    assert garage.engines[1] is garage.back
    assert garage.spare is garage.back

    again = container.get(Garage)
    assert again.front is not garage.front
