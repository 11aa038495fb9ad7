"""Tests for the route registry and the static route table."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from app.application.recipients import RecipientExpander
from app.application.registry import RouteDependencies, RouteRegistry
from app.domain.entities import ObjectKind, RouteConfiguration
from app.domain.errors import RegistryConfigurationError, RouteNotFoundError
from app.handlers import ROUTE_DEFINITIONS

KIND = ObjectKind(name="Task", display_name="Tasks")


class _Payload(BaseModel):
    value: int = 0


def _config(name: str) -> RouteConfiguration:
    return RouteConfiguration(
        name=name,
        object_kind=KIND,
        template_name=name,
        display_name=name,
        description=f"{name} route",
        payload_type=_Payload,
    )


class _Resolver:
    def __init__(self, route: str) -> None:
        self.route = route

    async def resolve_recipients(self, request):
        return []

    async def resolve_template_data(self, request):
        return {}


def test_from_components_pairs_configurations_and_resolvers():
    registry = RouteRegistry.from_components(
        [_config("A"), _config("B")], [_Resolver("B"), _Resolver("A")]
    )

    assert len(registry) == 2
    assert registry.lookup("A").resolver.route == "A"
    assert registry.lookup("B").configuration.name == "B"
    assert [config.name for config in registry.configurations()] == ["A", "B"]
    assert registry.frozen


def test_lookup_unknown_route_raises():
    registry = RouteRegistry.from_components([_config("A")], [_Resolver("A")])

    with pytest.raises(RouteNotFoundError):
        registry.lookup("Missing")
    assert "Missing" not in registry


def test_orphan_resolver_fails_at_build():
    with pytest.raises(RegistryConfigurationError, match="without configuration: B"):
        RouteRegistry.from_components([_config("A")], [_Resolver("A"), _Resolver("B")])


def test_orphan_configuration_fails_at_build():
    with pytest.raises(RegistryConfigurationError, match="without resolver: B"):
        RouteRegistry.from_components([_config("A"), _config("B")], [_Resolver("A")])


@pytest.mark.parametrize(
    ("configurations", "resolvers"),
    [
        ([_config("A"), _config("A")], [_Resolver("A")]),
        ([_config("A")], [_Resolver("A"), _Resolver("A")]),
    ],
)
def test_duplicates_fail_at_build(configurations, resolvers):
    with pytest.raises(RegistryConfigurationError, match="Duplicate"):
        RouteRegistry.from_components(configurations, resolvers)


def test_frozen_registry_rejects_registration():
    registry = RouteRegistry.from_components([_config("A")], [_Resolver("A")])

    with pytest.raises(RegistryConfigurationError, match="frozen"):
        registry.register(_config("B"), _Resolver("B"))


def test_register_rejects_mismatched_resolver():
    registry = RouteRegistry()

    with pytest.raises(RegistryConfigurationError):
        registry.register(_config("A"), _Resolver("B"))


def test_static_route_table_is_consistent(employees, tasks, users):
    dependencies = RouteDependencies(
        employees=employees,
        tasks=tasks,
        users=users,
        recipients=RecipientExpander(employees),
    )

    registry = RouteRegistry.from_definitions(ROUTE_DEFINITIONS, dependencies)

    assert {config.name for config in registry.configurations()} == {
        "OrderCreated",
        "TaskAssigned",
        "TaskCompleted",
        "TaskCreated",
        "UserRegistered",
    }
    for entry in registry:
        assert entry.resolver.route == entry.configuration.name
        assert entry.configuration.template_name
