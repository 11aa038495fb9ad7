"""Registry pairing each route configuration with its data resolver."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from app.domain.entities import RouteConfiguration
from app.domain.errors import RegistryConfigurationError, RouteNotFoundError

from .directory import EmployeeDirectory, TaskDirectory, UserDirectory
from .recipients import RecipientExpander
from .resolvers import DataResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteEntry:
    configuration: RouteConfiguration
    resolver: DataResolver


@dataclass(frozen=True)
class RouteDependencies:
    """Collaborators handed to every resolver factory."""

    employees: EmployeeDirectory
    tasks: TaskDirectory
    users: UserDirectory
    recipients: RecipientExpander


ResolverFactory = Callable[[RouteDependencies], DataResolver]


@dataclass(frozen=True)
class RouteDefinition:
    """Static registration row: a configuration and how to build its resolver."""

    configuration: RouteConfiguration
    resolver_factory: ResolverFactory


class RouteRegistry:
    """Read-only lookup of routes once :meth:`freeze` has been called."""

    def __init__(self) -> None:
        self._entries: dict[str, RouteEntry] = {}
        self._frozen = False

    @classmethod
    def from_components(
        cls,
        configurations: Iterable[RouteConfiguration],
        resolvers: Iterable[DataResolver],
    ) -> "RouteRegistry":
        """Match configurations and resolvers by route name and freeze the result.

        Duplicate names on either side and names present on only one side
        raise :class:`RegistryConfigurationError`.
        """

        configurations = list(configurations)
        resolvers = list(resolvers)

        duplicated_configs = _duplicates(config.name for config in configurations)
        if duplicated_configs:
            raise RegistryConfigurationError(
                "Duplicate route configurations: " + ", ".join(duplicated_configs)
            )
        duplicated_resolvers = _duplicates(resolver.route for resolver in resolvers)
        if duplicated_resolvers:
            raise RegistryConfigurationError(
                "Duplicate route resolvers: " + ", ".join(duplicated_resolvers)
            )

        config_map = {config.name: config for config in configurations}
        resolver_map = {resolver.route: resolver for resolver in resolvers}

        orphan_resolvers = sorted(set(resolver_map) - set(config_map))
        if orphan_resolvers:
            raise RegistryConfigurationError(
                "Resolvers without configuration: " + ", ".join(orphan_resolvers)
            )
        orphan_configs = sorted(set(config_map) - set(resolver_map))
        if orphan_configs:
            raise RegistryConfigurationError(
                "Configurations without resolver: " + ", ".join(orphan_configs)
            )

        registry = cls()
        for name, configuration in config_map.items():
            registry.register(configuration, resolver_map[name])
        registry.freeze()
        logger.info(
            "Route registry built with %d route(s): %s",
            len(registry),
            ", ".join(sorted(config_map)),
        )
        return registry

    @classmethod
    def from_definitions(
        cls,
        definitions: Iterable[RouteDefinition],
        dependencies: RouteDependencies,
    ) -> "RouteRegistry":
        definitions = list(definitions)
        return cls.from_components(
            [definition.configuration for definition in definitions],
            [definition.resolver_factory(dependencies) for definition in definitions],
        )

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, configuration: RouteConfiguration, resolver: DataResolver) -> None:
        if self._frozen:
            raise RegistryConfigurationError("Route registry is frozen")
        name = configuration.name
        if not name or not name.strip():
            raise RegistryConfigurationError("Route name must not be empty")
        if resolver.route != name:
            raise RegistryConfigurationError(
                f"Resolver for '{resolver.route}' cannot serve route '{name}'"
            )
        if name in self._entries:
            raise RegistryConfigurationError(f"Route '{name}' is already registered")
        self._entries[name] = RouteEntry(configuration=configuration, resolver=resolver)

    def freeze(self) -> "RouteRegistry":
        self._frozen = True
        return self

    def lookup(self, route: str) -> RouteEntry:
        entry = self._entries.get(route)
        if entry is None:
            raise RouteNotFoundError(route)
        return entry

    def configurations(self) -> list[RouteConfiguration]:
        return [self._entries[name].configuration for name in sorted(self._entries)]

    def __contains__(self, route: object) -> bool:
        return route in self._entries

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self._entries[name] for name in sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


def _duplicates(names: Iterable[str]) -> list[str]:
    return sorted(name for name, count in Counter(names).items() if count > 1)


__all__ = [
    "ResolverFactory",
    "RouteDefinition",
    "RouteDependencies",
    "RouteEntry",
    "RouteRegistry",
]
