"""Keystone dependency injection container.

Keystone is a small inversion of control container inspired by AngularJS's
injector. Components are registered by name as values, constants, factories,
services, providers or decorators, and built on first use. Each component is
built at most once per container; ring dependencies are detected and
reported together with a trace of the resolution that led to them.

Key Features:
    - Dependencies named explicitly or taken from parameter names
    - Two-stage resolution: providers can be configured before anything is built
    - Decorators that wrap registered components
    - Composition of containers, optionally under a name prefix
    - Resolution traces in every error message

Basic Usage:
    >>> from keystone import Container
    >>>
    >>> container = Container()
    >>> container.value("dsn", "sqlite://")
    >>>
    >>> @container.provides()
    ... def make_database(dsn):
    ...     return Database(dsn)
    >>>
    >>> db = container["database"]

The package consists of several modules:
    - container: The container, its registration API and boot lifecycle
    - injector: Memoising name resolution and factory invocation
    - dependencies: Introspection of factories into dependency arrays
    - key_store: Name-keyed storage behind each injector
    - tracer: Resolution traces attached to errors
    - domain: Provider and container-aware interfaces
    - errors: Framework-specific exceptions
"""

from keystone.container import DECORATED_INSTANCE, Container, ContainerState
from keystone.dependencies import dependency_array, extract_parameters
from keystone.domain import ContainerAware, FactoryProvider, Provider
from keystone.errors import (
    DependencyError,
    DependencyNotFoundError,
    InstantiationError,
    InvalidArgumentError,
    InvalidFactoryError,
    RemovalNotSupportedError,
    RingDependencyError,
)
from keystone.injector import Injector
from keystone.key_store import ABSENT, KeyStore
from keystone.tracer import Tracer

__all__ = [
    "ABSENT",
    "Container",
    "ContainerAware",
    "ContainerState",
    "DECORATED_INSTANCE",
    "DependencyError",
    "DependencyNotFoundError",
    "FactoryProvider",
    "Injector",
    "InstantiationError",
    "InvalidArgumentError",
    "InvalidFactoryError",
    "KeyStore",
    "Provider",
    "RemovalNotSupportedError",
    "RingDependencyError",
    "Tracer",
    "dependency_array",
    "extract_parameters",
]
