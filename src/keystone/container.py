"""The dependency injection container.

A :class:`Container` keeps two injectors. The provider injector holds one
:class:`~keystone.domain.FactoryProvider` per registered name, stored under
``<name>Provider``. The instance injector holds built components; when a name
is missing it asks the provider injector for the name's provider and invokes
the provider's factory.

Registration methods return the container so they can be chained::

    container = (
        Container()
        .value("greeting", "Hello")
        .factory("greeter", ["greeting", lambda g: lambda who: f"{g} {who}"])
        .decorator("greeter", ["DecoratedInstance", lambda greet: lambda who: greet(who) + "!"])
    )
    container["greeter"]("world")  # "Hello world!"

Before the first component is built the container boots: configuration
callables registered with :meth:`Container.config` run once, in order, with
providers and constants as their dependencies.
"""

import enum
import inspect
import logging
import threading
from collections import deque
from typing import Any, Callable, Optional

from keystone.dependencies import dependency_array, inferred_name
from keystone.domain import ContainerAware, FactoryProvider, Provider
from keystone.errors import (
    DependencyNotFoundError,
    InvalidArgumentError,
    RemovalNotSupportedError,
)
from keystone.injector import Injector
from keystone.key_store import KeyStore
from keystone.tracer import Tracer

__all__ = ["Container", "ContainerState", "DECORATED_INSTANCE", "PROVIDER_SUFFIX"]

logger = logging.getLogger(__name__)

DECORATED_INSTANCE = "DecoratedInstance"
"""Dependency name under which a decorator receives the instance it decorates."""

PROVIDER_SUFFIX = "Provider"


class ContainerState(enum.Enum):
    INITIAL = "initial"
    CONFIGURING = "configuring"
    BOOTED = "booted"


class Container:
    """Registry of named components, built on demand and cached.

    The container registers itself as ``Container`` and its instance
    injector as ``Injector``, so factories can depend on either.

    Args:
        *containers: Containers whose providers and instances are copied into
            the new container. They are not booted.
    """

    def __init__(self, *containers: "Container"):
        self._state = ContainerState.INITIAL
        self._configs: deque = deque()
        self._booting = False
        self._lock = threading.RLock()

        self._provider_cache = KeyStore()
        self._instance_cache = KeyStore()
        for parent in containers:
            self._provider_cache.merge(parent._provider_cache)
            self._instance_cache.merge(parent._instance_cache)

        self.tracer = Tracer()
        self._provider_injector = Injector(
            self._provider_cache, self._provider_not_found, self.tracer, self._lock
        )
        self._instance_injector = Injector(
            self._instance_cache, self._build_instance, self.tracer, self._lock
        )

        self.provider("Container", Provider([lambda: self]))
        self.provider("Injector", Provider([lambda: self._instance_injector]))

    @property
    def state(self) -> ContainerState:
        return self._state

    @property
    def injector(self) -> Injector:
        """The injector building and caching this container's components."""
        return self._instance_injector

    def _provider_not_found(self, name: str):
        if name.endswith(PROVIDER_SUFFIX):
            name = name[: -len(PROVIDER_SUFFIX)]
        raise DependencyNotFoundError(name, str(self.tracer))

    def _build_instance(self, name: str) -> Any:
        provider = self._provider_injector.get(name + PROVIDER_SUFFIX)
        instance = self._instance_injector.invoke(dependency_array(provider.get_factory()))

        if isinstance(instance, ContainerAware):
            instance.set_container(self)

        return instance

    def import_container(self, container: "Container", prefix: Optional[str] = None) -> "Container":
        """Copy the providers and instances of another container into this one.

        The other container is booted first. Its ``Container`` and ``Injector``
        bindings are not copied. Names copied later overwrite names copied
        earlier.

        Args:
            container: The container to import.
            prefix: If given, every imported name ``key`` is available as
                ``prefix/key``.

        Returns:
            This container.
        """
        container.boot()
        with self._lock:
            self._provider_cache.merge(container._provider_cache, prefix)
            self._instance_cache.merge(container._instance_cache, prefix)
        logger.debug("Imported container %r with prefix %r", container, prefix)
        return self

    def provider(self, name: str, provider: FactoryProvider) -> "Container":
        """Register a provider for ``name``.

        The provider itself can be injected into configuration callables as
        ``<name>Provider``.

        Raises:
            InvalidArgumentError: If ``provider`` is a class or has no
                ``get_factory`` method.
        """
        if not _is_provider(provider):
            raise InvalidArgumentError(f"{provider!r} is not a provider")
        self._provider_cache.set(name + PROVIDER_SUFFIX, provider)
        return self

    def decorator(self, name: str, decorator: Any) -> "Container":
        """Wrap the component registered as ``name``.

        The decorator is a factory (or a provider of one) that receives the
        original instance through the ``DecoratedInstance`` dependency and
        returns the component to use instead. Decorators stack: decorating a
        decorated name wraps the previous decorator's result.

        Raises:
            DependencyNotFoundError: If no provider is registered for ``name``.
        """
        legacy_provider = self._provider_injector.get(name + PROVIDER_SUFFIX)
        legacy_factory = dependency_array(legacy_provider.get_factory())

        if _is_provider(decorator):
            decorator = decorator.get_factory()
        decorator_factory = dependency_array(decorator)
        injector = self._instance_injector

        def decorate():
            decorated_instance = injector.invoke(legacy_factory)
            return injector.invoke(decorator_factory, {DECORATED_INSTANCE: decorated_instance})

        logger.debug("Decorating '%s'", name)
        return self.factory(name, [decorate])

    def service(self, name: str, service: Any) -> "Container":
        """Register a class to be constructed with its dependencies.

        Args:
            name: The component name.
            service: A class, whose constructor parameters name its
                dependencies, or a dependency array ending in a class.
        """
        dependencies_and_service = dependency_array(service)

        return self.provider(
            name,
            Provider(["Injector", lambda injector: injector.instantiate(dependencies_and_service)]),
        )

    def factory(self, name: str, factory: Any) -> "Container":
        """Register a factory whose result becomes the component ``name``.

        Args:
            name: The component name.
            factory: A callable, whose parameters name its dependencies, or a
                dependency array ``[*names, factory]``.
        """
        return self.provider(name, Provider(factory))

    def value(self, name: str, value: Any) -> "Container":
        return self.factory(name, [lambda: value])

    def constant(self, name: str, value: Any) -> "Container":
        """Register a value that is also available to configuration callables."""
        self._provider_cache.set(name, value)
        self._instance_cache.set(name, value)
        return self

    def config(self, config: Any) -> "Container":
        """Add a configuration callable to run on boot.

        Its dependencies are resolved from providers (``<name>Provider``) and
        constants, since no component is built before boot completes.
        """
        if self._state is ContainerState.BOOTED:
            logger.warning("Container already booted, configuration %r will not run", config)
        self._configs.append(config)
        return self

    def provides(self, name: Optional[str] = None) -> Callable:
        """Decorator registering a class as a service or a function as a factory.

        Args:
            name: Optional component name; defaults to the class name, or to
                the function name with any 'make_' prefix removed.

        Example:
            @container.provides()
            def make_greeting(name):
                return f"Hello {name}"
        """
        def decorator(obj):
            provided_name = name or inferred_name(obj)
            if inspect.isclass(obj):
                self.service(provided_name, obj)
            elif inspect.isroutine(obj):
                self.factory(provided_name, obj)
            else:
                raise InvalidArgumentError(f"{obj} is not a class or function")
            return obj

        return decorator

    def boot(self) -> "Container":
        """Run all configuration callables, once.

        Each configuration callable is taken off the pending queue before it
        runs, so none runs twice. If one raises, the container stays
        CONFIGURING and a later boot continues with the callables after it.
        Calling boot on a booted container, or from a configuration callable
        while booting, does nothing.
        """
        with self._lock:
            if self._state is ContainerState.BOOTED or self._booting:
                return self

            self._state = ContainerState.CONFIGURING
            self._booting = True
            logger.debug("Booting container with %d configuration(s)", len(self._configs))

            try:
                while self._configs:
                    config = self._configs.popleft()
                    self._provider_injector.invoke(dependency_array(config))
            finally:
                self._booting = False

            self._state = ContainerState.BOOTED
            logger.debug("Container booted")
            return self

    def get(self, name: str) -> Any:
        """Return the component ``name``, booting the container first if needed.

        Raises:
            DependencyNotFoundError: If nothing is registered for ``name`` or
                for one of its dependencies.
            RingDependencyError: If ``name`` depends on itself.
        """
        if self._state is ContainerState.INITIAL:
            self.boot()

        return self._instance_injector.get(name)

    def has(self, name: str) -> bool:
        """Whether ``name`` is built or has a provider. Never builds anything."""
        return (
            self._instance_injector.has(name)
            or self._provider_injector.has(name + PROVIDER_SUFFIX)
        )

    def unset(self, name: str):
        raise RemovalNotSupportedError(name)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.value(name, value)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __delitem__(self, name: str) -> None:
        self.unset(name)


def _is_provider(target: Any) -> bool:
    """Whether ``target`` is a provider object, by its ``get_factory`` method."""
    return not inspect.isclass(target) and callable(getattr(target, "get_factory", None))
