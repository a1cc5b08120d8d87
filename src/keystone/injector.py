"""Memoising name resolution with ring dependency detection.

An :class:`Injector` resolves names against a :class:`~keystone.key_store.KeyStore`.
Names missing from the store are handed to a fallback factory, and whatever
the factory returns is cached for the lifetime of the injector, so each name
is built at most once.

While a name is being built its slot holds an in-progress marker. Finding
that marker on lookup means the name's construction requested the name
itself, directly or through other names, and a :class:`RingDependencyError`
is raised.

Factories are invoked from dependency arrays, ``[*names, factory]``. The
names are resolved through the injector and passed positionally. The
terminal factory may be:

- a callable, invoked directly;
- an ``(owner, "method")`` pair, where a string ``owner`` is first resolved
  through the injector;
- a one element list ``[name]``, whose resolved value must be callable.
"""

import inspect
import logging
import threading
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from keystone.errors import InstantiationError, InvalidFactoryError, RingDependencyError
from keystone.key_store import KeyStore
from keystone.tracer import Tracer

__all__ = ["Injector", "IN_PROGRESS"]

logger = logging.getLogger(__name__)


class _InProgress:
    def __repr__(self) -> str:
        return "IN_PROGRESS"


IN_PROGRESS: Any = _InProgress()
"""Marker held by a cache slot while its value is being built."""


class Injector:
    """Resolve names to values, building missing ones through a factory.

    Args:
        cache: Store of already resolved values. Values present before the
            injector is created are returned as they are.
        factory: Called with a missing name; its result is cached under it.
        tracer: Trace shared with the other injectors of the same container.
        lock: Reentrant lock guarding each build. A new one is created if
            not given.

    Example:
        >>> cache = KeyStore()
        >>> cache.set("greeting", "Hello")
        >>> injector = Injector(cache, lambda name: name.upper(), Tracer())
        >>> injector.invoke(["greeting", "world", lambda g, w: f"{g} {w}"])
        'Hello WORLD'
    """

    def __init__(
        self,
        cache: KeyStore,
        factory: Callable[[str], Any],
        tracer: Tracer,
        lock=None,
    ):
        self._cache = cache
        self._factory = factory
        self.tracer = tracer
        self._lock = lock or threading.RLock()

    def has(self, name: str) -> bool:
        """Whether ``name`` is cached. Never builds anything."""
        return self._cache.has(name)

    def get(self, name: str) -> Any:
        """Return the value for ``name``, building and caching it if needed.

        Raises:
            RingDependencyError: If ``name`` is requested again while it is
                still being built.
        """
        with self._lock:
            if not self._cache.has(name):
                self._cache.set(name, IN_PROGRESS)
                self.tracer.request(name)
                logger.debug("Building '%s'", name)
                try:
                    self._cache.set(name, self._factory(name))
                finally:
                    self.tracer.received()

            value = self._cache.get(name)
            if value is IN_PROGRESS:
                self.tracer.note(f"{name} is a ring dependency")
                raise RingDependencyError(name, str(self.tracer))

            return value

    def invoke(
        self,
        descriptor: Sequence,
        local: Optional[Mapping[str, Any]] = None,
        arguments: Optional[Iterable[Any]] = None,
    ) -> Any:
        """Call the factory at the end of ``descriptor`` with its dependencies.

        Args:
            descriptor: A dependency array ``[*names, factory]``.
            local: Values used for dependency names instead of resolving
                them, such as the instance being decorated.
            arguments: Positional arguments passed before the dependencies.

        Returns:
            Whatever the factory returns.

        Raises:
            InvalidFactoryError: If the factory reference does not resolve to
                a callable.
        """
        names, factory = self._split(descriptor)
        call_arguments = self._arguments(names, local, arguments)

        resolved = self._resolve_callable(factory)
        if resolved is None:
            raise InvalidFactoryError(f"Can't handle factory {factory!r}", str(self.tracer))

        return resolved(*call_arguments)

    def instantiate(
        self,
        descriptor: Sequence,
        local: Optional[Mapping[str, Any]] = None,
        arguments: Optional[Iterable[Any]] = None,
    ) -> Any:
        """Construct the class at the end of ``descriptor`` with its dependencies.

        Takes the same arguments as :meth:`invoke`.

        Raises:
            InstantiationError: If the last element of ``descriptor`` is not
                a class.
        """
        names, constructor = self._split(descriptor)
        call_arguments = self._arguments(names, local, arguments)

        if inspect.isclass(constructor):
            return constructor(*call_arguments)

        shown = constructor if isinstance(constructor, str) else repr(constructor)
        raise InstantiationError(f"Instantiation of {shown} not possible", str(self.tracer))

    def _split(self, descriptor: Sequence) -> tuple[list, Any]:
        if not isinstance(descriptor, (list, tuple)) or not descriptor:
            raise InvalidFactoryError(
                f"Expected a non-empty dependency array, got {descriptor!r}", str(self.tracer)
            )
        *names, factory = descriptor
        return names, factory

    def _arguments(
        self,
        names: list,
        local: Optional[Mapping[str, Any]],
        arguments: Optional[Iterable[Any]],
    ) -> list:
        local = local or {}
        self.tracer.depends_on(names)
        return [
            *(arguments or ()),
            *(local[name] if name in local else self.get(name) for name in names),
        ]

    def _resolve_callable(self, factory: Any) -> Optional[Callable]:
        """Turn a factory reference into a callable, or None if impossible."""
        if callable(factory):
            return factory

        if isinstance(factory, (list, tuple)) and len(factory) == 2:
            owner, method = factory
            self.tracer.note(f"Trying to resolve '{owner}.{method}' as factory")
            if isinstance(owner, str):
                owner = self.get(owner)
            factory = getattr(owner, method, None) if isinstance(method, str) else None
        elif isinstance(factory, (list, tuple)) and len(factory) == 1:
            name = factory[0]
            if not isinstance(name, str):
                return None
            self.tracer.note(f"Trying to resolve '{name}' as factory")
            factory = self.get(name)

        return factory if callable(factory) else None
