"""Domain objects shared by the container and its users."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

__all__ = ["FactoryProvider", "Provider", "ContainerAware"]


class FactoryProvider(ABC):
    """Something that knows how to build one named component.

    Providers are stored under ``<name>Provider`` and can themselves be
    injected into configuration callables, which lets configuration adjust a
    provider before anything is built from it.
    """

    @abstractmethod
    def get_factory(self) -> Any:
        """Return the factory descriptor for the component.

        A descriptor is either a callable, or a list whose last element is a
        factory reference and whose other elements are the names of the
        dependencies passed to it positionally.
        """


@dataclass(frozen=True)
class Provider(FactoryProvider):
    """Provider holding a fixed factory descriptor.

    Attributes:
        factory: The descriptor returned by :meth:`get_factory`.
    """

    factory: Any

    def get_factory(self) -> Any:
        return self.factory


class ContainerAware(ABC):
    """Components that receive the container which built them."""

    @abstractmethod
    def set_container(self, container) -> None:
        pass
