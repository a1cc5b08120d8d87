__all__ = [
    "DependencyError",
    "DependencyNotFoundError",
    "RingDependencyError",
    "InvalidFactoryError",
    "InstantiationError",
    "InvalidArgumentError",
    "RemovalNotSupportedError",
]

from typing import Optional


class DependencyError(Exception):
    """Raised when a dependency cannot be registered, resolved or built.

    Attributes:
        trace: The rendered resolution trace at the time of failure, if any.
    """

    def __init__(self, message: str, trace: Optional[str] = None):
        self.trace = trace
        super().__init__(f"{message}\n{trace}" if trace else message)


class DependencyNotFoundError(DependencyError, LookupError):
    """Raised when no provider is registered for a requested name."""

    def __init__(self, name: str, trace: Optional[str] = None):
        self.name = name
        super().__init__(f"Provider for '{name}' not found", trace)


class RingDependencyError(DependencyError):
    """Raised when resolving a name requires resolving that same name again."""

    def __init__(self, name: str, trace: Optional[str] = None):
        self.name = name
        super().__init__(f"Ring dependency found for '{name}'", trace)


class InvalidFactoryError(DependencyError, TypeError):
    """Raised when a factory reference cannot be turned into a callable."""


class InstantiationError(DependencyError, TypeError):
    """Raised when a service descriptor does not end in a class."""


class InvalidArgumentError(DependencyError, ValueError):
    """Raised when dependencies cannot be extracted from a registration argument."""


class RemovalNotSupportedError(DependencyError, NotImplementedError):
    """Raised on every attempt to remove a registered name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Removing '{name}' is not implemented")
