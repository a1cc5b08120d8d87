"""Introspection of factories and normalisation of dependency declarations.

Factories are registered either with an explicit dependency list::

    container.factory("greeting", ["name", lambda who: f"Hello {who}"])

or bare, in which case the dependency names are read from the factory's
parameters::

    container.factory("greeting", lambda name: f"Hello {name}")

Both forms are normalised by :func:`dependency_array` into the list form,
whose last element is the factory reference.
"""

import inspect
from typing import Annotated, Any, Callable, get_args, get_origin, get_type_hints

from keystone.errors import InvalidArgumentError

__all__ = [
    "extract_parameters",
    "dependency_array",
    "inferred_name",
    "is_factory_reference",
    "is_method_pair",
]

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def is_method_pair(target: Any) -> bool:
    """Whether ``target`` is an ``(owner, "method")`` pair naming a callable attribute.

    Example:
        >>> is_method_pair((greeter, "greet"))   # True if greeter.greet is callable
        >>> is_method_pair(("Greeter", "greet"))  # False, the owner is a name
    """
    return (
        isinstance(target, (list, tuple))
        and len(target) == 2
        and not isinstance(target[0], str)
        and isinstance(target[1], str)
        and callable(getattr(target[0], target[1], None))
    )


def is_factory_reference(target: Any) -> bool:
    """Whether ``target`` may terminate a dependency array.

    Callables (including classes) are used directly. Lists and tuples are
    late-bound references, resolved by the injector when invoked.
    """
    return callable(target) or isinstance(target, (list, tuple))


def extract_parameters(target: Any) -> list[str]:
    """Return the dependency names of a callable or of a class constructor.

    Only parameters that can be passed positionally are reported. A
    parameter annotated with ``Annotated[SomeType, "name"]`` depends on
    ``"name"`` rather than on its own parameter name.

    Args:
        target: A function, bound method, callable object, class or
            ``(owner, "method")`` pair.

    Returns:
        The dependency names, in parameter order.

    Raises:
        InvalidArgumentError: If ``target`` is not callable or its signature
            cannot be read.

    Example:
        >>> def make_service(db, cache: Annotated[Cache, "redis"]): ...
        >>> extract_parameters(make_service)
        ['db', 'redis']
    """
    func = _signature_target(target)
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(
            f"Can't extract parameters from {target!r}: {e}"
        ) from e

    hints = _type_hints(func)
    return [
        _dependency_name(hints.get(name, parameter.annotation), name)
        for name, parameter in signature.parameters.items()
        if parameter.kind in _POSITIONAL
    ]


def dependency_array(argument: Any) -> list:
    """Normalise a registration argument into ``[*dependency_names, factory]``.

    A list or tuple whose last element is a factory reference is taken as
    is. Anything else is treated as the factory itself, and its parameters
    become the dependency names.

    Raises:
        InvalidArgumentError: If ``argument`` is neither a dependency array
            nor something whose parameters can be extracted.
    """
    if isinstance(argument, (list, tuple)) and argument:
        if is_factory_reference(argument[-1]):
            return list(argument)

    return [*extract_parameters(argument), argument]


def inferred_name(target: Any) -> str:
    """Derive a component name from a class or function name.

    Example:
        >>> inferred_name(Database)       # Returns "Database"
        >>> inferred_name(make_database)  # Returns "database"
    """
    if inspect.isclass(target):
        return target.__name__

    if target.__name__.startswith("make_"):
        return target.__name__[5:]
    else:
        return target.__name__


def _signature_target(target: Any) -> Callable:
    if inspect.isclass(target):
        return target
    if is_method_pair(target):
        return getattr(target[0], target[1])
    if callable(target):
        return target
    raise InvalidArgumentError(
        f"Can't extract parameters from given argument with type '{type(target).__name__}'"
    )


def _type_hints(func: Callable) -> dict[str, Any]:
    """Resolve annotations of ``func`` (the constructor, for classes).

    Annotations that cannot be evaluated are ignored and the raw
    annotations from the signature are used instead.
    """
    if inspect.isclass(func):
        source = func.__init__
    elif inspect.isroutine(func):
        source = func
    else:
        source = type(func).__call__

    try:
        return get_type_hints(source, include_extras=True)
    except (NameError, TypeError):
        return {}


def _dependency_name(annotation: Any, parameter_name: str) -> str:
    if get_origin(annotation) is Annotated:
        _, *metadata = get_args(annotation)
        return next((m for m in metadata if isinstance(m, str)), parameter_name)
    return parameter_name
