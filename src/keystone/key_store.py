"""Name-keyed storage backing each injector.

A KeyStore is an insertion-ordered mapping from string keys to arbitrary
values. Stored values may be ``None``, so lookups of missing keys return the
:data:`ABSENT` marker rather than ``None``.

Stores can be merged into one another, optionally moving every merged key
under a prefix. The keys a container uses to register itself and its
injector are never merged, so importing another container cannot replace
the importer's own bindings.
"""

from typing import Any, Iterable, Iterator, Optional

__all__ = ["KeyStore", "ABSENT", "RESERVED_KEYS"]


class _Absent:
    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Any = _Absent()
"""Returned by :meth:`KeyStore.get` for keys that hold no value."""

RESERVED_KEYS = frozenset({"Container", "Injector", "ContainerProvider", "InjectorProvider"})
"""Self-registration keys of a container, excluded from every merge."""


class KeyStore:
    """Insertion-ordered mapping of names to values.

    Example:
        >>> store = KeyStore()
        >>> store.set("db", None)
        >>> store.has("db"), store.get("db"), store.get("cache")
        (True, None, ABSENT)
    """

    def __init__(self):
        self._values: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def get(self, key: str) -> Any:
        return self._values.get(key, ABSENT)

    def has(self, key: str) -> bool:
        return key in self._values

    def unset(self, key: str) -> None:
        self._values.pop(key, None)

    def merge(
        self,
        other: "KeyStore",
        prefix: Optional[str] = None,
        exclude: Iterable[str] = RESERVED_KEYS,
    ) -> None:
        """Copy all entries of ``other`` into this store.

        Args:
            other: The store to copy from. It is not modified.
            prefix: If given, every copied key is stored as ``prefix/key``.
            exclude: Keys of ``other`` that are never copied.
        """
        excluded = frozenset(exclude)
        for key, value in list(other._values.items()):
            if key in excluded:
                continue
            self._values[f"{prefix}/{key}" if prefix else key] = value

    def keys(self) -> list[str]:
        return list(self._values)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)
