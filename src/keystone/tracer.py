"""Resolution trace used to explain dependency errors.

The tracer records what the injectors did while building an object graph:
which names were requested, what each factory depends on, notes made while
resolving factory references and when a request completed. The record is
rendered as an indented tree and appended to error messages.

Example:
    >>> tracer = Tracer()
    >>> tracer.request("Service")
    >>> tracer.depends_on(["db", "cache"])
    >>> tracer.received()
    >>> str(tracer)
    'Service requested (\\n\\tDependencies: [db, cache]\\n)'
"""

from dataclasses import dataclass
from typing import Union

__all__ = ["Tracer", "TraceEvent", "Request", "DependsOn", "Note", "Received"]


@dataclass(frozen=True)
class Request:
    """A name was requested from an injector and is not cached yet."""

    name: str


@dataclass(frozen=True)
class DependsOn:
    """A factory is about to be invoked with these dependency names."""

    dependencies: tuple[str, ...]


@dataclass(frozen=True)
class Note:
    message: str


@dataclass(frozen=True)
class Received:
    """The innermost open request completed."""


TraceEvent = Union[Request, DependsOn, Note, Received]


class Tracer:
    """Append-only log of resolution events shared by a container's injectors."""

    indent = "\t"

    def __init__(self):
        self._events: list[TraceEvent] = []

    @property
    def events(self) -> tuple[TraceEvent, ...]:
        return tuple(self._events)

    def request(self, name: str) -> None:
        self._events.append(Request(name))

    def depends_on(self, dependencies) -> None:
        self._events.append(DependsOn(tuple(str(d) for d in dependencies)))

    def note(self, message: str) -> None:
        self._events.append(Note(message))

    def received(self) -> None:
        self._events.append(Received())

    def render(self) -> str:
        """Render the events as a tree, one line per event.

        Each request opens a block that is indented one level deeper and is
        closed by the matching received event.
        """
        level = 0
        lines = []

        for event in self._events:
            if isinstance(event, Request):
                lines.append(f"{self.indent * level}{event.name} requested (")
                level += 1
            elif isinstance(event, DependsOn):
                deps = f"[{', '.join(event.dependencies)}]" if event.dependencies else "none"
                lines.append(f"{self.indent * level}Dependencies: {deps}")
            elif isinstance(event, Note):
                lines.append(f"{self.indent * level}Note: {event.message}")
            elif isinstance(event, Received):
                level = max(level - 1, 0)
                lines.append(f"{self.indent * level})")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        return len(self._events)
