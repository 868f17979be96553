from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, Protocol, TypeVar


class Node(Protocol):
    """Anything carrying a unique string id. Nodes are compared by id only."""

    @property
    def id(self) -> str: ...


T = TypeVar("T", bound=Node)


@dataclass(frozen=True, eq=False)
class NodeRecord:
    """Default payload used by node documents and the CLI."""

    id: str
    label: Optional[str] = None
    data: Mapping[str, Any] = field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeRecord):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class NodeInfo(Generic[T]):
    node: T
    height: int


@dataclass(frozen=True)
class Edge:
    from_id: str  # parent
    to_id: str  # child


@dataclass(frozen=True)
class Dag(Generic[T]):
    """Immutable graph value. Only `build` produces non-empty instances."""

    nodes: Mapping[str, NodeInfo[T]] = field(default_factory=lambda: MappingProxyType({}))
    edges: tuple[Edge, ...] = ()


@dataclass(frozen=True)
class NodeAddition(Generic[T]):
    node: T
    parent_ids: tuple[str, ...]


BuilderStep = Callable[["Builder[T]"], "Builder[T]"]


@dataclass(frozen=True)
class Builder(Generic[T]):
    starting_dag: Dag[T] = field(default_factory=lambda: empty())
    instructions: tuple[NodeAddition[T], ...] = ()

    def add_node(self, node: T, parent_ids: Iterable[str] = ()) -> Builder[T]:
        return Builder(
            starting_dag=self.starting_dag,
            instructions=self.instructions + (NodeAddition(node=node, parent_ids=tuple(parent_ids)),),
        )

    def apply(self, *steps: BuilderStep) -> Builder[T]:
        out = self
        for step in steps:
            out = step(out)
        return out


def empty() -> Dag[Any]:
    return Dag()


def builder(starting_dag: Optional[Dag[T]] = None) -> Builder[T]:
    return Builder(starting_dag=starting_dag if starting_dag is not None else empty())


def add_node(node: T, parent_ids: Iterable[str] = ()) -> BuilderStep:
    """Return a reusable step appending one instruction to whatever Builder it is given."""
    frozen_ids = tuple(parent_ids)

    def _step(b: Builder[T]) -> Builder[T]:
        return b.add_node(node, frozen_ids)

    return _step
