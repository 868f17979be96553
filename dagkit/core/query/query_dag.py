from __future__ import annotations

from collections import deque
from typing import Iterable, Optional

from dagkit.core.model import Dag, Node, T


def size(dag: Dag[T]) -> int:
    return len(dag.nodes)


def contains(dag: Dag[T], node: Node) -> bool:
    return node.id in dag.nodes


def get(dag: Dag[T], node_id: str) -> Optional[T]:
    info = dag.nodes.get(node_id)
    return info.node if info is not None else None


def get_height(dag: Dag[T], node_id: str) -> Optional[int]:
    info = dag.nodes.get(node_id)
    return info.height if info is not None else None


def get_parents(dag: Dag[T], node: Node) -> list[T]:
    """Parents of `node`, in stored edge order. Unknown nodes have none."""
    return [dag.nodes[e.from_id].node for e in dag.edges if e.to_id == node.id]


def get_children(dag: Dag[T], node: Node) -> list[T]:
    """Children of `node`, in stored edge order. Unknown nodes have none."""
    return [dag.nodes[e.to_id].node for e in dag.edges if e.from_id == node.id]


def is_descendant_of(dag: Dag[T], target: Node, ancestors: Iterable[Node]) -> bool:
    """True if some node in `ancestors` is reachable from `target` by walking parent edges.

    The target is not considered its own ancestor. Each id is expanded at most
    once, so shared ancestors in diamond-shaped graphs are not revisited.
    """

    wanted = {a.id for a in ancestors}
    if not wanted:
        return False

    # child -> parent ids
    parents_of: dict[str, list[str]] = {}
    for e in dag.edges:
        parents_of.setdefault(e.to_id, []).append(e.from_id)

    q: deque[str] = deque(parents_of.get(target.id, []))
    seen: set[str] = set()
    while q:
        cur = q.popleft()
        if cur in wanted:
            return True
        if cur in seen:
            continue
        seen.add(cur)
        for nxt in parents_of.get(cur, []):
            if nxt not in seen:
                q.append(nxt)
    return False


def roots(dag: Dag[T]) -> list[T]:
    return [info.node for info in dag.nodes.values() if info.height == 0]


def summarize_dag(dag: Dag[T]) -> str:
    max_height = max((info.height for info in dag.nodes.values()), default=0)
    return (
        f"OK: {size(dag)} nodes, {len(dag.edges)} edges, max height {max_height}"
        + "\nRoots: "
        + ", ".join(n.id for n in roots(dag))
    )
