from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Optional, Union

from dagkit.core.errors import BuildError, duplicate_node, missing_parent
from dagkit.core.model import Builder, Dag, Edge, NodeAddition, NodeInfo, T


logger = logging.getLogger(__name__)


def build(builder: Builder[T]) -> tuple[Optional[Dag[T]], list[BuildError]]:
    """Resolve a Builder's instructions into a Dag.

    Returns (dag, errors). Dag is None when errors exist; nothing is applied
    partially.

    Instructions may arrive in any order relative to their parents. A failed
    instruction is deferred; every success requeues the deferred instructions
    ahead of the ones not yet tried in this pass. When the queue drains with
    deferred instructions left, each of them contributes the error from its
    most recent attempt.
    """

    dag = builder.starting_dag
    pending: list[NodeAddition[T]] = list(builder.instructions)
    deferred: list[tuple[NodeAddition[T], BuildError]] = []
    attempts = 0

    while pending:
        head, tail = pending[0], pending[1:]
        attempts += 1
        result = _attempt(dag, head)
        if isinstance(result, BuildError):
            logger.debug("deferring %r: %s", head.node.id, result.message)
            deferred.append((head, result))
            pending = tail
            continue

        dag = result
        if deferred:
            logger.debug("added %r, requeueing %d deferred", head.node.id, len(deferred))
        pending = [instr for instr, _ in deferred] + tail
        deferred = []

    if deferred:
        errors = [err for _, err in deferred]
        logger.debug("build failed after %d attempts with %d errors", attempts, len(errors))
        return None, errors

    logger.debug("build succeeded after %d attempts: %d nodes", attempts, len(dag.nodes))
    return dag, []


def _attempt(dag: Dag[T], instr: NodeAddition[T]) -> Union[Dag[T], BuildError]:
    node_id = instr.node.id
    if node_id in dag.nodes:
        return duplicate_node(node_id)

    height = 0
    for parent_id in instr.parent_ids:
        parent = dag.nodes.get(parent_id)
        if parent is None:
            return missing_parent(node_id)
        height = max(height, parent.height + 1)

    nodes = dict(dag.nodes)
    nodes[node_id] = NodeInfo(node=instr.node, height=height)
    edges = dag.edges + tuple(Edge(from_id=p, to_id=node_id) for p in instr.parent_ids)
    return Dag(nodes=MappingProxyType(nodes), edges=edges)
