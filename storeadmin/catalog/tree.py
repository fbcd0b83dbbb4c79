"""Taxonomy tree assembly and descendant resolution.

Taxonomy rows are stored as an adjacency list (``parent_id``). This module
turns a flat set of rows into nested nodes for presentation and walks
downward (descendant ids) or upward (ancestor chains). Every pass is
iterative so stored depth never hits the interpreter recursion limit, and
a cyclic parent chain in stored rows raises ``CorruptTreeError``.
"""

from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from storeadmin.domain.exceptions import CorruptTreeError


@dataclass
class TaxonomyNode:
    """A taxonomy row prepared for tree assembly.

    Attributes:
        id: Node ID.
        name: Display name (used for ordering).
        parent_id: ID of parent node (None for root).
        record: The underlying ORM row, used for serialization.
        product_count: Number of products referencing this node directly.
        child_count: Number of direct children in the stored tree.
        children: Expanded children, filled by ``assemble_tree``.
    """

    id: int
    name: str
    parent_id: int | None = None
    record: Any = field(default=None, repr=False)
    product_count: int = 0
    child_count: int = 0
    children: list["TaxonomyNode"] = field(default_factory=list, repr=False)

    @classmethod
    def from_record(cls, record: Any, product_count: int = 0) -> "TaxonomyNode":
        """Wrap an ORM row.

        Args:
            record: Row with ``id``, ``name`` and ``parent_id`` attributes.
            product_count: Direct product references.

        Returns:
            Unlinked taxonomy node.
        """
        return cls(
            id=record.id,
            name=record.name,
            parent_id=record.parent_id,
            record=record,
            product_count=product_count,
        )


def sort_key(node: TaxonomyNode) -> tuple[str, str, int]:
    """Ordering for siblings: case-folded codepoint order, then raw name, then id."""
    return (node.name.casefold(), node.name, node.id)


def assemble_tree(
    nodes: Sequence[TaxonomyNode],
    root_id: int | None = None,
    max_depth: int | None = None,
    entity_type: str = "Taxonomy",
) -> list[TaxonomyNode]:
    """Link flat nodes into a sorted forest.

    Roots are at depth 1. Nodes at ``max_depth`` keep an empty ``children``
    list while ``child_count`` still reports their stored children.

    Args:
        nodes: Every node of one taxonomy (or at least the wanted subtree).
        root_id: Return only the subtree rooted here.
        max_depth: Deepest level to expand, None for unlimited.
        entity_type: Name used in cycle errors.

    Returns:
        Sorted root nodes, or ``[subtree_root]`` in subtree mode
        (empty if ``root_id`` is unknown).

    Raises:
        CorruptTreeError: If some nodes can't be reached from any root.
    """
    by_id = {node.id: node for node in nodes}
    children_of: dict[int, list[TaxonomyNode]] = defaultdict(list)
    roots: list[TaxonomyNode] = []

    for node in nodes:
        node.children = []
        if node.parent_id is not None and node.parent_id in by_id:
            children_of[node.parent_id].append(node)
        else:
            roots.append(node)

    for node in nodes:
        node.child_count = len(children_of.get(node.id, ()))
    for siblings in children_of.values():
        siblings.sort(key=sort_key)
    roots.sort(key=sort_key)

    if root_id is None:
        _check_reachable(roots, children_of, by_id, entity_type)
    else:
        if root_id not in by_id:
            return []
        roots = [by_id[root_id]]

    visited: set[int] = set()
    stack = [(root, 1) for root in reversed(roots)]
    while stack:
        node, depth = stack.pop()
        if node.id in visited:
            raise CorruptTreeError(entity_type, [node.id])
        visited.add(node.id)
        if max_depth is not None and depth >= max_depth:
            continue
        node.children = list(children_of.get(node.id, ()))
        stack.extend((child, depth + 1) for child in reversed(node.children))

    return roots


def _check_reachable(
    roots: Iterable[TaxonomyNode],
    children_of: dict[int, list[TaxonomyNode]],
    by_id: dict[int, TaxonomyNode],
    entity_type: str,
) -> None:
    # Every node has one parent, so anything not reachable from a root sits on a cycle.
    seen: set[int] = set()
    frontier = [root.id for root in roots]
    while frontier:
        node_id = frontier.pop()
        seen.add(node_id)
        frontier.extend(child.id for child in children_of.get(node_id, ()))
    if len(seen) < len(by_id):
        raise CorruptTreeError(entity_type, sorted(set(by_id) - seen))


async def resolve_descendants(
    root_id: int,
    fetch_child_ids: Callable[[set[int]], Awaitable[Iterable[int]]],
    entity_type: str = "Taxonomy",
) -> set[int]:
    """Collect a node's id plus every descendant id.

    Walks one level per call to ``fetch_child_ids``.

    Args:
        root_id: Starting node (always part of the result).
        fetch_child_ids: Returns ids of nodes whose parent is in the given set.
        entity_type: Name used in cycle errors.

    Returns:
        Set of ids.

    Raises:
        CorruptTreeError: If a child already collected shows up again.
    """
    result = {root_id}
    frontier = {root_id}
    while frontier:
        child_ids = set(await fetch_child_ids(frontier))
        repeated = child_ids & result
        if repeated:
            raise CorruptTreeError(entity_type, sorted(repeated))
        result |= child_ids
        frontier = child_ids
    return result


async def resolve_ancestors(
    node_id: int,
    fetch_parent_id: Callable[[int], Awaitable[int | None]],
    until: int | None = None,
    entity_type: str = "Taxonomy",
) -> list[int]:
    """Collect the parent chain of a node, starting with the node itself.

    Args:
        node_id: Starting node.
        fetch_parent_id: Returns a node's parent id (None for roots).
        until: Stop once this id is reached; it is the last item returned.
        entity_type: Name used in corruption errors.

    Returns:
        Ids from ``node_id`` up to the root (or to ``until``).

    Raises:
        CorruptTreeError: If the stored chain loops without reaching ``until``.
    """
    chain = [node_id]
    seen = {node_id}
    current: int | None = node_id
    while current is not None and current != until:
        current = await fetch_parent_id(current)
        if current is None:
            break
        if current in seen:
            raise CorruptTreeError(entity_type, sorted(seen))
        seen.add(current)
        chain.append(current)
    return chain
