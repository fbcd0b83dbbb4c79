"""Tests for taxonomy tree assembly and descendant resolution."""

from collections.abc import Iterable

import pytest

from storeadmin.catalog.tree import (
    TaxonomyNode,
    assemble_tree,
    resolve_ancestors,
    resolve_descendants,
)
from storeadmin.domain.exceptions import CorruptTreeError


def make_nodes(*rows: tuple[int, str, int | None]) -> list[TaxonomyNode]:
    """Build unlinked nodes from (id, name, parent_id) rows."""
    return [TaxonomyNode(id=node_id, name=name, parent_id=parent_id) for node_id, name, parent_id in rows]


def flatten(roots: Iterable[TaxonomyNode]) -> list[TaxonomyNode]:
    """Every node reachable through ``children``, depth first."""
    result: list[TaxonomyNode] = []
    stack = list(roots)
    while stack:
        node = stack.pop()
        result.append(node)
        stack.extend(node.children)
    return result


@pytest.fixture
def catalog() -> list[TaxonomyNode]:
    """A small three-level catalog."""
    return make_nodes(
        (1, "Electronics", None),
        (2, "Computers", 1),
        (3, "Laptops", 2),
        (4, "Audio", 1),
        (5, "apparel", None),
        (6, "Shoes", 5),
        (7, "Home", None),
    )


class TestAssembleTree:
    """Tests for assemble_tree."""

    def test_roots_and_children(self, catalog: list[TaxonomyNode]) -> None:
        """Nodes end up under their parent."""
        roots = assemble_tree(catalog)

        assert [r.id for r in roots] == [5, 1, 7]
        electronics = roots[1]
        assert [c.name for c in electronics.children] == ["Audio", "Computers"]
        assert [c.name for c in electronics.children[1].children] == ["Laptops"]

    def test_every_node_appears_once_under_its_parent(self, catalog: list[TaxonomyNode]) -> None:
        """No node is duplicated or dropped, and children point at their parent."""
        roots = assemble_tree(catalog)
        nodes = flatten(roots)

        assert sorted(n.id for n in nodes) == sorted(n.id for n in catalog)
        for node in nodes:
            for child in node.children:
                assert child.parent_id == node.id
        for root in roots:
            assert root.parent_id is None

    def test_case_insensitive_sort(self) -> None:
        """Siblings sort by case-folded name, ties by raw name then id."""
        nodes = make_nodes(
            (1, "beta", None),
            (2, "Alpha", None),
            (3, "alpha", None),
            (4, "Alpha", None),
            (5, "Яблука", None),
            (6, "Груші", None),
        )
        roots = assemble_tree(nodes)

        assert [r.id for r in roots] == [2, 4, 3, 1, 6, 5]

    def test_children_sorted(self, catalog: list[TaxonomyNode]) -> None:
        """Within every children list names are non-decreasing."""
        for node in flatten(assemble_tree(catalog)):
            names = [c.name.casefold() for c in node.children]
            assert names == sorted(names)

    def test_child_counts(self, catalog: list[TaxonomyNode]) -> None:
        """Each node reports its direct children."""
        by_id = {n.id: n for n in flatten(assemble_tree(catalog))}

        assert by_id[1].child_count == 2
        assert by_id[2].child_count == 1
        assert by_id[3].child_count == 0
        assert by_id[7].child_count == 0

    def test_depth_limit(self, catalog: list[TaxonomyNode]) -> None:
        """Nodes at the depth limit are not expanded but keep their counts."""
        roots = assemble_tree(catalog, max_depth=2)
        computers = next(c for c in roots[1].children if c.id == 2)

        assert computers.children == []
        assert computers.child_count == 1

    def test_depth_limit_one_returns_bare_roots(self, catalog: list[TaxonomyNode]) -> None:
        """With a limit of one only roots are returned."""
        roots = assemble_tree(catalog, max_depth=1)

        assert all(r.children == [] for r in roots)
        assert roots[1].child_count == 2

    def test_unbounded_depth(self) -> None:
        """Without a limit deep chains are fully expanded."""
        nodes = make_nodes(*[(i, f"Level {i:04d}", i - 1 if i > 1 else None) for i in range(1, 2001)])
        roots = assemble_tree(nodes)

        assert len(flatten(roots)) == 2000

    def test_subtree(self, catalog: list[TaxonomyNode]) -> None:
        """Subtree mode returns only the requested node."""
        subtree = assemble_tree(catalog, root_id=2)

        assert [n.id for n in subtree] == [2]
        assert [c.id for c in subtree[0].children] == [3]

    def test_subtree_unknown_root(self, catalog: list[TaxonomyNode]) -> None:
        """Subtree mode returns nothing for an unknown id."""
        assert assemble_tree(catalog, root_id=999) == []

    def test_orphan_treated_as_root(self) -> None:
        """A node whose parent is missing from the set is a root."""
        roots = assemble_tree(make_nodes((1, "Orphan", 42)))

        assert [r.id for r in roots] == [1]

    def test_empty(self) -> None:
        """No nodes, no roots."""
        assert assemble_tree([]) == []

    def test_stored_cycle_raises(self) -> None:
        """Nodes looping among themselves are reported."""
        nodes = make_nodes((1, "Root", None), (2, "A", 3), (3, "B", 2))

        with pytest.raises(CorruptTreeError) as exc_info:
            assemble_tree(nodes, entity_type="Category")

        assert exc_info.value.details["node_ids"] == [2, 3]

    def test_self_parent_raises(self) -> None:
        """A node that is its own parent is a cycle."""
        with pytest.raises(CorruptTreeError):
            assemble_tree(make_nodes((1, "Loop", 1)))

    def test_subtree_on_cycle_raises(self) -> None:
        """Expanding a subtree that loops back raises instead of hanging."""
        nodes = make_nodes((2, "A", 3), (3, "B", 2))

        with pytest.raises(CorruptTreeError):
            assemble_tree(nodes, root_id=2)

    def test_reassembly_resets_children(self, catalog: list[TaxonomyNode]) -> None:
        """Assembling the same nodes twice gives the same result."""
        assemble_tree(catalog)
        roots = assemble_tree(catalog, max_depth=1)

        assert all(r.children == [] for r in roots)


class FakeChildIndex:
    """Answers child-id lookups from a parent map and records each call."""

    def __init__(self, parents: dict[int, int | None]) -> None:
        self.parents = parents
        self.calls: list[set[int]] = []

    async def __call__(self, parent_ids: set[int]) -> list[int]:
        self.calls.append(set(parent_ids))
        return [node_id for node_id, parent in self.parents.items() if parent in parent_ids]


class TestResolveDescendants:
    """Tests for resolve_descendants."""

    @pytest.fixture
    def chain(self) -> FakeChildIndex:
        """A -> B -> C, plus an unrelated root D."""
        return FakeChildIndex({1: None, 2: 1, 3: 2, 4: None})

    async def test_from_root(self, chain: FakeChildIndex) -> None:
        """Root resolves to the whole chain."""
        assert await resolve_descendants(1, chain) == {1, 2, 3}

    async def test_from_middle(self, chain: FakeChildIndex) -> None:
        """Middle node resolves to itself and below."""
        assert await resolve_descendants(2, chain) == {2, 3}

    async def test_leaf(self, chain: FakeChildIndex) -> None:
        """Leaf resolves to itself."""
        assert await resolve_descendants(3, chain) == {3}

    async def test_one_lookup_per_level(self, chain: FakeChildIndex) -> None:
        """Each level is fetched with one call."""
        await resolve_descendants(1, chain)

        assert chain.calls == [{1}, {2}, {3}]

    async def test_cycle_raises(self) -> None:
        """A child already collected means the parent chain loops."""
        index = FakeChildIndex({1: 3, 2: 1, 3: 2})

        with pytest.raises(CorruptTreeError):
            await resolve_descendants(1, index, entity_type="Search tree node")


class FakeParentIndex:
    """Answers parent lookups from a parent map."""

    def __init__(self, parents: dict[int, int | None]) -> None:
        self.parents = parents

    async def __call__(self, node_id: int) -> int | None:
        return self.parents.get(node_id)


class TestResolveAncestors:
    """Tests for resolve_ancestors."""

    @pytest.fixture
    def chain(self) -> FakeParentIndex:
        """A -> B -> C."""
        return FakeParentIndex({1: None, 2: 1, 3: 2})

    async def test_walks_to_root(self, chain: FakeParentIndex) -> None:
        """Leaf resolves to itself and every ancestor, nearest first."""
        assert await resolve_ancestors(3, chain) == [3, 2, 1]

    async def test_root(self, chain: FakeParentIndex) -> None:
        """Root resolves to itself."""
        assert await resolve_ancestors(1, chain) == [1]

    async def test_stops_at_until(self, chain: FakeParentIndex) -> None:
        """The walk ends at the requested node."""
        assert await resolve_ancestors(3, chain, until=2) == [3, 2]

    async def test_stored_loop_raises(self) -> None:
        """A loop that never reaches ``until`` is corrupt data."""
        index = FakeParentIndex({1: 2, 2: 1, 3: 1})

        with pytest.raises(CorruptTreeError):
            await resolve_ancestors(3, index, until=99)

    async def test_loop_through_until_is_returned(self) -> None:
        """Reaching ``until`` on a loop returns the chain instead of raising."""
        index = FakeParentIndex({1: 2, 2: 1})

        assert await resolve_ancestors(1, index, until=2) == [1, 2]
