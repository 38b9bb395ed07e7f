"""Nesting-depth analysis over a filter tree.

Depth counts enclosing groups: the root's direct children are at depth 0,
the children of a root-level group at depth 1, and so on. ``max_depth_of``
reports the deepest group nesting, so a tree whose groups are nested three
levels deep has a maximum depth of 3.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from filter_builder.contracts.filters import FilterState, Group, Node
from filter_builder.contracts.results import GroupCheck

# 0 = root level
# 1 = first level group
# 2 = group inside group
# 3 = group inside group inside group (max)
MAX_NESTING_DEPTH = 3


def iter_nodes(children: Sequence[Node], depth: int = 0) -> Iterator[tuple[Node, int]]:
    """Depth-first, pre-order walk yielding ``(node, depth)``."""
    for node in children:
        yield node, depth
        if isinstance(node, Group):
            yield from iter_nodes(node.children, depth + 1)


def find_node(state: FilterState, node_id: str) -> Optional[Node]:
    for node, _ in iter_nodes(state.children):
        if node.id == node_id:
            return node
    return None


def depth_of(state: FilterState, node_id: str) -> Optional[int]:
    for node, depth in iter_nodes(state.children):
        if node.id == node_id:
            return depth
    return None


def _nesting(children: Sequence[Node], depth: int) -> int:
    deepest = depth
    for node in children:
        if isinstance(node, Group):
            deepest = max(deepest, _nesting(node.children, depth + 1))
    return deepest


def max_depth_of(state: FilterState) -> int:
    return _nesting(state.children, 0)


def group_content_depth(group: Group) -> int:
    """How deeply groups are nested inside ``group`` (0 when it holds only leaves)."""
    return _nesting(group.children, 0)


def _added_depth(items: Iterable[Node]) -> int:
    # A group item adds its own level plus whatever it already nests.
    return max(
        [0] + [1 + group_content_depth(item) for item in items if isinstance(item, Group)]
    )


def can_add_to_group(
    state: FilterState, group_id: Optional[str], items: Sequence[Node]
) -> bool:
    """Whether ``items`` can be placed in a group (``None`` = root) without exceeding the max depth."""
    if group_id is None:
        base = 0
    else:
        target = find_node(state, group_id)
        if not isinstance(target, Group):
            return False
        base = depth_of(state, group_id) + 1

    return base + _added_depth(items) <= MAX_NESTING_DEPTH


def can_group(state: FilterState, node_ids: Sequence[str]) -> GroupCheck:
    """Check whether the selected sibling nodes can be wrapped in a new group.

    Advisory only: nothing is mutated. ``create_group`` runs this before
    committing and refuses when it fails.
    """
    ids = list(dict.fromkeys(node_ids))
    if len(ids) < 2:
        return GroupCheck.rejected("Need at least 2 filters to create a group")

    items = [find_node(state, node_id) for node_id in ids]
    if any(item is None for item in items):
        return GroupCheck.rejected("Some filters not found")

    depths = {depth_of(state, node_id) for node_id in ids}
    if len(depths) > 1:
        return GroupCheck.rejected("Cannot group filters from different nesting levels")

    current_depth = depths.pop()
    if current_depth is None:
        return GroupCheck.rejected("Could not determine filter depth")

    # The new group sits at current_depth and nests one level for its children.
    resulting_depth = current_depth + 1 + _added_depth(items)
    if resulting_depth > MAX_NESTING_DEPTH:
        return GroupCheck.rejected(
            f"Creating this group would exceed maximum nesting depth of {MAX_NESTING_DEPTH}"
        )

    return GroupCheck.allowed()


def nodes_at_depth(state: FilterState, depth: int) -> list[Node]:
    return [node for node, d in iter_nodes(state.children) if d == depth]


def all_node_ids(state: FilterState) -> list[str]:
    """Every node id in the tree, pre-order, groups included."""
    return [node.id for node, _ in iter_nodes(state.children)]
