"""Pure tree transformations for filter state.

Every function takes the current ``FilterState`` and returns a new one; the
input is never modified. Only the ancestors of the touched node are rebuilt,
unchanged subtrees are shared with the previous tree. Unknown ids and ids of
the wrong node kind are no-ops that return the input state itself.
"""
from __future__ import annotations

import uuid
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError

from filter_builder.contracts.filters import (
    Filter,
    FilterPreset,
    FilterState,
    Group,
    LogicalOperator,
    Node,
)
from filter_builder.engine.depth import can_add_to_group, can_group
from filter_builder.util.logging import get_logger

logger = get_logger("mutations")

IdFactory = Callable[[], str]
Children = tuple[Node, ...]
Path = tuple[int, ...]

# Patches may use either the Python field names or their camelCase aliases.
_FIELD_BY_KEY = {
    **{name: name for name in Filter.model_fields},
    **{field.alias: name for name, field in Filter.model_fields.items() if field.alias},
}
_PROTECTED_FIELDS = {"id", "kind"}


def new_id() -> str:
    return str(uuid.uuid4())


def empty_state() -> FilterState:
    return FilterState(children=(), root_logical_operator=LogicalOperator.AND)


# Path helpers


def _locate(children: Children, node_id: str) -> Optional[Path]:
    for index, node in enumerate(children):
        if node.id == node_id:
            return (index,)
        if isinstance(node, Group):
            sub = _locate(node.children, node_id)
            if sub is not None:
                return (index,) + sub
    return None


def _node_at(children: Children, path: Path) -> Node:
    node = children[path[0]]
    for index in path[1:]:
        node = node.children[index]
    return node


def _splice(children: Children, path: Path, replace: Callable[[Node], Children]) -> Children:
    """Rebuild ``children`` with the node at ``path`` swapped for ``replace(node)``.

    ``replace`` returns zero nodes (removal), one (replacement) or several
    (splice). Only the groups along ``path`` are copied.
    """
    index, rest = path[0], path[1:]
    if not rest:
        return children[:index] + tuple(replace(children[index])) + children[index + 1 :]
    parent = children[index]
    rebuilt = parent.model_copy(update={"children": _splice(parent.children, rest, replace)})
    return children[:index] + (rebuilt,) + children[index + 1 :]


def _with_children(
    state: FilterState, parent_path: Path, rewrite: Callable[[Children], Children]
) -> FilterState:
    """Apply ``rewrite`` to the child collection owned by ``parent_path`` (``()`` = root)."""
    if not parent_path:
        return state.model_copy(update={"children": rewrite(state.children)})

    def rewrite_group(group: Node) -> Children:
        return (group.model_copy(update={"children": rewrite(group.children)}),)

    return state.model_copy(update={"children": _splice(state.children, parent_path, rewrite_group)})


def _flip(operator: LogicalOperator) -> LogicalOperator:
    return LogicalOperator.OR if operator == LogicalOperator.AND else LogicalOperator.AND


def _with_id(node: Filter, id_factory: IdFactory) -> Filter:
    if node.id:
        return node
    return node.model_copy(update={"id": id_factory()})


# Operations


def add_filter(state: FilterState, filter: Filter, id_factory: IdFactory = new_id) -> FilterState:
    """Append a filter to the root level, assigning an id when it has none."""
    node = _with_id(filter, id_factory)
    if _locate(state.children, node.id) is not None:
        logger.warning("add_filter ignored: id %s already present", node.id)
        return state
    return state.model_copy(update={"children": state.children + (node,)})


def add_filter_to_group(
    state: FilterState, group_id: str, filter: Filter, id_factory: IdFactory = new_id
) -> FilterState:
    path = _locate(state.children, group_id)
    if path is None or not isinstance(_node_at(state.children, path), Group):
        logger.debug("add_filter_to_group ignored: no group %s", group_id)
        return state

    node = _with_id(filter, id_factory)
    if _locate(state.children, node.id) is not None:
        logger.warning("add_filter_to_group ignored: id %s already present", node.id)
        return state
    return _with_children(state, path, lambda children: children + (node,))


def remove_filter(state: FilterState, node_id: str) -> FilterState:
    """Remove a node at any depth. Parent groups are kept even if left empty."""
    path = _locate(state.children, node_id)
    if path is None:
        logger.debug("remove_filter ignored: no node %s", node_id)
        return state
    return state.model_copy(update={"children": _splice(state.children, path, lambda _: ())})


def update_filter(
    state: FilterState,
    filter_id: str,
    patch: Union[Mapping[str, Any], BaseModel],
) -> FilterState:
    """Merge ``patch`` into the leaf ``filter_id``; groups and unknown ids are left alone."""
    path = _locate(state.children, filter_id)
    if path is None:
        logger.debug("update_filter ignored: no node %s", filter_id)
        return state
    target = _node_at(state.children, path)
    if not isinstance(target, Filter):
        logger.debug("update_filter ignored: %s is a group", filter_id)
        return state

    if isinstance(patch, BaseModel):
        patch = patch.model_dump(exclude_unset=True)

    updates = {}
    for key, value in patch.items():
        name = _FIELD_BY_KEY.get(key)
        if name is None or name in _PROTECTED_FIELDS:
            continue
        updates[name] = value

    try:
        updated = Filter.model_validate({**target.model_dump(), **updates})
    except ValidationError as e:
        logger.warning("update_filter ignored: invalid patch for %s: %s", filter_id, e)
        return state

    return state.model_copy(
        update={"children": _splice(state.children, path, lambda _: (updated,))}
    )


def create_group(
    state: FilterState,
    node_ids: Sequence[str],
    operator: LogicalOperator = LogicalOperator.AND,
    id_factory: IdFactory = new_id,
) -> FilterState:
    """Wrap sibling nodes in a new group placed where the first of them stood.

    The selection must pass ``can_group`` and share one parent collection;
    otherwise the state is returned unchanged.
    """
    check = can_group(state, node_ids)
    if not check.can_create:
        logger.warning("create_group refused: %s", check.reason)
        return state

    selected = set(node_ids)
    paths = [_locate(state.children, node_id) for node_id in dict.fromkeys(node_ids)]
    parent_path = paths[0][:-1]
    if any(path[:-1] != parent_path for path in paths):
        logger.warning("create_group refused: selection does not share a parent")
        return state

    def regroup(children: Children) -> Children:
        picked = tuple(node for node in children if node.id in selected)
        group = Group(id=id_factory(), children=picked, logical_operator=operator)
        result: list[Node] = []
        for node in children:
            if node.id not in selected:
                result.append(node)
            elif node is picked[0]:
                result.append(group)
        return tuple(result)

    return _with_children(state, parent_path, regroup)


def ungroup_filters(state: FilterState, group_id: str) -> FilterState:
    """Promote a group's children one level up, into the group's former position."""
    path = _locate(state.children, group_id)
    if path is None or not isinstance(_node_at(state.children, path), Group):
        logger.debug("ungroup_filters ignored: no group %s", group_id)
        return state
    return state.model_copy(
        update={"children": _splice(state.children, path, lambda group: group.children)}
    )


def toggle_root_operator(state: FilterState) -> FilterState:
    return state.model_copy(update={"root_logical_operator": _flip(state.root_logical_operator)})


def toggle_group_operator(state: FilterState, group_id: str) -> FilterState:
    path = _locate(state.children, group_id)
    if path is None or not isinstance(_node_at(state.children, path), Group):
        logger.debug("toggle_group_operator ignored: no group %s", group_id)
        return state

    def flip(group: Node) -> Children:
        return (group.model_copy(update={"logical_operator": _flip(group.logical_operator)}),)

    return state.model_copy(update={"children": _splice(state.children, path, flip)})


def apply_preset(state: FilterState, preset: Union[FilterState, FilterPreset]) -> FilterState:
    """Replace the whole tree with a preset; nothing of ``state`` is kept."""
    if isinstance(preset, FilterPreset):
        return preset.filter
    return preset


def clear_all(state: FilterState) -> FilterState:
    return empty_state()


def reorder_filters(state: FilterState, start_index: int, end_index: int) -> FilterState:
    """Move the root-level node at ``start_index`` to ``end_index``."""
    size = len(state.children)
    if not (0 <= start_index < size and 0 <= end_index < size):
        logger.debug("reorder_filters ignored: %s -> %s out of range", start_index, end_index)
        return state

    children = list(state.children)
    moved = children.pop(start_index)
    children.insert(end_index, moved)
    return state.model_copy(update={"children": tuple(children)})


def move_filter_to_group(
    state: FilterState, filter_id: str, target_group_id: Optional[str]
) -> FilterState:
    """Move a leaf into another group, or to the root when ``target_group_id`` is None."""
    path = _locate(state.children, filter_id)
    if path is None:
        return state
    node = _node_at(state.children, path)
    if not isinstance(node, Filter):
        logger.debug("move_filter_to_group ignored: %s is a group", filter_id)
        return state
    if not can_add_to_group(state, target_group_id, [node]):
        logger.debug("move_filter_to_group ignored: cannot place %s in %s", filter_id, target_group_id)
        return state

    remaining = remove_filter(state, filter_id)
    if target_group_id is None:
        return remaining.model_copy(update={"children": remaining.children + (node,)})
    return add_filter_to_group(remaining, target_group_id, node)


def _prune(children: Children) -> Children:
    kept: list[Node] = []
    for node in children:
        if isinstance(node, Group):
            pruned = _prune(node.children)
            if not pruned:
                continue
            if pruned != node.children:
                node = node.model_copy(update={"children": pruned})
        kept.append(node)
    return tuple(kept)


def prune_empty_groups(state: FilterState) -> FilterState:
    """Drop groups left without children (recursively), e.g. before persisting."""
    pruned = _prune(state.children)
    if pruned == state.children:
        return state
    return state.model_copy(update={"children": pruned})
