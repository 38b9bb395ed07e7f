"""Filter engine: operator registry, depth analysis, mutations, validation, compilation."""

from filter_builder.engine.compiler import compile_node, compile_state, format_date
from filter_builder.engine.depth import (
    MAX_NESTING_DEPTH,
    all_node_ids,
    can_add_to_group,
    can_group,
    depth_of,
    find_node,
    group_content_depth,
    max_depth_of,
    nodes_at_depth,
)
from filter_builder.engine.mutations import (
    add_filter,
    add_filter_to_group,
    apply_preset,
    clear_all,
    create_group,
    empty_state,
    move_filter_to_group,
    new_id,
    prune_empty_groups,
    remove_filter,
    reorder_filters,
    toggle_group_operator,
    toggle_root_operator,
    ungroup_filters,
    update_filter,
)
from filter_builder.engine.operators import (
    OPERATORS,
    OperatorMetadata,
    case_variant,
    default_operator_for,
    initial_operator_for,
    label_of,
    metadata_of,
    operators_for,
    operators_for_config,
    supports_case_sensitivity,
)
from filter_builder.engine.validate import validate

__all__ = [
    # Compiler
    "compile_node",
    "compile_state",
    "format_date",
    # Depth
    "MAX_NESTING_DEPTH",
    "all_node_ids",
    "can_add_to_group",
    "can_group",
    "depth_of",
    "find_node",
    "group_content_depth",
    "max_depth_of",
    "nodes_at_depth",
    # Mutations
    "add_filter",
    "add_filter_to_group",
    "apply_preset",
    "clear_all",
    "create_group",
    "empty_state",
    "move_filter_to_group",
    "new_id",
    "prune_empty_groups",
    "remove_filter",
    "reorder_filters",
    "toggle_group_operator",
    "toggle_root_operator",
    "ungroup_filters",
    "update_filter",
    # Operators
    "OPERATORS",
    "OperatorMetadata",
    "case_variant",
    "default_operator_for",
    "initial_operator_for",
    "label_of",
    "metadata_of",
    "operators_for",
    "operators_for_config",
    "supports_case_sensitivity",
    # Validation
    "validate",
]
