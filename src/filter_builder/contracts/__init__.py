"""Contracts package - Pydantic models for the filter builder."""

from filter_builder.contracts.actions import (
    Action,
    AddFilter,
    ApplyPreset,
    ClearAll,
    CreateGroup,
    RemoveFilter,
    ToggleGroupOperator,
    ToggleRootOperator,
    Ungroup,
    UpdateFilter,
)
from filter_builder.contracts.filters import (
    ControlType,
    DateSpec,
    DateType,
    Filter,
    FilterConfig,
    FilterOption,
    FilterPreset,
    FilterState,
    FilterValue,
    Group,
    LogicalOperator,
    Node,
    OperatorSymbol,
)
from filter_builder.contracts.results import GroupCheck, ValidationIssue, ValidationResult

__all__ = [
    # Actions
    "Action",
    "AddFilter",
    "ApplyPreset",
    "ClearAll",
    "CreateGroup",
    "RemoveFilter",
    "ToggleGroupOperator",
    "ToggleRootOperator",
    "Ungroup",
    "UpdateFilter",
    # Filters
    "ControlType",
    "DateSpec",
    "DateType",
    "Filter",
    "FilterConfig",
    "FilterOption",
    "FilterPreset",
    "FilterState",
    "FilterValue",
    "Group",
    "LogicalOperator",
    "Node",
    "OperatorSymbol",
    # Results
    "GroupCheck",
    "ValidationIssue",
    "ValidationResult",
]
