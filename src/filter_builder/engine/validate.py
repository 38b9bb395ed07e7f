"""Structural validation of filter trees.

Validation never blocks a mutation; it only tells the caller whether the
current tree is fit to be compiled and sent. All problems are collected,
each prefixed with the node's path (``children[0].children[2]``).
"""
from __future__ import annotations

from typing import Any, Callable

from filter_builder.contracts.filters import ControlType, DateSpec, Filter, FilterState, Group, Node
from filter_builder.contracts.results import ValidationIssue, ValidationResult, issue
from filter_builder.engine.operators import metadata_of


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


# Value shape expected for each control type
VALUE_SHAPES: dict[ControlType, Callable[[Any], bool]] = {
    ControlType.text: lambda v: isinstance(v, str),
    ControlType.multiselect: _is_string_list,
    ControlType.number: _is_number,
    ControlType.boolean: lambda v: isinstance(v, bool),
    ControlType.date: lambda v: isinstance(v, DateSpec),
}


def _check_filter(node: Filter, path: str, issues: list[ValidationIssue]) -> None:
    if not node.property_key:
        issues.append(issue("missing_property_key", path, "Filter missing propertyKey"))
    if node.operator is None:
        issues.append(issue("missing_operator", path, "Filter missing operator"))
    if node.value is None:
        issues.append(issue("missing_value", path, "Filter missing value"))
        return

    if not VALUE_SHAPES[node.control_type](node.value):
        issues.append(
            issue(
                "value_shape_mismatch",
                path,
                f"Filter value does not match control type '{node.control_type.value}'",
            )
        )
        return

    # Date leaves derive their operator from the date mode.
    if node.operator is not None and node.control_type != ControlType.date:
        meta = metadata_of(node.operator)
        if meta is None or node.control_type not in meta.applies_to:
            issues.append(
                issue(
                    "operator_not_applicable",
                    path,
                    f"Operator '{node.operator.value}' does not apply to "
                    f"{node.control_type.value} filters",
                )
            )

    if node.control_type == ControlType.multiselect and not node.value:
        issues.append(issue("empty_selection", path, "Multiselect filter has no selected values"))

    if node.control_type == ControlType.date:
        if node.value.start_date is None:
            issues.append(issue("missing_start_date", path, "Date filter missing startDate"))
        if node.value.mode == "between" and node.value.end_date is None:
            issues.append(
                issue("missing_end_date", path, "Date filter with 'between' mode missing endDate")
            )


def _check_node(node: Node, path: str, issues: list[ValidationIssue]) -> None:
    if isinstance(node, Filter):
        _check_filter(node, path, issues)
        return

    if isinstance(node, Group):
        if not node.children:
            issues.append(issue("empty_group", path, "Group has no children"))
        for index, child in enumerate(node.children):
            _check_node(child, f"{path}.children[{index}]", issues)


def validate(state: FilterState) -> ValidationResult:
    issues: list[ValidationIssue] = []
    for index, node in enumerate(state.children):
        _check_node(node, f"children[{index}]", issues)
    return ValidationResult.from_issues(issues)
