"""Compile a filter tree into a QueryKit filter string.

    firstName == "Jane Doe" && (age >= 18 || labels %^^ [bug, urgent])

The root joins its children without parentheses; every group is wrapped in
parentheses. Leaves render per control type, dates pick their operator from
the date mode rather than the stored operator. Values are quoted only when
they contain a space; embedded quotes and brackets are emitted verbatim.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from filter_builder.contracts.filters import (
    ControlType,
    DateSpec,
    DateType,
    Filter,
    FilterState,
    Group,
    LogicalOperator,
    Node,
)
from filter_builder.engine.operators import default_operator_for

JOINERS = {
    LogicalOperator.AND: " && ",
    LogicalOperator.OR: " || ",
}


def _join(parts: list[str], operator: LogicalOperator) -> str:
    return JOINERS[operator].join(part for part in parts if part)


def compile_state(state: FilterState) -> str:
    parts = [part for part in (compile_node(child) for child in state.children) if part]
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return _join(parts, state.root_logical_operator)


def compile_node(node: Node) -> str:
    if isinstance(node, Filter):
        return _compile_filter(node)
    if isinstance(node, Group):
        return _compile_group(node)
    raise TypeError(f"Unknown filter node: {node!r}")


def _compile_group(group: Group) -> str:
    parts = [part for part in (compile_node(child) for child in group.children) if part]
    if not parts:
        return ""
    return "(" + _join(parts, group.logical_operator) + ")"


# Leaves


def _quote(value: str) -> str:
    return f'"{value}"' if " " in value else value


def _operator_token(node: Filter) -> str:
    operator = node.operator if node.operator is not None else default_operator_for(node.control_type)
    return operator.value


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _compile_text(node: Filter) -> str:
    if not isinstance(node.value, str):
        return ""
    return f"{node.property_key} {_operator_token(node)} {_quote(node.value)}"


def _compile_multiselect(node: Filter) -> str:
    if not isinstance(node.value, list) or not node.value:
        return ""
    values = ", ".join(_quote(str(v)) for v in node.value)
    # `%` prefix = every listed value must match
    operator = "%" + _operator_token(node) if node.match_all else _operator_token(node)
    return f"{node.property_key} {operator} [{values}]"


def _compile_number(node: Filter) -> str:
    if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
        return ""
    return f"{node.property_key} {_operator_token(node)} {_format_number(node.value)}"


def _compile_boolean(node: Filter) -> str:
    if not isinstance(node.value, bool):
        return ""
    literal = "true" if node.value else "false"
    return f"{node.property_key} {_operator_token(node)} {literal}"


def _utc_offset(value: datetime) -> str:
    """``±HH:mm`` offset of an aware datetime."""
    minutes = int(value.utcoffset().total_seconds() // 60)
    sign = "+" if minutes >= 0 else "-"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def _wall_clock(value: datetime) -> str:
    return value.replace(microsecond=0, tzinfo=None).isoformat()


def format_date(value: datetime, date_type: DateType = DateType.date) -> str:
    """ISO-8601 literal for a date filter.

    Naive datetimes are local wall-clock time; aware ones keep their own zone
    except for ``datetimeUtc``, which is always converted to UTC.
    """
    if date_type == DateType.datetime:
        return _wall_clock(value)
    if date_type == DateType.datetime_utc:
        return _wall_clock(value.astimezone(timezone.utc)) + "Z"
    if date_type == DateType.datetime_offset:
        local = value if value.tzinfo is not None else value.astimezone()
        return _wall_clock(local) + _utc_offset(local)
    return value.date().isoformat()


def _compile_date(node: Filter) -> str:
    spec = node.value
    if not isinstance(spec, DateSpec) or spec.start_date is None:
        return ""

    key = node.property_key
    start = format_date(spec.start_date, spec.date_type)

    if spec.mode == "before":
        return f'{key} < "{start}"'
    if spec.mode == "after":
        return f'{key} > "{start}"'
    if spec.mode == "on":
        return f'{key} == "{start}"'
    if spec.mode == "excluding":
        return f'{key} != "{start}"'

    # between
    if spec.end_date is None:
        return f'({key} >= "{start}")'
    end = format_date(spec.end_date, spec.date_type)
    if spec.exclude:
        return f'({key} < "{start}" || {key} > "{end}")'
    return f'({key} >= "{start}" && {key} <= "{end}")'


_LEAF_COMPILERS: dict[ControlType, Callable[[Filter], str]] = {
    ControlType.text: _compile_text,
    ControlType.multiselect: _compile_multiselect,
    ControlType.number: _compile_number,
    ControlType.boolean: _compile_boolean,
    ControlType.date: _compile_date,
}


def _compile_filter(node: Filter) -> str:
    return _LEAF_COMPILERS[node.control_type](node)
