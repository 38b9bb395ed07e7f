from __future__ import annotations

from datetime import datetime
from typing import Optional

from filter_builder.contracts.filters import (
    ControlType,
    DateSpec,
    DateType,
    Filter,
    FilterState,
    Group,
    LogicalOperator,
    Node,
    OperatorSymbol,
)


class SequentialIds:
    """Deterministic id factory: gen-1, gen-2, ..."""

    def __init__(self, prefix: str = "gen") -> None:
        self.prefix = prefix
        self.issued: list[str] = []

    def __call__(self) -> str:
        new = f"{self.prefix}-{len(self.issued) + 1}"
        self.issued.append(new)
        return new


def text_filter(
    id: str,
    key: str = "firstName",
    value: str = "Jane",
    operator: OperatorSymbol = OperatorSymbol.EQUALS,
) -> Filter:
    return Filter(
        id=id,
        property_key=key,
        property_label=key,
        control_type=ControlType.text,
        operator=operator,
        value=value,
    )


def multiselect_filter(
    id: str,
    key: str = "labels",
    values: Optional[list[str]] = None,
    operator: OperatorSymbol = OperatorSymbol.IN,
    match_all: bool = False,
) -> Filter:
    return Filter(
        id=id,
        property_key=key,
        property_label=key,
        control_type=ControlType.multiselect,
        operator=operator,
        value=["bug", "urgent"] if values is None else values,
        match_all=match_all,
    )


def number_filter(
    id: str,
    key: str = "age",
    value: float = 18,
    operator: OperatorSymbol = OperatorSymbol.GREATER_THAN_OR_EQUAL,
) -> Filter:
    return Filter(
        id=id,
        property_key=key,
        property_label=key,
        control_type=ControlType.number,
        operator=operator,
        value=value,
    )


def boolean_filter(id: str, key: str = "isActive", value: bool = True) -> Filter:
    return Filter(
        id=id,
        property_key=key,
        property_label=key,
        control_type=ControlType.boolean,
        operator=OperatorSymbol.EQUALS,
        value=value,
    )


def date_filter(
    id: str,
    mode: str,
    start: Optional[datetime],
    end: Optional[datetime] = None,
    exclude: bool = False,
    date_type: DateType = DateType.date,
    key: str = "createdAt",
) -> Filter:
    return Filter(
        id=id,
        property_key=key,
        property_label=key,
        control_type=ControlType.date,
        operator=OperatorSymbol.EQUALS,
        value=DateSpec(
            mode=mode, start_date=start, end_date=end, exclude=exclude, date_type=date_type
        ),
    )


def group(id: str, *children: Node, operator: LogicalOperator = LogicalOperator.AND) -> Group:
    return Group(id=id, children=children, logical_operator=operator)


def state(*children: Node, operator: LogicalOperator = LogicalOperator.AND) -> FilterState:
    return FilterState(children=children, root_logical_operator=operator)


def leaf_ids(s: FilterState) -> list[str]:
    ids: list[str] = []

    def walk(nodes) -> None:
        for node in nodes:
            if isinstance(node, Group):
                walk(node.children)
            else:
                ids.append(node.id)

    walk(s.children)
    return ids
