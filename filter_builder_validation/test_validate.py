from __future__ import annotations

from datetime import datetime

from filter_builder.contracts.filters import ControlType, Filter, FilterState, OperatorSymbol
from filter_builder.engine.validate import validate
from filter_builder_validation.stubs import (
    boolean_filter,
    date_filter,
    group,
    multiselect_filter,
    number_filter,
    state,
    text_filter,
)


def test_valid_tree(nested_state: FilterState) -> None:
    result = validate(nested_state)
    assert result.valid is True
    assert result.errors == []


def test_empty_state_is_valid() -> None:
    assert validate(FilterState()).valid is True


def test_mixed_control_types_are_valid() -> None:
    s = state(
        text_filter("t"),
        multiselect_filter("m"),
        number_filter("n"),
        boolean_filter("b"),
        date_filter("d", "on", datetime(2024, 1, 1)),
    )
    assert validate(s).valid is True


def test_missing_fields_are_all_reported() -> None:
    bare = Filter(id="x", control_type=ControlType.text)
    result = validate(state(bare))
    assert result.valid is False
    assert result.errors == [
        "children[0]: Filter missing propertyKey",
        "children[0]: Filter missing operator",
        "children[0]: Filter missing value",
    ]


def test_empty_multiselect() -> None:
    result = validate(state(multiselect_filter("m", values=[])))
    assert result.errors == ["children[0]: Multiselect filter has no selected values"]


def test_date_problems() -> None:
    result = validate(
        state(
            date_filter("d1", "before", None),
            date_filter("d2", "between", datetime(2024, 1, 1)),
        )
    )
    assert result.errors == [
        "children[0]: Date filter missing startDate",
        "children[1]: Date filter with 'between' mode missing endDate",
    ]


def test_empty_group_path_is_qualified() -> None:
    s = state(text_filter("a"), group("g1", text_filter("b"), group("g2")))
    result = validate(s)
    assert result.valid is False
    assert result.errors == ["children[1].children[1]: Group has no children"]
    assert result.issues[0].code == "empty_group"


def test_nested_leaf_path() -> None:
    s = state(group("g1", text_filter("b"), multiselect_filter("m", values=[])))
    assert validate(s).errors == ["children[0].children[1]: Multiselect filter has no selected values"]


def test_value_shape_mismatch() -> None:
    wrong = Filter(
        id="n",
        property_key="age",
        control_type=ControlType.number,
        operator=OperatorSymbol.EQUALS,
        value="eighteen",
    )
    result = validate(state(wrong))
    assert result.errors == ["children[0]: Filter value does not match control type 'number'"]


def test_boolean_is_not_a_number() -> None:
    wrong = Filter(
        id="n",
        property_key="age",
        control_type=ControlType.number,
        operator=OperatorSymbol.EQUALS,
        value=True,
    )
    assert validate(state(wrong)).valid is False


def test_operator_not_applicable() -> None:
    result = validate(state(text_filter("t", operator=OperatorSymbol.GREATER_THAN)))
    assert result.errors == ["children[0]: Operator '>' does not apply to text filters"]


def test_date_operator_is_not_checked() -> None:
    # Date leaves carry `==` by default; the mode decides the rendered operator.
    assert validate(state(date_filter("d", "after", datetime(2024, 5, 1)))).valid is True
