from __future__ import annotations

from datetime import datetime

import pytest

from filter_builder.contracts.actions import (
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
    FilterConfig,
    FilterOption,
    FilterPreset,
    FilterState,
    Group,
    LogicalOperator,
    OperatorSymbol,
)
from filter_builder.engine import mutations
from filter_builder.orchestrator.builder import FilterBuilder, draft_filter, reduce
from filter_builder_validation.stubs import SequentialIds, state, text_filter


@pytest.fixture()
def options() -> list[FilterConfig]:
    return [
        FilterConfig(property_key="title", property_label="Title", control_type=ControlType.text),
        FilterConfig(
            property_key="status",
            property_label="Status",
            control_type=ControlType.multiselect,
            options=[
                FilterOption(value="open", label="Open"),
                FilterOption(value="in-progress", label="In Progress"),
            ],
        ),
        FilterConfig(
            property_key="updatedAt",
            property_label="Updated",
            control_type=ControlType.date,
            date_type=DateType.datetime_utc,
        ),
        FilterConfig(property_key="priority", property_label="Priority", control_type=ControlType.number),
    ]


@pytest.fixture()
def urgent_preset() -> FilterPreset:
    return FilterPreset(
        label="Urgent Bugs",
        filter=state(
            text_filter("p1", key="labels", value="bug"),
            text_filter("p2", key="priority", value="urgent"),
        ),
    )


@pytest.fixture()
def builder(options: list[FilterConfig], urgent_preset: FilterPreset, ids: SequentialIds) -> FilterBuilder:
    return FilterBuilder(filter_options=options, presets=[urgent_preset], id_factory=ids)


def test_reduce_matches_pure_functions(flat_state: FilterState) -> None:
    cases = [
        (RemoveFilter(filter_id="b"), mutations.remove_filter(flat_state, "b")),
        (UpdateFilter(filter_id="a", updates={"value": "Janet"}), mutations.update_filter(flat_state, "a", {"value": "Janet"})),
        (ToggleRootOperator(), mutations.toggle_root_operator(flat_state)),
        (ClearAll(), mutations.empty_state()),
    ]
    for action, expected in cases:
        assert reduce(flat_state, action) == expected


def test_reduce_group_actions(flat_state: FilterState) -> None:
    grouped = reduce(
        flat_state,
        CreateGroup(filter_ids=["a", "b"], operator=LogicalOperator.OR),
        id_factory=SequentialIds("grp"),
    )
    assert [n.id for n in grouped.children] == ["grp-1", "c"]

    toggled = reduce(grouped, ToggleGroupOperator(group_id="grp-1"))
    assert toggled.children[0].logical_operator == LogicalOperator.AND

    ungrouped = reduce(toggled, Ungroup(group_id="grp-1"))
    assert [n.id for n in ungrouped.children] == ["a", "b", "c"]


def test_reduce_add_and_preset(flat_state: FilterState, nested_state: FilterState) -> None:
    added = reduce(FilterState(), AddFilter(filter=text_filter("a")))
    assert [n.id for n in added.children] == ["a"]
    assert reduce(flat_state, ApplyPreset(preset=nested_state)) == nested_state


def test_actions_parse_from_documents() -> None:
    from pydantic import TypeAdapter

    from filter_builder.contracts.actions import Action

    adapter = TypeAdapter(Action)
    action = adapter.validate_python({"type": "UNGROUP", "group_id": "g1"})
    assert isinstance(action, Ungroup)


def test_actions_accept_camel_case_keys(flat_state: FilterState) -> None:
    from pydantic import TypeAdapter

    from filter_builder.contracts.actions import Action

    adapter = TypeAdapter(Action)
    group = adapter.validate_python(
        {"type": "CREATE_GROUP", "filterIds": ["a", "b"], "operator": "OR"}
    )
    assert isinstance(group, CreateGroup)
    assert group.filter_ids == ["a", "b"]

    removal = adapter.validate_json('{"type": "REMOVE_FILTER", "filterId": "c"}')
    assert reduce(flat_state, removal) == mutations.remove_filter(flat_state, "c")

    toggle = adapter.validate_python({"type": "TOGGLE_GROUP_OPERATOR", "groupId": "g1"})
    assert toggle.group_id == "g1"
    assert toggle.model_dump(by_alias=True) == {"type": "TOGGLE_GROUP_OPERATOR", "groupId": "g1"}


def test_dispatch_notifies_on_change(flat_state: FilterState) -> None:
    seen: list[FilterState] = []
    b = FilterBuilder(initial_state=flat_state, on_change=seen.append)

    b.toggle_root_operator()
    b.remove_filter("c")

    assert len(seen) == 2
    assert seen[-1] is b.state
    assert b.query_string == "firstName == Jane || lastName == Doe"


def test_add_property_filter_uses_config_defaults(builder: FilterBuilder) -> None:
    builder.add_property_filter("title", "rust lang")
    node = builder.state.children[0]

    assert node.id == "gen-1"
    assert node.property_label == "Title"
    assert node.operator == OperatorSymbol.CONTAINS
    assert builder.query_string == 'title @= "rust lang"'


def test_add_property_filter_case_insensitive(builder: FilterBuilder) -> None:
    builder.add_property_filter("title", "rust", operator=OperatorSymbol.STARTS_WITH, case_sensitive=False)
    assert builder.query_string == "title _=* rust"


def test_add_property_filter_multiselect(builder: FilterBuilder) -> None:
    builder.add_property_filter(
        "status", ["open", "in-progress"], match_all=True, selected_labels=["Open", "In Progress"]
    )
    assert builder.query_string == "status %^^ [open, in-progress]"


def test_date_filter_inherits_config_date_type(builder: FilterBuilder) -> None:
    builder.add_property_filter("updatedAt", DateSpec(mode="on", start_date=datetime(2024, 2, 3, 4, 5, 6)))
    spec = builder.state.children[0].value
    assert spec.date_type == DateType.datetime_utc


def test_date_filter_keeps_explicit_date_type(options: list[FilterConfig]) -> None:
    node = draft_filter(
        options[2], DateSpec(mode="on", start_date=datetime(2024, 2, 3), date_type=DateType.date)
    )
    assert node.value.date_type == DateType.date


def test_unknown_property_and_operator(builder: FilterBuilder, options: list[FilterConfig]) -> None:
    with pytest.raises(ValueError):
        builder.add_property_filter("nope", "x")
    with pytest.raises(ValueError):
        draft_filter(options[3], 3, operator=OperatorSymbol.CONTAINS)


def test_case_insensitive_request_keeps_operator_valid_for_control_type(
    options: list[FilterConfig],
) -> None:
    number = draft_filter(options[3], 5, case_sensitive=False)
    assert number.operator == OperatorSymbol.EQUALS
    assert number.case_sensitive is False

    date = draft_filter(options[2], DateSpec(mode="on", start_date=datetime(2024, 2, 3)), case_sensitive=False)
    assert date.operator == OperatorSymbol.EQUALS

    b = FilterBuilder(filter_options=options)
    b.add_property_filter("priority", 5, case_sensitive=False)
    assert b.validate().valid is True
    assert b.query_string == "priority == 5"


def test_case_variant_must_be_offered_by_the_property() -> None:
    narrowed = FilterConfig(
        property_key="title",
        property_label="Title",
        control_type=ControlType.text,
        operators=[OperatorSymbol.EQUALS, OperatorSymbol.STARTS_WITH],
    )
    node = draft_filter(narrowed, "rust", operator=OperatorSymbol.STARTS_WITH, case_sensitive=False)
    assert node.operator == OperatorSymbol.STARTS_WITH


def test_create_group_returns_rejection_without_dispatch(builder: FilterBuilder) -> None:
    seen: list[FilterState] = []
    builder.on_change = seen.append
    builder.add_property_filter("title", "a")

    check = builder.create_group(["gen-1"])
    assert check.can_create is False
    assert check.reason == "Need at least 2 filters to create a group"
    assert len(seen) == 1


def test_create_group_and_ungroup(builder: FilterBuilder) -> None:
    builder.add_property_filter("title", "a")
    builder.add_property_filter("priority", 3, operator=OperatorSymbol.GREATER_THAN)

    check = builder.create_group(["gen-1", "gen-2"], LogicalOperator.OR)
    assert check.can_create is True
    assert isinstance(builder.state.children[0], Group)
    assert builder.query_string == "(title @= a || priority > 3)"

    builder.ungroup("gen-3")
    assert builder.query_string == "title @= a && priority > 3"


def test_apply_preset_by_label(builder: FilterBuilder, urgent_preset: FilterPreset) -> None:
    builder.add_property_filter("title", "a")
    builder.apply_preset("Urgent Bugs")
    assert builder.state == urgent_preset.filter

    with pytest.raises(ValueError):
        builder.apply_preset("Missing")


def test_validate_current_state(builder: FilterBuilder) -> None:
    builder.add_property_filter("status", [])
    result = builder.validate()
    assert result.valid is False

    builder.clear_all()
    assert builder.validate().valid is True
    assert builder.query_string == ""
