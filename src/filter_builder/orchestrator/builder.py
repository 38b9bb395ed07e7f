"""Filter builder session: a reducer over the pure mutations plus a small stateful wrapper."""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

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
    DateSpec,
    Filter,
    FilterConfig,
    FilterPreset,
    FilterState,
    FilterValue,
    LogicalOperator,
    OperatorSymbol,
)
from filter_builder.contracts.results import GroupCheck, ValidationResult
from filter_builder.engine import mutations
from filter_builder.engine.compiler import compile_state
from filter_builder.engine.depth import can_group
from filter_builder.engine.mutations import IdFactory, empty_state, new_id
from filter_builder.engine.operators import case_variant, initial_operator_for, operators_for_config
from filter_builder.engine.validate import validate
from filter_builder.util.logging import get_logger

logger = get_logger("builder")


def reduce(state: FilterState, action: Action, id_factory: IdFactory = new_id) -> FilterState:
    """Apply one action to ``state`` and return the next state."""
    if isinstance(action, AddFilter):
        return mutations.add_filter(state, action.filter, id_factory)
    if isinstance(action, RemoveFilter):
        return mutations.remove_filter(state, action.filter_id)
    if isinstance(action, UpdateFilter):
        return mutations.update_filter(state, action.filter_id, action.updates)
    if isinstance(action, ToggleRootOperator):
        return mutations.toggle_root_operator(state)
    if isinstance(action, ToggleGroupOperator):
        return mutations.toggle_group_operator(state, action.group_id)
    if isinstance(action, Ungroup):
        return mutations.ungroup_filters(state, action.group_id)
    if isinstance(action, CreateGroup):
        return mutations.create_group(state, action.filter_ids, action.operator, id_factory)
    if isinstance(action, ClearAll):
        return mutations.clear_all(state)
    if isinstance(action, ApplyPreset):
        return mutations.apply_preset(state, action.preset)
    return state


def draft_filter(
    config: FilterConfig,
    value: FilterValue,
    operator: Optional[OperatorSymbol] = None,
    case_sensitive: Optional[bool] = None,
    match_all: bool = False,
    selected_labels: Optional[list[str]] = None,
) -> Filter:
    """Build an id-less filter for a configured property, as an editor would submit it.

    Raises:
        ValueError: if ``operator`` is not offered for the property.
    """
    offered = operators_for_config(config)
    if operator is not None and operator not in offered:
        raise ValueError(
            f"Operator '{OperatorSymbol(operator).value}' is not offered for {config.property_key}"
        )
    chosen = operator if operator is not None else initial_operator_for(config)
    if case_sensitive is not None:
        # Only switch to a `*` twin the property actually offers.
        variant = case_variant(chosen, case_sensitive)
        if variant in offered:
            chosen = variant

    # A date filter inherits the property's date format unless it set its own.
    if (
        isinstance(value, DateSpec)
        and config.date_type is not None
        and "date_type" not in value.model_fields_set
    ):
        value = value.model_copy(update={"date_type": config.date_type})

    return Filter(
        property_key=config.property_key,
        property_label=config.property_label,
        control_type=config.control_type,
        operator=chosen,
        value=value,
        case_sensitive=case_sensitive,
        selected_labels=selected_labels,
        match_all=match_all,
    )


class FilterBuilder:
    """Holds the current filter tree and applies actions one at a time.

    Every dispatch swaps in a new immutable tree and reports it to
    ``on_change``. No history is kept.
    """

    def __init__(
        self,
        filter_options: Optional[list[FilterConfig]] = None,
        presets: Optional[list[FilterPreset]] = None,
        initial_state: Optional[FilterState] = None,
        on_change: Optional[Callable[[FilterState], None]] = None,
        id_factory: IdFactory = new_id,
    ) -> None:
        self.filter_options = list(filter_options or [])
        self.options_by_key = {c.property_key: c for c in self.filter_options}
        self.presets = list(presets or [])
        self.presets_by_label = {p.label: p for p in self.presets}
        self.on_change = on_change
        self.id_factory = id_factory
        self._state = initial_state if initial_state is not None else empty_state()

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def query_string(self) -> str:
        return compile_state(self._state)

    def validate(self) -> ValidationResult:
        return validate(self._state)

    def dispatch(self, action: Action) -> FilterState:
        new_state = reduce(self._state, action, self.id_factory)
        self._state = new_state
        if self.on_change is not None:
            self.on_change(new_state)
        return new_state

    # Convenience wrappers

    def add_filter(self, filter: Filter) -> FilterState:
        return self.dispatch(AddFilter(filter=filter))

    def add_property_filter(self, property_key: str, value: FilterValue, **kwargs: Any) -> FilterState:
        """Add a filter for a configured property (see ``draft_filter`` for kwargs)."""
        config = self.options_by_key.get(property_key)
        if config is None:
            raise ValueError(f"Unknown filter property: {property_key}")
        return self.add_filter(draft_filter(config, value, **kwargs))

    def remove_filter(self, filter_id: str) -> FilterState:
        return self.dispatch(RemoveFilter(filter_id=filter_id))

    def update_filter(self, filter_id: str, updates: dict[str, Any]) -> FilterState:
        return self.dispatch(UpdateFilter(filter_id=filter_id, updates=updates))

    def toggle_root_operator(self) -> FilterState:
        return self.dispatch(ToggleRootOperator())

    def toggle_group_operator(self, group_id: str) -> FilterState:
        return self.dispatch(ToggleGroupOperator(group_id=group_id))

    def ungroup(self, group_id: str) -> FilterState:
        return self.dispatch(Ungroup(group_id=group_id))

    def create_group(
        self, filter_ids: list[str], operator: LogicalOperator = LogicalOperator.AND
    ) -> GroupCheck:
        """Group the selection, or return the rejection without dispatching anything."""
        check = can_group(self._state, filter_ids)
        if not check.can_create:
            logger.info("Group not created: %s", check.reason)
            return check
        self.dispatch(CreateGroup(filter_ids=filter_ids, operator=operator))
        return check

    def clear_all(self) -> FilterState:
        return self.dispatch(ClearAll())

    def apply_preset(self, preset: Union[str, FilterPreset, FilterState]) -> FilterState:
        if isinstance(preset, str):
            found = self.presets_by_label.get(preset)
            if found is None:
                raise ValueError(f"Unknown preset: {preset}")
            preset = found
        if isinstance(preset, FilterPreset):
            preset = preset.filter
        return self.dispatch(ApplyPreset(preset=preset))
