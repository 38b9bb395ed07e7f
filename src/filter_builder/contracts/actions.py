"""Reducer actions understood by the filter builder session."""
from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from filter_builder.contracts.filters import Filter, FilterState, LogicalOperator


class _Action(BaseModel):
    # Same key convention as the filter documents: camelCase or snake_case.
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class AddFilter(_Action):
    type: Literal["ADD_FILTER"] = "ADD_FILTER"
    filter: Filter


class RemoveFilter(_Action):
    type: Literal["REMOVE_FILTER"] = "REMOVE_FILTER"
    filter_id: str


class UpdateFilter(_Action):
    type: Literal["UPDATE_FILTER"] = "UPDATE_FILTER"
    filter_id: str
    updates: dict[str, Any] = Field(default_factory=dict)


class ToggleRootOperator(_Action):
    type: Literal["TOGGLE_ROOT_OPERATOR"] = "TOGGLE_ROOT_OPERATOR"


class ToggleGroupOperator(_Action):
    type: Literal["TOGGLE_GROUP_OPERATOR"] = "TOGGLE_GROUP_OPERATOR"
    group_id: str


class Ungroup(_Action):
    type: Literal["UNGROUP"] = "UNGROUP"
    group_id: str


class CreateGroup(_Action):
    type: Literal["CREATE_GROUP"] = "CREATE_GROUP"
    filter_ids: list[str]
    operator: LogicalOperator = LogicalOperator.AND


class ClearAll(_Action):
    type: Literal["CLEAR_ALL"] = "CLEAR_ALL"


class ApplyPreset(_Action):
    type: Literal["APPLY_PRESET"] = "APPLY_PRESET"
    preset: FilterState


Action = Annotated[
    Union[
        AddFilter,
        RemoveFilter,
        UpdateFilter,
        ToggleRootOperator,
        ToggleGroupOperator,
        Ungroup,
        CreateGroup,
        ClearAll,
        ApplyPreset,
    ],
    Field(discriminator="type"),
]
