"""Boolean expression tree for filter definitions.

Leaves (``Filter``) and branches (``Group``) both carry an explicit ``kind``
tag; the tree is always classified on that tag. All models are frozen:
mutations live in ``filter_builder.engine.mutations`` and return new trees.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ControlType(str, Enum):
    text = "text"
    multiselect = "multiselect"
    date = "date"
    number = "number"
    boolean = "boolean"


class OperatorSymbol(str, Enum):
    # Equality
    EQUALS = "=="
    NOT_EQUALS = "!="
    EQUALS_CASE_INSENSITIVE = "==*"
    NOT_EQUALS_CASE_INSENSITIVE = "!=*"
    # Comparison
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN_OR_EQUAL = "<="
    # String
    STARTS_WITH = "_="
    STARTS_WITH_CASE_INSENSITIVE = "_=*"
    NOT_STARTS_WITH = "!_="
    NOT_STARTS_WITH_CASE_INSENSITIVE = "!_=*"
    ENDS_WITH = "_-="
    ENDS_WITH_CASE_INSENSITIVE = "_-=*"
    NOT_ENDS_WITH = "!_-="
    NOT_ENDS_WITH_CASE_INSENSITIVE = "!_-=*"
    CONTAINS = "@="
    CONTAINS_CASE_INSENSITIVE = "@=*"
    NOT_CONTAINS = "!@="
    NOT_CONTAINS_CASE_INSENSITIVE = "!@=*"
    # Phonetic
    SOUNDS_LIKE = "~~"
    NOT_SOUNDS_LIKE = "!~"
    # Existence
    HAS = "^$"
    HAS_CASE_INSENSITIVE = "^$*"
    NOT_HAS = "!^$"
    NOT_HAS_CASE_INSENSITIVE = "!^$*"
    # Collection
    IN = "^^"
    IN_CASE_INSENSITIVE = "^^*"
    NOT_IN = "!^^"
    NOT_IN_CASE_INSENSITIVE = "!^^*"
    # Count
    COUNT_EQUALS = "#=="
    COUNT_NOT_EQUALS = "#!="
    COUNT_GREATER_THAN = "#>"
    COUNT_LESS_THAN = "#<"
    COUNT_GREATER_THAN_OR_EQUAL = "#>="
    COUNT_LESS_THAN_OR_EQUAL = "#<="


class LogicalOperator(str, Enum):
    AND = "AND"
    OR = "OR"


class DateType(str, Enum):
    date = "date"  # 2022-07-01
    datetime = "datetime"  # 2022-07-01T00:00:03
    datetime_utc = "datetimeUtc"  # 2022-07-01T00:00:03Z
    datetime_offset = "datetimeOffset"  # 2022-07-01T00:00:03+01:00


DateMode = Literal["before", "after", "on", "excluding", "between"]


class _Contract(BaseModel):
    # camelCase on the wire, snake_case in Python; both accepted on input.
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


# Values (leaf payloads)


class DateSpec(_Contract):
    mode: DateMode
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None  # between only
    exclude: bool = False  # between only: outside the range instead of inside
    date_type: DateType = DateType.date


FilterValue = Union[bool, int, float, str, list[str], DateSpec]


# Tree nodes


class Filter(_Contract):
    kind: Literal["filter"] = "filter"
    id: str = ""
    property_key: str = ""
    property_label: str = ""
    control_type: ControlType
    operator: Optional[OperatorSymbol] = None
    value: Optional[FilterValue] = None
    case_sensitive: Optional[bool] = None
    selected_labels: Optional[list[str]] = None  # display only
    match_all: bool = False  # multiselect: every value must match


class Group(_Contract):
    kind: Literal["group"] = "group"
    id: str = ""
    children: tuple[Node, ...] = ()
    logical_operator: LogicalOperator = LogicalOperator.AND


Node = Annotated[Union[Filter, Group], Field(discriminator="kind")]


class FilterState(_Contract):
    children: tuple[Node, ...] = ()
    root_logical_operator: LogicalOperator = LogicalOperator.AND


Group.model_rebuild()
FilterState.model_rebuild()


# Builder configuration


class FilterOption(_Contract):
    value: str
    label: str
    is_nested: bool = False


class FilterConfig(_Contract):
    """A filterable property offered to the user."""

    property_key: str
    property_label: str
    control_type: ControlType
    operators: Optional[list[OperatorSymbol]] = None  # defaults to all for the control type
    options: list[FilterOption] = Field(default_factory=list)  # multiselect only
    default_operator: Optional[OperatorSymbol] = None
    date_type: Optional[DateType] = None  # date only


class FilterPreset(_Contract):
    label: str
    filter: FilterState
