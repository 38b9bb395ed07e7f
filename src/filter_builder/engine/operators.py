"""Operator registry: labels and control-type applicability for every QueryKit token."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Union

from filter_builder.contracts.filters import ControlType, FilterConfig, OperatorSymbol

Op = OperatorSymbol
CT = ControlType


@dataclass(frozen=True)
class OperatorMetadata:
    symbol: OperatorSymbol
    label: str
    applies_to: tuple[ControlType, ...]
    description: str
    requires_case_sensitive: bool = False  # True for the `*` (case-insensitive) variants


def _op(
    symbol: OperatorSymbol,
    label: str,
    applies_to: tuple[ControlType, ...],
    description: str,
    requires_case_sensitive: bool = False,
) -> OperatorMetadata:
    return OperatorMetadata(symbol, label, applies_to, description, requires_case_sensitive)


_TEXT = (CT.text,)
_COMPARABLE = (CT.number, CT.date)
_EQUATABLE = (CT.text, CT.number, CT.boolean)
_HAS = (CT.text, CT.multiselect)
_MULTI = (CT.multiselect,)
_NUMBER = (CT.number,)

_ENTRIES = (
    # Equality
    _op(Op.EQUALS, "Equals", _EQUATABLE, "Exact match (case-sensitive for text)"),
    _op(Op.EQUALS_CASE_INSENSITIVE, "Equals", _TEXT, "Exact match (case-insensitive)", True),
    _op(Op.NOT_EQUALS, "Not Equals", _EQUATABLE, "Does not match (case-sensitive for text)"),
    _op(Op.NOT_EQUALS_CASE_INSENSITIVE, "Not Equals", _TEXT, "Does not match (case-insensitive)", True),
    # Comparison
    _op(Op.GREATER_THAN, "Greater Than", _COMPARABLE, "Value is greater than"),
    _op(Op.LESS_THAN, "Less Than", _COMPARABLE, "Value is less than"),
    _op(Op.GREATER_THAN_OR_EQUAL, "Greater Than or Equal", _COMPARABLE, "Value is greater than or equal to"),
    _op(Op.LESS_THAN_OR_EQUAL, "Less Than or Equal", _COMPARABLE, "Value is less than or equal to"),
    # String
    _op(Op.STARTS_WITH, "Starts With", _TEXT, "Starts with (case-sensitive)"),
    _op(Op.STARTS_WITH_CASE_INSENSITIVE, "Starts With", _TEXT, "Starts with (case-insensitive)", True),
    _op(Op.NOT_STARTS_WITH, "Does Not Start With", _TEXT, "Does not start with (case-sensitive)"),
    _op(Op.NOT_STARTS_WITH_CASE_INSENSITIVE, "Does Not Start With", _TEXT, "Does not start with (case-insensitive)", True),
    _op(Op.ENDS_WITH, "Ends With", _TEXT, "Ends with (case-sensitive)"),
    _op(Op.ENDS_WITH_CASE_INSENSITIVE, "Ends With", _TEXT, "Ends with (case-insensitive)", True),
    _op(Op.NOT_ENDS_WITH, "Does Not End With", _TEXT, "Does not end with (case-sensitive)"),
    _op(Op.NOT_ENDS_WITH_CASE_INSENSITIVE, "Does Not End With", _TEXT, "Does not end with (case-insensitive)", True),
    _op(Op.CONTAINS, "Contains", _TEXT, "Contains (case-sensitive)"),
    _op(Op.CONTAINS_CASE_INSENSITIVE, "Contains", _TEXT, "Contains (case-insensitive)", True),
    _op(Op.NOT_CONTAINS, "Does Not Contain", _TEXT, "Does not contain (case-sensitive)"),
    _op(Op.NOT_CONTAINS_CASE_INSENSITIVE, "Does Not Contain", _TEXT, "Does not contain (case-insensitive)", True),
    # Phonetic
    _op(Op.SOUNDS_LIKE, "Sounds Like", _TEXT, "Phonetically similar to"),
    _op(Op.NOT_SOUNDS_LIKE, "Does Not Sound Like", _TEXT, "Not phonetically similar to"),
    # Existence
    _op(Op.HAS, "Has", _HAS, "Has value (case-sensitive)"),
    _op(Op.HAS_CASE_INSENSITIVE, "Has", _HAS, "Has value (case-insensitive)", True),
    _op(Op.NOT_HAS, "Does Not Have", _HAS, "Does not have value (case-sensitive)"),
    _op(Op.NOT_HAS_CASE_INSENSITIVE, "Does Not Have", _HAS, "Does not have value (case-insensitive)", True),
    # Collection
    _op(Op.IN, "In", _MULTI, "In array (case-sensitive)"),
    _op(Op.IN_CASE_INSENSITIVE, "In", _MULTI, "In array (case-insensitive)", True),
    _op(Op.NOT_IN, "Not In", _MULTI, "Not in array (case-sensitive)"),
    _op(Op.NOT_IN_CASE_INSENSITIVE, "Not In", _MULTI, "Not in array (case-insensitive)", True),
    # Count
    _op(Op.COUNT_EQUALS, "Count Equals", _NUMBER, "Count equals"),
    _op(Op.COUNT_NOT_EQUALS, "Count Not Equals", _NUMBER, "Count not equals"),
    _op(Op.COUNT_GREATER_THAN, "Count Greater Than", _NUMBER, "Count greater than"),
    _op(Op.COUNT_LESS_THAN, "Count Less Than", _NUMBER, "Count less than"),
    _op(Op.COUNT_GREATER_THAN_OR_EQUAL, "Count Greater Than or Equal", _NUMBER, "Count greater than or equal"),
    _op(Op.COUNT_LESS_THAN_OR_EQUAL, "Count Less Than or Equal", _NUMBER, "Count less than or equal"),
)

OPERATORS: Mapping[OperatorSymbol, OperatorMetadata] = MappingProxyType(
    {entry.symbol: entry for entry in _ENTRIES}
)

DEFAULT_OPERATORS: Mapping[ControlType, OperatorSymbol] = MappingProxyType(
    {
        CT.text: Op.CONTAINS,
        CT.multiselect: Op.IN,
        CT.date: Op.EQUALS,
        CT.number: Op.EQUALS,
        CT.boolean: Op.EQUALS,
    }
)

CASE_INSENSITIVE_SUFFIX = "*"


def _coerce(symbol: Union[OperatorSymbol, str]) -> Optional[OperatorSymbol]:
    try:
        return OperatorSymbol(symbol)
    except ValueError:
        return None


def metadata_of(symbol: Union[OperatorSymbol, str]) -> Optional[OperatorMetadata]:
    op = _coerce(symbol)
    return OPERATORS.get(op) if op is not None else None


def operators_for(control_type: ControlType) -> list[OperatorSymbol]:
    """Operators applicable to a control type, in registry order."""
    return [entry.symbol for entry in _ENTRIES if control_type in entry.applies_to]


def default_operator_for(control_type: ControlType) -> OperatorSymbol:
    return DEFAULT_OPERATORS[ControlType(control_type)]


def label_of(symbol: Union[OperatorSymbol, str]) -> str:
    """Human-readable label; falls back to the raw token for unknown symbols."""
    meta = metadata_of(symbol)
    if meta is not None:
        return meta.label
    return symbol.value if isinstance(symbol, OperatorSymbol) else str(symbol)


def supports_case_sensitivity(symbol: Union[OperatorSymbol, str]) -> bool:
    meta = metadata_of(symbol)
    return meta is not None and meta.requires_case_sensitive


def case_variant(symbol: OperatorSymbol, case_sensitive: bool) -> OperatorSymbol:
    """Map a token to its case-sensitive or `*` case-insensitive twin, when one exists."""
    token = OperatorSymbol(symbol).value
    if token.endswith(CASE_INSENSITIVE_SUFFIX):
        base = token[: -len(CASE_INSENSITIVE_SUFFIX)]
        if case_sensitive:
            return _coerce(base) or OperatorSymbol(token)
        return OperatorSymbol(token)
    if case_sensitive:
        return OperatorSymbol(token)
    return _coerce(token + CASE_INSENSITIVE_SUFFIX) or OperatorSymbol(token)


def operators_for_config(config: FilterConfig) -> list[OperatorSymbol]:
    """Operators offered for a configured property; defaults to all for its control type."""
    if config.operators:
        return list(config.operators)
    return operators_for(config.control_type)


def initial_operator_for(config: FilterConfig) -> OperatorSymbol:
    if config.default_operator is not None:
        return config.default_operator
    return default_operator_for(config.control_type)
