# fastapi_mongo_querybuilder/core.py

import re
from typing import Any, Callable, Dict, List, Mapping, Sequence, Set

from .errors import InvalidValue, UnsupportedField, UnsupportedKind, UnsupportedParameter
from .params import FIELD, META_PARAMETERS, SORT, ParameterKind

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
DESCENDING = "-"

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_SIGNED_INT = re.compile(r"^[+-]?[0-9]+$")
_UNSIGNED_INT = re.compile(r"^[0-9]+$")
_FLOAT = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")

INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1
UINT_MAX = 2 ** 64 - 1


def is_object_id(value: str) -> bool:
    return bool(OBJECT_ID_PATTERN.match(value))


def parse_bool(value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError("not a boolean")


def parse_int(value: str) -> int:
    if not _SIGNED_INT.match(value):
        raise ValueError("not an integer")
    number = int(value)
    if not INT_MIN <= number <= INT_MAX:
        raise ValueError("integer out of range")
    return number


def parse_uint(value: str) -> int:
    if not _UNSIGNED_INT.match(value):
        raise ValueError("not an unsigned integer")
    number = int(value)
    if number > UINT_MAX:
        raise ValueError("unsigned integer out of range")
    return number


def parse_float(value: str) -> float:
    if not _FLOAT.match(value):
        raise ValueError("not a float")
    return float(value)


SCALAR_PARSERS: Dict[ParameterKind, Callable[[str], Any]] = {
    ParameterKind.BOOL: parse_bool,
    ParameterKind.INT: parse_int,
    ParameterKind.UINT: parse_uint,
    ParameterKind.FLOAT: parse_float,
}


def _parse_strings(name: str, values: Sequence[str]) -> List[Any]:
    if len(values) == 1:
        value = values[0]
        if is_object_id(value):
            return [{"$oid": value}]
        try:
            re.compile(value)
        except re.error as e:
            raise InvalidValue(name, value, ParameterKind.STRING, reason=str(e)) from e
        return [{"$regex": value}]

    return [{"$oid": value} if is_object_id(value) else value for value in values]


def parse_values(name: str, kind: ParameterKind, values: Sequence[str]) -> List[Any]:
    """Parse every raw value of ``name`` according to ``kind``."""
    if kind == ParameterKind.STRING:
        return _parse_strings(name, values)

    parser = SCALAR_PARSERS.get(kind)
    if parser is None:
        raise UnsupportedKind(name, kind)

    parsed = []
    for value in values:
        try:
            parsed.append(parser(value))
        except ValueError as e:
            raise InvalidValue(name, value, kind, reason=str(e)) from e
    return parsed


def build_filter(
    query_params: Mapping[str, Sequence[str]], parameters: Mapping[str, ParameterKind]
) -> Dict[str, Any]:
    """
    Build a document filter from raw query parameters.

    A single value becomes an equality term (or a ``$regex`` term for plain
    strings), several values become a ``$in`` term in request order.

    Raises:
        UnsupportedParameter: a name is not a valid parameter.
        InvalidValue: a value does not parse as the parameter's kind.
        UnsupportedKind: the parameter's kind cannot be filtered on.
    """
    filters: Dict[str, Any] = {}

    for name, values in query_params.items():
        if name not in parameters:
            raise UnsupportedParameter(name)
        # meta parameters are not filters
        if name in META_PARAMETERS:
            continue
        if not values:
            continue

        parsed = parse_values(name, parameters[name], values)
        filters[name] = parsed[0] if len(parsed) == 1 else {"$in": parsed}

    return filters


def build_projection(
    field_values: Sequence[str], parameters: Mapping[str, ParameterKind]
) -> Set[str]:
    projection = set()
    for value in field_values:
        if value not in parameters:
            raise UnsupportedField(FIELD, value)
        projection.add(value)
    return projection


def build_sort(sort_values: Sequence[str], parameters: Mapping[str, ParameterKind]) -> List[str]:
    """
    Validate sort tokens; a leading ``-`` marks descending order.

    Tokens are returned unchanged and in request order.
    """
    sort = []
    for value in sort_values:
        name = value[len(DESCENDING):] if value.startswith(DESCENDING) else value
        if name not in parameters:
            raise UnsupportedField(SORT, value)
        sort.append(value)
    return sort
