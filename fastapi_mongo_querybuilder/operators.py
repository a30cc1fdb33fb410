# fastapi_mongo_querybuilder/operators.py

from typing import Any

from sqlalchemy import JSON, cast, func, or_, select
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import operators


def literal(value: Any) -> Any:
    """Unwrap identifier literals; ids are stored as their hex text."""
    if isinstance(value, dict) and "$oid" in value:
        return value["$oid"]
    return value


def is_array_column(column) -> bool:
    return isinstance(column.type, (JSON, JSONB))


def _array_elements(column):
    if isinstance(column.type, JSONB):
        return func.jsonb_array_elements_text(column).table_valued("value")
    # SQLite and other dialects with the json_each table function
    return func.json_each(column).table_valued("value")


def _array_contains(column, value):
    if isinstance(column.type, JSONB):
        return column.contains(cast([value], JSONB))
    elements = _array_elements(column)
    return select(elements.c.value).where(elements.c.value == value).exists()


def _eq_operator(column, value):
    value = literal(value)
    if is_array_column(column):
        return _array_contains(column, value)
    return operators.eq(column, value)


def _in_operator(column, values):
    values = [literal(v) for v in values]
    if is_array_column(column):
        return or_(*[_array_contains(column, v) for v in values])
    return column.in_(values)


def _regex_operator(column, pattern):
    if is_array_column(column):
        elements = _array_elements(column)
        return select(elements.c.value).where(elements.c.value.regexp_match(pattern)).exists()
    return column.regexp_match(pattern)


COMPARISON_OPERATORS = {
    "$eq": _eq_operator,
    "$in": _in_operator,
    "$regex": _regex_operator,
    "$oid": _eq_operator,
}


def term_expression(column, term: Any):
    """Translate one filter term into an SQLAlchemy expression for ``column``."""
    if isinstance(term, dict) and len(term) == 1:
        operator, operand = next(iter(term.items()))
        if operator in COMPARISON_OPERATORS:
            return COMPARISON_OPERATORS[operator](column, operand)
        raise ValueError(f"Unknown operator '{operator}'")
    return _eq_operator(column, term)
