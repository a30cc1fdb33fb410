# fastapi_mongo_querybuilder/pagination.py

from typing import Mapping, Optional, Sequence

from pydantic import BaseModel, NonNegativeInt, PositiveInt

from .core import INT_MAX, parse_uint
from .errors import InvalidPage, InvalidValue
from .params import LIMIT, PAGE, ParameterKind


class Page(BaseModel):
    size: NonNegativeInt = 0
    items: NonNegativeInt = 0
    last: NonNegativeInt = 0
    current: PositiveInt = 1

    @property
    def skip(self) -> int:
        return (self.current - 1) * self.size

    def finalize(self, items: int) -> "Page":
        """Return a copy carrying the total item count and the last page number."""
        last = -(-items // self.size) if self.size else 0
        return self.model_copy(update={"items": items, "last": last})


def _get_uint(query_params: Mapping[str, Sequence[str]], name: str) -> Optional[int]:
    values = query_params.get(name)
    if not values:
        return None
    try:
        return parse_uint(values[0])
    except ValueError as e:
        raise InvalidValue(name, values[0], ParameterKind.UINT, reason=str(e)) from e


def resolve_page(query_params: Mapping[str, Sequence[str]], default_size: int) -> Page:
    """
    Read ``limit`` and ``page`` from the query parameters.

    ``limit`` falls back to ``default_size`` and ``page`` to 1. A page of 0
    and a limit of 0 are rejected, as are pages whose offset does not fit
    a signed 64-bit integer.
    """
    size = _get_uint(query_params, LIMIT)
    if size is None:
        size = default_size
    if size == 0:
        raise InvalidValue(LIMIT, "0", ParameterKind.UINT, reason="limit cannot be 0")
    if size > INT_MAX:
        raise InvalidValue(LIMIT, str(size), ParameterKind.UINT, reason="limit is too large")

    current = _get_uint(query_params, PAGE)
    if current is None:
        current = 1
    if current == 0:
        raise InvalidPage(query_params[PAGE][0])
    # stores take limit and skip as signed 64-bit integers
    if (current - 1) * size > INT_MAX:
        raise InvalidValue(PAGE, str(current), ParameterKind.UINT, reason="page is too large")

    return Page(size=size, current=current)
