# fastapi_mongo_querybuilder/params.py

from enum import Enum
from typing import Any, Dict, List, Mapping
from urllib.parse import parse_qs


class ParameterKind(str, Enum):
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STRING = "string"
    # fields the filter builder cannot parse; still usable for field/sort
    OTHER = "other"


PAGE = "page"
LIMIT = "limit"
FIELD = "field"
SORT = "sort"

META_PARAMETERS: Dict[str, ParameterKind] = {
    PAGE: ParameterKind.UINT,
    LIMIT: ParameterKind.UINT,
    FIELD: ParameterKind.STRING,
    SORT: ParameterKind.STRING,
}

QueryParams = Mapping[str, List[str]]


def normalize_query_params(params: Any) -> Dict[str, List[str]]:
    """
    Turn the supported query-param shapes into a name -> list of values dict.

    Accepts a raw query string, a multidict exposing ``multi_items()``
    (starlette's ``QueryParams``), or a mapping whose values are either a
    single string or a sequence of strings. Value order is preserved.
    """
    if params is None:
        return {}
    if isinstance(params, str):
        return parse_qs(params.lstrip("?"), keep_blank_values=True)

    normalized: Dict[str, List[str]] = {}
    if hasattr(params, "multi_items"):
        for key, value in params.multi_items():
            normalized.setdefault(key, []).append(value)
        return normalized

    for key, values in params.items():
        if isinstance(values, str):
            normalized[key] = [values]
        else:
            normalized[key] = list(values)
    return normalized
