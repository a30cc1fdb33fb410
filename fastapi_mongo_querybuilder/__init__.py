from .builder import MongoQuery, QueryDescriptor, Response
from .dependencies import MongoQueryDepends, MongoResponseDepends, query_params_from_request
from .errors import (
    InvalidPage,
    InvalidValue,
    QueryBuilderError,
    StoreError,
    UnsupportedField,
    UnsupportedKind,
    UnsupportedParameter,
)
from .introspection import build_parameter_map, describe_model, parse_name_tag
from .pagination import Page
from .params import ParameterKind
from .store import CollectionStore, SQLAlchemyStore

__all__ = [
    "CollectionStore",
    "InvalidPage",
    "InvalidValue",
    "MongoQuery",
    "MongoQueryDepends",
    "MongoResponseDepends",
    "Page",
    "ParameterKind",
    "QueryBuilderError",
    "QueryDescriptor",
    "Response",
    "SQLAlchemyStore",
    "StoreError",
    "UnsupportedField",
    "UnsupportedKind",
    "UnsupportedParameter",
    "build_parameter_map",
    "describe_model",
    "parse_name_tag",
    "query_params_from_request",
]
