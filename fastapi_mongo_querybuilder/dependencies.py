# fastapi_mongo_querybuilder/dependencies.py

from typing import Dict, List

from fastapi import Depends, Request

from .builder import MongoQuery
from .params import normalize_query_params


def query_params_from_request(request: Request) -> Dict[str, List[str]]:
    return normalize_query_params(request.query_params)


def MongoQueryDepends(builder: MongoQuery):
    """Dependency yielding the QueryDescriptor built from the request."""
    def wrapper(params: Dict[str, List[str]] = Depends(query_params_from_request)):
        return builder.create_query(params)
    return Depends(wrapper)


def MongoResponseDepends(builder: MongoQuery):
    """Dependency yielding the paginated Response of the request's query."""
    def wrapper(params: Dict[str, List[str]] = Depends(query_params_from_request)):
        return builder.run(params)
    return Depends(wrapper)
