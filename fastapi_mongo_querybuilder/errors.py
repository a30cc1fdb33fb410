# fastapi_mongo_querybuilder/errors.py

from typing import Any, Optional

from fastapi import HTTPException


class QueryBuilderError(HTTPException):
    """
    Base class for every error raised while building or running a query.

    Subclasses are HTTPExceptions so FastAPI renders them without extra
    handlers. Client input errors use 400, everything else 500.
    """

    status_code = 400

    def __init__(
        self,
        detail: str,
        parameter: Optional[str] = None,
        value: Any = None,
        kind: Any = None,
    ):
        super().__init__(status_code=type(self).status_code, detail=detail)
        self.parameter = parameter
        self.value = value
        self.kind = kind

    def __str__(self) -> str:
        return self.detail


class UnsupportedParameter(QueryBuilderError):
    def __init__(self, parameter: str):
        super().__init__(f"parameter '{parameter}' is not supported", parameter=parameter)


class UnsupportedField(QueryBuilderError):
    def __init__(self, parameter: str, value: str):
        super().__init__(
            f"unsupported {parameter} value: {value}", parameter=parameter, value=value
        )


class InvalidValue(QueryBuilderError):
    def __init__(self, parameter: str, value: str, kind: Any = None, reason: Optional[str] = None):
        detail = f"invalid value '{value}' for parameter '{parameter}'"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail, parameter=parameter, value=value, kind=kind)


class InvalidPage(QueryBuilderError):
    def __init__(self, value: str):
        super().__init__("page cannot be 0", parameter="page", value=value)


class UnsupportedKind(QueryBuilderError):
    status_code = 500

    def __init__(self, parameter: str, kind: Any):
        kind_name = getattr(kind, "value", kind)
        super().__init__(
            f"kind '{kind_name}' of parameter '{parameter}' is not supported",
            parameter=parameter,
            kind=kind,
        )


class StoreError(QueryBuilderError):
    status_code = 500

    def __init__(self, detail: str, collection: Optional[str] = None):
        super().__init__(detail)
        self.collection = collection
