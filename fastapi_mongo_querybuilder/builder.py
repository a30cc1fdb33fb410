# fastapi_mongo_querybuilder/builder.py

import logging
from typing import Any, Dict, Generic, List, Optional, Set, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from .core import build_filter, build_projection, build_sort
from .errors import StoreError
from .introspection import build_parameter_map, build_record
from .pagination import Page, resolve_page
from .params import FIELD, SORT, ParameterKind, normalize_query_params
from .settings import get_settings
from .store import CollectionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueryDescriptor(BaseModel):
    """A portable document query, ready to be run by a collection store."""

    model_config = ConfigDict(frozen=True)

    collection: str
    filter: Dict[str, Any] = {}
    projection: Set[str] = set()
    sort: List[str] = []
    limit: int
    skip: int = 0
    page: Page


class Response(BaseModel, Generic[T]):
    content: Optional[List[T]] = None
    page: Page


class MongoQuery:
    """
    Creates document queries from HTTP query parameters for the collection
    described by ``schema``.

    Typical use::

        mq = MongoQuery(People, store)
        mq.disable_parameters("name", "sort")
        response = mq.run(request.query_params)

    A query like ``?name=peter&age=10&field=name&limit=10&page=2&sort=-age``
    becomes the filter ``{"name": {"$regex": "peter"}, "age": 10}`` with the
    projection ``{"name"}``, the sort ``["-age"]``, limit 10 and skip 10.

    Configure the valid parameters (``disable_parameters``,
    ``add_or_overwrite_valid_parameter``) during setup only. Afterwards the
    instance is read-only and may be shared by concurrent requests; there is
    no internal locking.
    """

    def __init__(
        self,
        schema: Type[BaseModel],
        store: Optional[CollectionStore] = None,
        collection: Optional[str] = None,
        default_page_size: Optional[int] = None,
    ):
        self.schema = schema if isinstance(schema, type) else type(schema)
        self.store = store
        self.collection = collection or self.schema.__name__.lower()
        if default_page_size is None:
            default_page_size = get_settings().default_page_size
        if default_page_size < 1:
            raise ValueError(f"default_page_size must be positive, got {default_page_size}")
        self.default_page_size = default_page_size
        self.disabled_parameters: List[str] = []
        self.additional_parameters: Dict[str, ParameterKind] = {}
        self._parameters = build_parameter_map(self.schema)

    @property
    def supported_parameters(self) -> Dict[str, ParameterKind]:
        """A copy of the current parameter map."""
        return dict(self._parameters)

    def _rebuild(self) -> None:
        parameters = build_parameter_map(self.schema, self.disabled_parameters)
        parameters.update(self.additional_parameters)
        self._parameters = parameters
        logger.debug("%s: valid parameters %s", self.collection, sorted(parameters))

    def disable_parameters(self, *names: str) -> None:
        """Disable parameters; a request using any of them is rejected."""
        for name in names:
            if name not in self.disabled_parameters:
                self.disabled_parameters.append(name)
        logger.info("%s: disabled parameters %s", self.collection, self.disabled_parameters)
        self._rebuild()

    def add_or_overwrite_valid_parameter(self, name: str, kind: ParameterKind) -> None:
        """Add a valid parameter or change its kind. Wins over disabling."""
        self.additional_parameters[name] = ParameterKind(kind)
        logger.info("%s: parameter %s registered as %s", self.collection, name, kind)
        self._rebuild()

    def create_query(self, query_params: Any) -> QueryDescriptor:
        params = normalize_query_params(query_params)
        parameters = self._parameters

        filter = build_filter(params, parameters)
        projection = build_projection(params.get(FIELD, []), parameters)
        sort = build_sort(params.get(SORT, []), parameters)
        page = resolve_page(params, self.default_page_size)

        descriptor = QueryDescriptor(
            collection=self.collection,
            filter=filter,
            projection=projection,
            sort=sort,
            limit=page.size,
            skip=page.skip,
            page=page,
        )
        logger.debug("built query %s", descriptor)
        return descriptor

    def execute(self, descriptor: QueryDescriptor) -> Response:
        if self.store is None:
            raise StoreError("no store configured", collection=descriptor.collection)

        items = self.store.count(descriptor.collection, descriptor.filter)
        page = descriptor.page.finalize(items)

        rows = self.store.fetch(
            descriptor.collection,
            descriptor.filter,
            descriptor.projection,
            descriptor.sort,
            descriptor.limit,
            descriptor.skip,
        )
        # projected rows are partial, they cannot pass validation
        validate = not descriptor.projection
        try:
            content = [build_record(self.schema, row, validate=validate) for row in rows]
        except ValidationError as e:
            raise StoreError(
                f"documents of '{descriptor.collection}' do not match {self.schema.__name__}: {e}",
                collection=descriptor.collection,
            ) from e

        return Response[self.schema](content=content or None, page=page)

    def run(self, query_params: Any) -> Response:
        return self.execute(self.create_query(query_params))
