# fastapi_mongo_querybuilder/store.py

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from sqlalchemy import MetaData, Table, asc, desc, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError

from .core import DESCENDING
from .errors import StoreError
from .operators import term_expression

logger = logging.getLogger(__name__)


class CollectionStore(Protocol):
    def count(self, collection: str, filter: Mapping[str, Any]) -> int:
        ...

    def fetch(
        self,
        collection: str,
        filter: Mapping[str, Any],
        projection: Iterable[str],
        sort: Sequence[str],
        limit: int,
        skip: int,
    ) -> List[Mapping[str, Any]]:
        ...


class SQLAlchemyStore:
    """
    Runs query descriptors against relational tables.

    Each collection is a table of the same name whose columns are the
    flattened parameter names. Tables not present in ``metadata`` are
    reflected on first use; a missing table behaves like an empty
    collection.
    """

    def __init__(self, bind: Engine, metadata: Optional[MetaData] = None):
        self.bind = bind
        self.metadata = metadata if metadata is not None else MetaData()

    def _table(self, collection: str) -> Optional[Table]:
        table = self.metadata.tables.get(collection)
        if table is not None:
            return table
        try:
            return Table(collection, self.metadata, autoload_with=self.bind)
        except NoSuchTableError:
            logger.debug("collection %s does not exist", collection)
            return None

    def _column(self, table: Table, name: str, usage: str):
        column = table.c.get(name)
        if column is None:
            raise StoreError(
                f"cannot {usage} on '{name}': collection '{table.name}' has no such column",
                collection=table.name,
            )
        return column

    def _where(self, table: Table, filter: Mapping[str, Any]) -> list:
        clauses = []
        for name, term in filter.items():
            column = self._column(table, name, "filter")
            try:
                clauses.append(term_expression(column, term))
            except (TypeError, ValueError) as e:
                raise StoreError(f"Error filtering '{name}': {e}", collection=table.name) from e
        return clauses

    def _order_by(self, table: Table, sort: Sequence[str]) -> list:
        order = []
        for token in sort:
            if token.startswith(DESCENDING):
                order.append(desc(self._column(table, token[len(DESCENDING):], "sort")))
            else:
                order.append(asc(self._column(table, token, "sort")))
        return order

    def count(self, collection: str, filter: Mapping[str, Any]) -> int:
        try:
            table = self._table(collection)
            if table is None:
                return 0
            stmt = select(func.count()).select_from(table).where(*self._where(table, filter))
            with self.bind.connect() as conn:
                return conn.execute(stmt).scalar_one()
        except (SQLAlchemyError, OverflowError) as e:
            logger.exception("counting %s failed", collection)
            raise StoreError(f"counting '{collection}' failed: {e}", collection=collection) from e

    def fetch(
        self,
        collection: str,
        filter: Mapping[str, Any],
        projection: Iterable[str],
        sort: Sequence[str],
        limit: int,
        skip: int,
    ) -> List[Dict[str, Any]]:
        try:
            table = self._table(collection)
            if table is None:
                return []

            projection = set(projection)
            if projection:
                columns = [c for c in table.c if c.name in projection or c.primary_key]
            else:
                columns = list(table.c)

            stmt = (
                select(*columns)
                .where(*self._where(table, filter))
                .order_by(*self._order_by(table, sort))
                .limit(limit)
                .offset(skip)
            )
            with self.bind.connect() as conn:
                return [dict(row._mapping) for row in conn.execute(stmt)]
        except (SQLAlchemyError, OverflowError) as e:
            logger.exception("fetching %s failed", collection)
            raise StoreError(f"fetching '{collection}' failed: {e}", collection=collection) from e
