"""Shared fixtures for tests."""

import pytest
from sqlalchemy import JSON, Boolean, Column, Float, Integer, MetaData, String, Table, create_engine
from sqlalchemy.pool import StaticPool

from fastapi_mongo_querybuilder import MongoQuery, SQLAlchemyStore

from .schemas import PEOPLE, Person, Sample


@pytest.fixture
def sample_query() -> MongoQuery:
    return MongoQuery(Sample)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    yield engine
    engine.dispose()


@pytest.fixture
def metadata(engine) -> MetaData:
    """An in-memory ``person`` collection holding PEOPLE."""
    metadata = MetaData()
    person = Table(
        "person",
        metadata,
        Column("_id", String(24), primary_key=True),
        Column("name", String),
        Column("age", Integer),
        Column("score", Float),
        Column("active", Boolean),
        Column("city", String),
        Column("zip", String),
        Column("tags", JSON),
    )
    metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(person.insert(), PEOPLE)
    return metadata


@pytest.fixture
def store(engine, metadata) -> SQLAlchemyStore:
    return SQLAlchemyStore(engine, metadata)


@pytest.fixture
def people(store) -> MongoQuery:
    return MongoQuery(Person, store, default_page_size=2)
