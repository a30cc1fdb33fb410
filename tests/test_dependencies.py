import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fastapi_mongo_querybuilder import (
    MongoQuery,
    MongoQueryDepends,
    MongoResponseDepends,
    ParameterKind,
    QueryDescriptor,
    Response,
)

from .schemas import Person


@pytest.fixture
def client(people):
    people.disable_parameters("score")
    people.add_or_overwrite_valid_parameter("created", ParameterKind.OTHER)

    app = FastAPI()

    @app.get("/people", response_model=Response[Person], response_model_exclude_none=True)
    def get_people(response=MongoResponseDepends(people)):
        return response

    @app.get("/people/query")
    def get_people_query(query: QueryDescriptor = MongoQueryDepends(people)):
        return query.model_dump(mode="json")

    return TestClient(app)


def test_list(client):
    r = client.get("/people", params=[("sort", "-age"), ("limit", "3")])
    assert r.status_code == 200, r.text
    data = r.json()
    assert [p["name"] for p in data["content"]] == ["Carol", "Dave", "Alice"]
    assert data["content"][0]["_id"] == "54e1b216a8f830ee6dead913"
    assert data["content"][0]["address"] == {"city": "Chicago"}
    assert data["page"] == {"size": 3, "items": 5, "last": 2, "current": 1}


def test_empty_content_is_omitted(client):
    r = client.get("/people?name=nobody")
    assert r.status_code == 200, r.text
    assert r.json() == {"page": {"size": 2, "items": 0, "last": 0, "current": 1}}


def test_query_descriptor(client):
    r = client.get("/people/query?name=peter&age=1&age=2&field=name&sort=-age&page=2")
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["collection"] == "person"
    assert data["filter"] == {"name": {"$regex": "peter"}, "age": {"$in": [1, 2]}}
    assert data["projection"] == ["name"]
    assert data["sort"] == ["-age"]
    assert (data["limit"], data["skip"]) == (2, 2)


def test_array_field(client):
    r = client.get("/people?tags=staff&sort=name")
    assert r.status_code == 200, r.text
    data = r.json()
    assert [p["name"] for p in data["content"]] == ["Alice", "Dave"]
    assert data["content"][0]["tags"] == ["admin", "staff"]


@pytest.mark.parametrize(
    "query, status, fragment",
    [
        ("score=1.5", 400, "parameter 'score' is not supported"),
        ("age=old", 400, "invalid value 'old' for parameter 'age'"),
        ("field=nope", 400, "unsupported field value: nope"),
        ("sort=-nope", 400, "unsupported sort value: -nope"),
        ("page=0", 400, "page cannot be 0"),
        ("limit=0", 400, "limit cannot be 0"),
        ("limit=18446744073709551615", 400, "limit is too large"),
        ("page=18446744073709551615", 400, "page is too large"),
        ("created=2020", 500, "kind 'other' of parameter 'created' is not supported"),
    ],
)
def test_errors(client, query, status, fragment):
    r = client.get(f"/people?{query}")
    assert r.status_code == status
    assert fragment in r.json()["detail"]


def test_store_error():
    people = MongoQuery(Person, None)
    app = FastAPI()

    @app.get("/people")
    def get_people(response=MongoResponseDepends(people)):
        return response

    r = TestClient(app).get("/people")
    assert r.status_code == 500
    assert r.json() == {"detail": "no store configured"}
