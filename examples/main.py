from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlalchemy import JSON, String, create_engine, func, select
from sqlalchemy.orm import Mapped, Session, declarative_base, mapped_column
import uvicorn

from fastapi_mongo_querybuilder import (
    MongoQuery,
    MongoQueryDepends,
    MongoResponseDepends,
    ParameterKind,
    QueryDescriptor,
    Response,
    SQLAlchemyStore,
)

from examples.schemas import Person

# ───── App & DB Setup ───────────────────────────

DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(DATABASE_URL, echo=True)
Base = declarative_base()


# ───── Models ────────────────────────────────────
# one column per flattened parameter name, the address is stored inline

class PersonRow(Base):
    __tablename__ = "person"

    id: Mapped[str] = mapped_column("_id", String(24), primary_key=True)
    name: Mapped[str] = mapped_column(String, index=True)
    email: Mapped[str] = mapped_column(String, unique=True)
    age: Mapped[int] = mapped_column(nullable=True)
    score: Mapped[float] = mapped_column(nullable=True)
    active: Mapped[bool] = mapped_column(default=True)
    status: Mapped[str] = mapped_column(String, nullable=True)
    city: Mapped[str] = mapped_column(String, nullable=True)
    zip: Mapped[str] = mapped_column(String, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list)


# ───── Query builder ─────────────────────────────

people = MongoQuery(Person, SQLAlchemyStore(engine, Base.metadata))
people.disable_parameters("email")
people.add_or_overwrite_valid_parameter("zip", ParameterKind.STRING)


# ───── Lifespan / Seed Data ─────────────────────

@asynccontextmanager
async def lifespan(_: FastAPI):
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        if not session.scalar(select(func.count()).select_from(PersonRow)):
            session.add_all([
                PersonRow(id="54e1b216a8f830ee6dead911", name="Alice", email="alice@example.com",
                          age=30, score=85.5, active=True, status="active", city="NYC", zip="10001"),
                PersonRow(id="54e1b216a8f830ee6dead912", name="Bob", email="bob@example.com",
                          age=25, score=70.0, active=False, status="inactive", city="LA"),
                PersonRow(id="54e1b216a8f830ee6dead913", name="Carol", email="carol@example.com",
                          age=40, score=95.0, active=False, status="suspended", city="Chicago"),
                PersonRow(id="54e1b216a8f830ee6dead914", name="Dave", email="dave@example.com",
                          age=35, score=88.0, active=True, status="active", city="Boston"),
                PersonRow(id="54e1b216a8f830ee6dead915", name="Eve", email="eve@example.com",
                          age=28, score=92.25, active=True, status="active", city="Seattle"),
            ])
            session.commit()

    yield

# ───── FastAPI App ───────────────────────────────

app = FastAPI(lifespan=lifespan)


@app.get("/people", response_model=Response[Person], response_model_exclude_none=True)
def get_people(response=MongoResponseDepends(people)):
    """
    Examples:

        GET /people?name=^A                     name matches the pattern
        GET /people?age=25&age=30               age in (25, 30)
        GET /people?active=true&sort=-age       active people, oldest first
        GET /people?field=name&field=city       only name and city (and _id)
        GET /people?limit=2&page=2              second page of two
    """
    return response


@app.get("/people/query")
def explain_people_query(query: QueryDescriptor = MongoQueryDepends(people)):
    return query.model_dump(mode="json")


# ───── Run Server ────────────────────────────────

if __name__ == "__main__":
    uvicorn.run("examples.main:app", host="0.0.0.0", port=8000, reload=True)
