from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, NonNegativeInt


class Embedded(BaseModel):
    EmbeddedBool: bool = False
    EmbeddedInt: int = 0


class Sample(BaseModel):
    FloatMember: float = 0.0
    UintMember: NonNegativeInt = 0
    IntMember: Annotated[int, 'bson:"intMember"'] = 0
    BoolMember: Annotated[bool, "mybool"] = False
    StringMember: Annotated[str, 'json:"name" binding:"required" validate:"nonzero"'] = ""
    EmbeddedMember: Embedded = Embedded()
    StringSliceMember: Annotated[List[str], 'bson:"strSliceMember"'] = []
    IntSliceMember: List[int] = []


class Address(BaseModel):
    city: str
    zip: Optional[str] = None


class Person(BaseModel):
    id: str = Field(alias="_id")
    name: str
    age: Optional[NonNegativeInt] = None
    score: Optional[float] = None
    active: bool = True
    address: Optional[Address] = None
    tags: List[str] = []


PEOPLE = [
    {"_id": "54e1b216a8f830ee6dead911", "name": "Alice", "age": 30, "score": 85.5, "active": True, "city": "NYC", "zip": "10001", "tags": ["admin", "staff"]},
    {"_id": "54e1b216a8f830ee6dead912", "name": "Bob", "age": 25, "score": 70.0, "active": False, "city": "LA", "zip": None, "tags": []},
    {"_id": "54e1b216a8f830ee6dead913", "name": "Carol", "age": 40, "score": 95.0, "active": False, "city": "Chicago", "zip": None, "tags": []},
    {"_id": "54e1b216a8f830ee6dead914", "name": "Dave", "age": 35, "score": 88.0, "active": True, "city": "Boston", "zip": None, "tags": ["staff"]},
    {"_id": "54e1b216a8f830ee6dead915", "name": "Eve", "age": 28, "score": 92.25, "active": True, "city": "Seattle", "zip": None, "tags": ["guest"]},
]
