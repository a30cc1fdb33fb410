from typing import Annotated, List, Optional
from enum import Enum

from pydantic import BaseModel, Field, NonNegativeInt


class StatusEnum(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


# -------------------
# Address (stored inline with the person)
# -------------------

class Address(BaseModel):
    city: str
    zip: Optional[str] = None


# -------------------
# Person
# -------------------

class Person(BaseModel):
    id: str = Field(alias="_id")
    name: str
    email: str
    age: Optional[NonNegativeInt] = None
    score: Optional[float] = None
    is_active: Annotated[bool, "active,omitempty"] = True
    status: Optional[StatusEnum] = None
    address: Optional[Address] = None
    tags: List[str] = []
