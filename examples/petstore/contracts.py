"""Petstore contracts and models used by the example."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from schemagraph.contracts import Contract, Each, optional, pred, required


class OwnerContract(Contract):
    """Someone who owns pets."""

    name = required(str, pred("filled?"), pred("max_size?", 80))
    email = required(str, pred("email?"))
    pets = optional(List["PetContract"], pred("max_size?", 10))


class PetContract(Contract):
    """A pet in the store."""

    pet_type = required(str, pred("included_in?", ["cat", "dog", "bird"]))
    name = required(str, pred("filled?"), pred("max_size?", 50), description="Pet name")
    age = optional(int, pred("gteq?", 0) & pred("lt?", 40))
    tags = optional(List[str], Each(pred("min_size?", 2)))
    owner = optional(Optional[OwnerContract])


class Pet(BaseModel):
    pet_type: str = Field(json_schema_extra={"is_discriminator": True})
    name: str = Field(max_length=50)


class Cat(Pet):
    indoor: bool = True


class Dog(Pet):
    good_boy: bool = True


@dataclass
class Adoption:
    """An adoption request."""

    pet: Union[Cat, Dog]
    owner: OwnerContract
    notes: List[str] = field(default_factory=list)
