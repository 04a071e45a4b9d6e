from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

from eats.schemas.common import CoreOutput


class DishChoice(BaseModel):
    name: str
    extra: Optional[int] = Field(default=None, ge=0)


class DishOption(BaseModel):
    name: str
    # a flat extra on the option wins over any choice extras
    extra: Optional[int] = Field(default=None, ge=0)
    choices: Optional[List[DishChoice]] = None


class DishRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: int
    photo: Optional[str] = None
    description: Optional[str] = None
    restaurant_id: int
    options: Optional[List[DishOption]] = None


class CreateDishInput(BaseModel):
    restaurant_id: int
    name: str
    price: int = Field(ge=0)
    photo: Optional[str] = None
    description: Optional[str] = Field(default=None, min_length=5, max_length=140)
    options: Optional[List[DishOption]] = None


class EditDishInput(BaseModel):
    dish_id: int
    name: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    photo: Optional[str] = None
    description: Optional[str] = Field(default=None, min_length=5, max_length=140)
    options: Optional[List[DishOption]] = None


class CreateDishOutput(CoreOutput):
    dish_id: Optional[int] = None
