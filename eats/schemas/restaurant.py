from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

from eats.schemas.common import CoreOutput, PaginationOutput
from eats.schemas.dish import DishRead


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    cover_image: Optional[str] = None


class RestaurantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    cover_image: Optional[str] = None
    category: Optional[CategoryRead] = None
    owner_id: int
    is_promoted: bool = False
    promoted_until: Optional[datetime] = None


class RestaurantDetail(RestaurantRead):
    menu: List[DishRead] = []


class CreateRestaurantInput(BaseModel):
    name: str
    address: str
    cover_image: Optional[str] = None
    category_name: str


class EditRestaurantInput(BaseModel):
    restaurant_id: int
    name: Optional[str] = None
    address: Optional[str] = None
    cover_image: Optional[str] = None
    category_name: Optional[str] = None


class CreateRestaurantOutput(CoreOutput):
    restaurant_id: Optional[int] = None


class CategoryWithCount(CategoryRead):
    restaurant_count: int = 0


class AllCategoriesOutput(CoreOutput):
    categories: Optional[List[CategoryWithCount]] = None


class CategoryOutput(PaginationOutput):
    category: Optional[CategoryRead] = None
    restaurants: Optional[List[RestaurantRead]] = None


class RestaurantsOutput(PaginationOutput):
    results: Optional[List[RestaurantRead]] = None


class RestaurantOutput(CoreOutput):
    restaurant: Optional[RestaurantDetail] = None


class SearchRestaurantOutput(PaginationOutput):
    restaurants: Optional[List[RestaurantRead]] = None
