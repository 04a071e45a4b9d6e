from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eats.db.session import get_db
from eats.schemas.common import CoreOutput
from eats.schemas.dish import CreateDishInput, CreateDishOutput, EditDishInput
from eats.schemas.restaurant import (
    AllCategoriesOutput, CategoryOutput, CreateRestaurantInput, CreateRestaurantOutput, EditRestaurantInput,
    RestaurantOutput, RestaurantsOutput, SearchRestaurantOutput,
)
from eats.services.auth import require_roles
from eats.services.restaurants import RestaurantsService

router = APIRouter(prefix="/restaurants", tags=["Restaurants"])
dishes_router = APIRouter(prefix="/dishes", tags=["Dishes"])


def get_restaurants_service(db: Session = Depends(get_db)):
    return RestaurantsService(db)


@router.get("", response_model=RestaurantsOutput)
@router.get("/", response_model=RestaurantsOutput)
def all_restaurants(page: int = 1, service: RestaurantsService = Depends(get_restaurants_service)):
    return service.all_restaurants(page)


@router.get("/search", response_model=SearchRestaurantOutput)
def search_restaurants(query: str = Query(..., min_length=1), page: int = 1,
                       service: RestaurantsService = Depends(get_restaurants_service)):
    return service.search_restaurant_by_name(query, page)


@router.get("/categories", response_model=AllCategoriesOutput)
def all_categories(service: RestaurantsService = Depends(get_restaurants_service)):
    return service.all_categories()


@router.get("/categories/{slug}", response_model=CategoryOutput)
def category(slug: str, page: int = 1, service: RestaurantsService = Depends(get_restaurants_service)):
    return service.find_category_by_slug(slug, page)


@router.get("/{restaurant_id}", response_model=RestaurantOutput)
def restaurant(restaurant_id: int, service: RestaurantsService = Depends(get_restaurants_service)):
    return service.find_restaurant_by_id(restaurant_id)


@router.post("", response_model=CreateRestaurantOutput)
@router.post("/", response_model=CreateRestaurantOutput)
def create_restaurant(payload: CreateRestaurantInput, owner=Depends(require_roles("Owner")),
                      service: RestaurantsService = Depends(get_restaurants_service)):
    return service.create_restaurant(owner, payload)


@router.patch("", response_model=CoreOutput)
def edit_restaurant(payload: EditRestaurantInput, owner=Depends(require_roles("Owner")),
                    service: RestaurantsService = Depends(get_restaurants_service)):
    return service.edit_restaurant(owner, payload)


@router.delete("/{restaurant_id}", response_model=CoreOutput)
def delete_restaurant(restaurant_id: int, owner=Depends(require_roles("Owner")),
                      service: RestaurantsService = Depends(get_restaurants_service)):
    return service.delete_restaurant(owner, restaurant_id)


@dishes_router.post("", response_model=CreateDishOutput)
def create_dish(payload: CreateDishInput, owner=Depends(require_roles("Owner")),
                service: RestaurantsService = Depends(get_restaurants_service)):
    return service.create_dish(owner, payload)


@dishes_router.patch("", response_model=CoreOutput)
def edit_dish(payload: EditDishInput, owner=Depends(require_roles("Owner")),
              service: RestaurantsService = Depends(get_restaurants_service)):
    return service.edit_dish(owner, payload)


@dishes_router.delete("/{dish_id}", response_model=CoreOutput)
def delete_dish(dish_id: int, owner=Depends(require_roles("Owner")),
                service: RestaurantsService = Depends(get_restaurants_service)):
    return service.delete_dish(owner, dish_id)
