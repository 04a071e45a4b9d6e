import logging
import math

from sqlalchemy.orm import Session

from eats.core.config import settings
from eats.core.exceptions import NotFound, ServiceError, Unauthorized, ValidationFailure
from eats.models.dish import Dish
from eats.models.restaurant import Category, Restaurant
from eats.models.user import User
from eats.schemas.common import CoreOutput
from eats.schemas.dish import CreateDishInput, CreateDishOutput, EditDishInput
from eats.schemas.restaurant import (
    AllCategoriesOutput, CategoryOutput, CategoryRead, CategoryWithCount, CreateRestaurantInput,
    CreateRestaurantOutput, EditRestaurantInput, RestaurantDetail, RestaurantOutput, RestaurantRead,
    RestaurantsOutput, SearchRestaurantOutput,
)

logger = logging.getLogger("eats.restaurants")


def slugify(name: str) -> str:
    return "-".join(name.strip().lower().split())


def get_or_create_category(db: Session, name: str) -> Category:
    slug = slugify(name)
    category = db.query(Category).filter(Category.slug == slug).first()
    if category is None:
        category = Category(name=name.strip(), slug=slug)
        db.add(category)
        db.flush()
    return category


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _check_page(page: int) -> int:
    if page is None or page < 1:
        raise ValidationFailure("Page must be greater than 0")
    return page


class RestaurantsService:
    def __init__(self, db: Session, page_size: int = None):
        self.db = db
        self.page_size = page_size or settings.PAGE_SIZE

    def _total_pages(self, total_results: int) -> int:
        return math.ceil(total_results / self.page_size)

    def _paged(self, query, page: int):
        page = _check_page(page)
        total_results = query.count()
        rows = (
            query.order_by(Restaurant.is_promoted.desc(), Restaurant.id.asc())
            .offset((page - 1) * self.page_size)
            .limit(self.page_size)
            .all()
        )
        return rows, total_results

    def check_restaurant_editable(self, owner: User, restaurant_id: int) -> Restaurant:
        """Return the restaurant if ``owner`` owns it, raising otherwise."""
        restaurant = self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
        if restaurant is None:
            raise NotFound("Restaurant not found")
        if restaurant.owner_id != owner.id:
            raise Unauthorized("Can not edit restaurant that you do not own")
        return restaurant

    def create_restaurant(self, owner: User, data: CreateRestaurantInput) -> CreateRestaurantOutput:
        try:
            restaurant = Restaurant(
                name=data.name,
                address=data.address,
                cover_image=data.cover_image,
                owner_id=owner.id,
            )
            restaurant.category = get_or_create_category(self.db, data.category_name)
            self.db.add(restaurant)
            self.db.commit()
            logger.info(f"restaurant created id={restaurant.id} owner={owner.id}")
            return CreateRestaurantOutput(ok=True, restaurant_id=restaurant.id)
        except Exception:
            self.db.rollback()
            logger.exception("create_restaurant failed")
            return CreateRestaurantOutput(ok=False, error="Fail to create a restaurant")

    def edit_restaurant(self, owner: User, data: EditRestaurantInput) -> CoreOutput:
        try:
            restaurant = self.check_restaurant_editable(owner, data.restaurant_id)
            for field in ("name", "address", "cover_image"):
                value = getattr(data, field)
                if value is not None:
                    setattr(restaurant, field, value)
            if data.category_name:
                restaurant.category = get_or_create_category(self.db, data.category_name)
            self.db.add(restaurant)
            self.db.commit()
            return CoreOutput(ok=True)
        except ServiceError as e:
            return CoreOutput(ok=False, error=e.message)
        except Exception:
            self.db.rollback()
            logger.exception("edit_restaurant failed")
            return CoreOutput(ok=False, error="Could not edit restaurant")

    def delete_restaurant(self, owner: User, restaurant_id: int) -> CoreOutput:
        try:
            restaurant = self.check_restaurant_editable(owner, restaurant_id)
            self.db.delete(restaurant)
            self.db.commit()
            return CoreOutput(ok=True)
        except ServiceError as e:
            return CoreOutput(ok=False, error=e.message)
        except Exception:
            self.db.rollback()
            logger.exception("delete_restaurant failed")
            return CoreOutput(ok=False, error="Could not delete restaurant")

    def count_restaurants(self, category: Category) -> int:
        return self.db.query(Restaurant).filter(Restaurant.category_id == category.id).count()

    def all_categories(self) -> AllCategoriesOutput:
        try:
            categories = self.db.query(Category).order_by(Category.name.asc()).all()
            return AllCategoriesOutput(ok=True, categories=[
                CategoryWithCount(
                    **CategoryRead.model_validate(category).model_dump(),
                    restaurant_count=self.count_restaurants(category),
                )
                for category in categories
            ])
        except Exception:
            logger.exception("all_categories failed")
            return AllCategoriesOutput(ok=False, error="Could not get all categories")

    def find_category_by_slug(self, slug: str, page: int = 1) -> CategoryOutput:
        try:
            category = self.db.query(Category).filter(Category.slug == slug).first()
            if category is None:
                return CategoryOutput(ok=False, error="Could not find category")
            restaurants, total_results = self._paged(
                self.db.query(Restaurant).filter(Restaurant.category_id == category.id), page
            )
            return CategoryOutput(
                ok=True,
                category=CategoryRead.model_validate(category),
                restaurants=[RestaurantRead.model_validate(r) for r in restaurants],
                total_pages=self._total_pages(total_results),
                total_results=total_results,
            )
        except ServiceError as e:
            return CategoryOutput(ok=False, error=e.message)
        except Exception:
            logger.exception("find_category_by_slug failed")
            return CategoryOutput(ok=False, error="Could not load category")

    def all_restaurants(self, page: int = 1) -> RestaurantsOutput:
        try:
            restaurants, total_results = self._paged(self.db.query(Restaurant), page)
            return RestaurantsOutput(
                ok=True,
                results=[RestaurantRead.model_validate(r) for r in restaurants],
                total_pages=self._total_pages(total_results),
                total_results=total_results,
            )
        except ServiceError as e:
            return RestaurantsOutput(ok=False, error=e.message)
        except Exception:
            logger.exception("all_restaurants failed")
            return RestaurantsOutput(ok=False, error="Could not find restaurants")

    def find_restaurant_by_id(self, restaurant_id: int) -> RestaurantOutput:
        try:
            restaurant = self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
            if restaurant is None:
                return RestaurantOutput(ok=False, error="Restaurant does not exist")
            return RestaurantOutput(ok=True, restaurant=RestaurantDetail.model_validate(restaurant))
        except Exception:
            logger.exception("find_restaurant_by_id failed")
            return RestaurantOutput(ok=False, error="Could not find restaurant")

    def search_restaurant_by_name(self, query: str, page: int = 1) -> SearchRestaurantOutput:
        """Case-insensitive substring match; ``%`` and ``_`` in ``query`` match literally."""
        try:
            pattern = f"%{_escape_like(query)}%"
            restaurants, total_results = self._paged(
                self.db.query(Restaurant).filter(Restaurant.name.ilike(pattern, escape="\\")), page
            )
            return SearchRestaurantOutput(
                ok=True,
                restaurants=[RestaurantRead.model_validate(r) for r in restaurants],
                total_pages=self._total_pages(total_results),
                total_results=total_results,
            )
        except ServiceError as e:
            return SearchRestaurantOutput(ok=False, error=e.message)
        except Exception:
            logger.exception("search_restaurant_by_name failed")
            return SearchRestaurantOutput(ok=False, error="Could not search restaurant")

    def create_dish(self, owner: User, data: CreateDishInput) -> CreateDishOutput:
        try:
            restaurant = self.db.query(Restaurant).filter(Restaurant.id == data.restaurant_id).first()
            if restaurant is None:
                return CreateDishOutput(ok=False, error="There is no restaurant with that id")
            if restaurant.owner_id != owner.id:
                return CreateDishOutput(ok=False, error="Not allowed account to do this")
            dish = Dish(
                name=data.name,
                price=data.price,
                photo=data.photo,
                description=data.description,
                options=[o.model_dump(exclude_none=True) for o in data.options] if data.options else None,
                restaurant_id=restaurant.id,
            )
            self.db.add(dish)
            self.db.commit()
            return CreateDishOutput(ok=True, dish_id=dish.id)
        except Exception:
            self.db.rollback()
            logger.exception("create_dish failed")
            return CreateDishOutput(ok=False, error="Could not create a dish")

    def _owned_dish(self, owner: User, dish_id: int) -> Dish:
        dish = self.db.query(Dish).filter(Dish.id == dish_id).first()
        if dish is None:
            raise NotFound("There is no dish")
        if dish.restaurant.owner_id != owner.id:
            raise Unauthorized()
        return dish

    def edit_dish(self, owner: User, data: EditDishInput) -> CoreOutput:
        try:
            dish = self._owned_dish(owner, data.dish_id)
            for field in ("name", "price", "photo", "description"):
                value = getattr(data, field)
                if value is not None:
                    setattr(dish, field, value)
            if data.options is not None:
                dish.options = [o.model_dump(exclude_none=True) for o in data.options]
            self.db.add(dish)
            self.db.commit()
            return CoreOutput(ok=True)
        except ServiceError as e:
            return CoreOutput(ok=False, error=e.message)
        except Exception:
            self.db.rollback()
            logger.exception("edit_dish failed")
            return CoreOutput(ok=False, error="Could not edit dish")

    def delete_dish(self, owner: User, dish_id: int) -> CoreOutput:
        try:
            dish = self._owned_dish(owner, dish_id)
            self.db.delete(dish)
            self.db.commit()
            return CoreOutput(ok=True)
        except ServiceError as e:
            return CoreOutput(ok=False, error=e.message)
        except Exception:
            self.db.rollback()
            logger.exception("delete_dish failed")
            return CoreOutput(ok=False, error="Could not delete the dish")
