import pytest
from pydantic import ValidationError

from eats.models.dish import Dish
from eats.models.restaurant import Category, Restaurant
from eats.models.user import UserRole
from eats.schemas.dish import CreateDishInput, DishOption, EditDishInput
from eats.schemas.restaurant import CreateRestaurantInput, EditRestaurantInput
from eats.services.restaurants import RestaurantsService, slugify


@pytest.fixture
def service(db):
    return RestaurantsService(db, page_size=2)


@pytest.fixture
def owner(make_user):
    return make_user(UserRole.Owner)


def _create(service, owner, name="Burger Hut", category="Fast Food"):
    result = service.create_restaurant(
        owner, CreateRestaurantInput(name=name, address="2 Side St", category_name=category)
    )
    assert result.ok, result.error
    return result.restaurant_id


def test_slugify():
    assert slugify("  Fast   Food ") == "fast-food"


def test_create_restaurant_reuses_category(db, service, owner):
    _create(service, owner, category="Fast Food")
    _create(service, owner, name="Other", category="fast food")
    assert db.query(Category).count() == 1
    assert db.query(Category).one().slug == "fast-food"


def test_edit_restaurant_only_by_owner(db, service, owner, make_user):
    restaurant_id = _create(service, owner)

    stranger = make_user(UserRole.Owner)
    result = service.edit_restaurant(stranger, EditRestaurantInput(restaurant_id=restaurant_id, name="Mine"))
    assert result.error == "Can not edit restaurant that you do not own"

    result = service.edit_restaurant(owner, EditRestaurantInput(restaurant_id=restaurant_id, name="Renamed",
                                                                category_name="Korean BBQ"))
    assert result.ok
    restaurant = db.get(Restaurant, restaurant_id)
    assert restaurant.name == "Renamed"
    assert restaurant.address == "2 Side St"
    assert restaurant.category.slug == "korean-bbq"

    missing = service.edit_restaurant(owner, EditRestaurantInput(restaurant_id=999))
    assert missing.error == "Restaurant not found"


def test_delete_restaurant(db, service, owner, make_user):
    restaurant_id = _create(service, owner)
    assert service.delete_restaurant(make_user(UserRole.Owner), restaurant_id).error == \
        "Can not edit restaurant that you do not own"
    assert service.delete_restaurant(owner, restaurant_id).ok
    assert db.query(Restaurant).count() == 0


def test_pagination_and_promoted_first(db, service, owner):
    ids = [_create(service, owner, name=f"R{i}") for i in range(3)]
    promoted = db.get(Restaurant, ids[2])
    promoted.is_promoted = True
    db.commit()

    first = service.all_restaurants(1)
    assert first.total_results == 3
    assert first.total_pages == 2
    assert [r.id for r in first.results] == [ids[2], ids[0]]
    assert [r.id for r in service.all_restaurants(2).results] == [ids[1]]
    assert service.all_restaurants(3).results == []
    assert service.all_restaurants(0).error == "Page must be greater than 0"


def test_categories_with_counts(service, owner):
    _create(service, owner, category="Pizza")
    _create(service, owner, name="Two", category="Pizza")
    _create(service, owner, name="Three", category="Sushi")

    result = service.all_categories()
    assert [(c.slug, c.restaurant_count) for c in result.categories] == [("pizza", 2), ("sushi", 1)]

    pizza = service.find_category_by_slug("pizza", 1)
    assert pizza.category.name == "Pizza"
    assert pizza.total_results == 2
    assert service.find_category_by_slug("tacos").error == "Could not find category"


def test_search_by_name_is_case_insensitive(service, owner):
    burger = _create(service, owner, name="Burger Hut")
    _create(service, owner, name="Noodle Bar")
    result = service.search_restaurant_by_name("burger")
    assert [r.id for r in result.restaurants] == [burger]
    assert result.total_results == 1


def test_find_restaurant_includes_menu(service, owner):
    restaurant_id = _create(service, owner)
    service.create_dish(owner, CreateDishInput(restaurant_id=restaurant_id, name="Fries", price=30,
                                               description="crispy fries"))
    result = service.find_restaurant_by_id(restaurant_id)
    assert [d.name for d in result.restaurant.menu] == ["Fries"]
    assert service.find_restaurant_by_id(999).error == "Restaurant does not exist"


def test_dish_lifecycle(db, service, owner, make_user):
    restaurant_id = _create(service, owner)
    options = [DishOption(name="Size", choices=[{"name": "L", "extra": 10}])]
    created = service.create_dish(owner, CreateDishInput(restaurant_id=restaurant_id, name="Cola", price=20,
                                                         options=options))
    assert created.ok
    dish = db.get(Dish, created.dish_id)
    assert dish.options == [{"name": "Size", "choices": [{"name": "L", "extra": 10}]}]

    stranger = make_user(UserRole.Owner)
    assert service.create_dish(stranger, CreateDishInput(restaurant_id=restaurant_id, name="X", price=1)).error \
        == "Not allowed account to do this"
    assert service.edit_dish(stranger, EditDishInput(dish_id=dish.id, price=1)).error == "Unauthorized user"

    assert service.edit_dish(owner, EditDishInput(dish_id=dish.id, price=25)).ok
    db.refresh(dish)
    assert dish.price == 25
    assert dish.name == "Cola"

    assert service.delete_dish(owner, 999).error == "There is no dish"
    assert service.delete_dish(owner, dish.id).ok
    assert db.query(Dish).count() == 0


def test_dish_with_negative_extra_is_rejected(service, owner):
    restaurant_id = _create(service, owner)
    with pytest.raises(ValidationError):
        CreateDishInput(restaurant_id=restaurant_id, name="Deal", price=100,
                        options=[{"name": "Discount", "extra": -500}])
    with pytest.raises(ValidationError):
        EditDishInput(dish_id=1, options=[{"name": "Size", "choices": [{"name": "S", "extra": -5}]}])


def test_search_treats_wildcards_literally(service, owner):
    literal = _create(service, owner, name="100% Burger")
    _create(service, owner, name="1000 Burgers")
    _create(service, owner, name="Fish_Bar")
    _create(service, owner, name="FishXBar")

    assert [r.id for r in service.search_restaurant_by_name("100%").restaurants] == [literal]
    assert service.search_restaurant_by_name("Fish_").total_results == 1
    assert service.search_restaurant_by_name("%").total_results == 1
