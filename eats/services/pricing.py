from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple

from eats.core.exceptions import DishNotFound
from eats.models.dish import Dish


class ResolvedItem(NamedTuple):
    dish: Dish
    choices: list
    price: int


def _field(obj, name):
    # choices arrive as pydantic models from routes and as dicts from JSON columns
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _find_by_name(entries, name) -> Optional[dict]:
    for entry in entries or []:
        if _field(entry, "name") == name:
            return entry
    return None


def item_price(dish: Dish, choices: Iterable) -> int:
    """Dish base price plus the extras of the selected options/choices.

    A selection naming an unknown option or choice adds nothing. When the
    option has its own ``extra`` the choice extras are not consulted.
    Negative extras stored outside the schemas count as zero and the result
    is never below zero.
    """
    price = dish.price
    for selected in choices or []:
        option = _find_by_name(dish.options, _field(selected, "name"))
        if option is None:
            continue
        option_extra = _field(option, "extra")
        if option_extra:
            price += max(option_extra, 0)
            continue
        choice = _find_by_name(_field(option, "choices"), _field(selected, "choice"))
        if choice is not None and _field(choice, "extra"):
            price += max(_field(choice, "extra"), 0)
    return max(price, 0)


def compute_order(dish_lookup: Callable[[int], Optional[Dish]], items: Iterable) -> Tuple[int, List[ResolvedItem]]:
    """Price every requested item; raises DishNotFound on the first missing dish."""
    total = 0
    resolved = []
    for item in items:
        dish = dish_lookup(_field(item, "dish_id"))
        if dish is None:
            raise DishNotFound()
        choices = list(_field(item, "choices") or [])
        price = item_price(dish, choices)
        resolved.append(ResolvedItem(dish, choices, price))
        total += price
    return total, resolved
