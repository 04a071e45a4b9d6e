"""Role policy for orders: who may see an order and which statuses each role may set."""
from typing import Dict, FrozenSet

from eats.models.order import Order, OrderStatus
from eats.models.user import User, UserRole

# Target statuses each role may set. The current status of the order is not
# consulted: an owner may move a Delivered order back to Cooking.
PERMITTED_STATUSES: Dict[UserRole, FrozenSet[OrderStatus]] = {
    UserRole.Owner: frozenset({OrderStatus.Cooking, OrderStatus.Cooked, OrderStatus.Canceled}),
    UserRole.Delivery: frozenset({OrderStatus.PickedUp, OrderStatus.Delivered}),
    UserRole.Client: frozenset({OrderStatus.Canceled}),
}

TERMINAL_STATUSES = frozenset({OrderStatus.Delivered, OrderStatus.Canceled})


def can_see_order(user: User, order: Order) -> bool:
    if user is None or order is None:
        return False
    if user.role == UserRole.Client:
        return order.customer_id == user.id
    if user.role == UserRole.Delivery:
        return order.driver_id == user.id
    if user.role == UserRole.Owner:
        restaurant = order.restaurant
        return restaurant is not None and restaurant.owner_id == user.id
    return False


def can_set_status(role: UserRole, status: OrderStatus) -> bool:
    return status in PERMITTED_STATUSES.get(role, frozenset())


def role_allowed(role, allowed_roles) -> bool:
    """Route-level predicate; ``"Any"`` admits every authenticated role."""
    if "Any" in allowed_roles:
        return True
    role_value = role.value if hasattr(role, "value") else str(role)
    return role_value in allowed_roles
