import logging
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from eats.core.exceptions import (
    AlreadyAssigned, InternalFailure, OrderNotFound, RestaurantNotFound, ServiceError, Unauthorized,
)
from eats.core.permissions import TERMINAL_STATUSES, can_see_order, can_set_status
from eats.models.dish import Dish
from eats.models.order import Order, OrderStatus
from eats.models.order_item import OrderItem
from eats.models.restaurant import Restaurant
from eats.models.user import User, UserRole
from eats.schemas.order import (
    CreateOrderInput, CreateOrderOutput, EditOrderOutput, GetOrderOutput, GetOrdersOutput, OrderRead,
    TakeOrderOutput,
)
from eats.services.pricing import compute_order
from eats.utils.pubsub import NEW_COOKED_ORDER, NEW_ORDER_UPDATE, NEW_PENDING_ORDER, PubSub, Subscription

logger = logging.getLogger("eats.orders")


def order_payload(order: Order) -> dict:
    """JSON-ready snapshot of an order as carried by pub/sub events."""
    return OrderRead.model_validate(order).model_dump(mode="json")


class OrderService:
    def __init__(self, db: Session, pubsub: PubSub):
        self.db = db
        self.pubsub = pubsub

    def _load(self, order_id: int) -> Optional[Order]:
        return self.db.query(Order).filter(Order.id == order_id).first()

    def _load_visible(self, user: User, order_id: int, not_found: str) -> Order:
        order = self._load(order_id)
        if order is None:
            raise OrderNotFound(not_found)
        if not can_see_order(user, order):
            raise Unauthorized()
        return order

    def create_order(self, customer: User, data: CreateOrderInput) -> CreateOrderOutput:
        try:
            restaurant = self.db.query(Restaurant).filter(Restaurant.id == data.restaurant_id).first()
            if restaurant is None:
                raise RestaurantNotFound()

            def dish_lookup(dish_id):
                return self.db.query(Dish).filter(Dish.id == dish_id).first()

            # raises DishNotFound before anything is added to the session
            total, resolved = compute_order(dish_lookup, data.items)

            order = Order(
                customer_id=customer.id,
                restaurant=restaurant,
                total=total,
                status=OrderStatus.Pending,
            )
            for entry in resolved:
                order.items.append(OrderItem(
                    dish=entry.dish,
                    choices=[c.model_dump() if hasattr(c, "model_dump") else dict(c) for c in entry.choices],
                ))
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)
            logger.info(f"order created id={order.id} restaurant={restaurant.id} total={total}")

            self.pubsub.publish(NEW_PENDING_ORDER, {
                "order": order_payload(order),
                "owner_id": restaurant.owner_id,
            })
            return CreateOrderOutput(ok=True, order_id=order.id)
        except ServiceError as e:
            self.db.rollback()
            return CreateOrderOutput(ok=False, error=e.message)
        except Exception:
            self.db.rollback()
            logger.exception("create_order failed")
            return CreateOrderOutput(ok=False, error="Could not create an order")

    def get_orders(self, user: User, status: Optional[OrderStatus] = None) -> GetOrdersOutput:
        try:
            query = self.db.query(Order)
            if user.role == UserRole.Client:
                query = query.filter(Order.customer_id == user.id)
            elif user.role == UserRole.Delivery:
                query = query.filter(Order.driver_id == user.id)
            elif user.role == UserRole.Owner:
                owned = select(Restaurant.id).where(Restaurant.owner_id == user.id)
                query = query.filter(Order.restaurant_id.in_(owned))
            else:
                return GetOrdersOutput(ok=True, orders=[])
            if status is not None:
                query = query.filter(Order.status == status)
            orders = query.order_by(Order.id.asc()).all()
            return GetOrdersOutput(ok=True, orders=[OrderRead.model_validate(o) for o in orders])
        except Exception:
            logger.exception("get_orders failed")
            return GetOrdersOutput(ok=False, error="Could not get orders")

    def get_order(self, user: User, order_id: int) -> GetOrderOutput:
        try:
            order = self._load_visible(user, order_id, "Order not found")
            return GetOrderOutput(ok=True, order=OrderRead.model_validate(order))
        except ServiceError as e:
            return GetOrderOutput(ok=False, error=e.message)
        except Exception:
            logger.exception("get_order failed")
            return GetOrderOutput(ok=False, error="Could not get an order")

    def edit_order(self, user: User, order_id: int, status: OrderStatus) -> EditOrderOutput:
        try:
            order = self._load_visible(user, order_id, "Could not find an order")
            if not can_set_status(user.role, status):
                raise Unauthorized()
            if order.status in TERMINAL_STATUSES:
                logger.warning(f"order {order.id} moved out of terminal status {order.status.value} to {status.value}")

            order.status = status
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)

            payload = order_payload(order)
            if user.role == UserRole.Owner and status == OrderStatus.Cooked:
                self.pubsub.publish(NEW_COOKED_ORDER, {"order": payload})
            self.pubsub.publish(NEW_ORDER_UPDATE, {"order": payload})
            return EditOrderOutput(ok=True)
        except ServiceError as e:
            return EditOrderOutput(ok=False, error=e.message)
        except Exception:
            self.db.rollback()
            logger.exception("edit_order failed")
            return EditOrderOutput(ok=False, error="Could not edit an order")

    def take_order(self, driver: User, order_id: int) -> TakeOrderOutput:
        try:
            order = self._load(order_id)
            if order is None:
                raise OrderNotFound()
            if order.driver_id is not None:
                raise AlreadyAssigned()
            order.driver_id = driver.id
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)
            logger.info(f"order {order.id} taken by driver {driver.id}")
            self.pubsub.publish(NEW_ORDER_UPDATE, {"order": order_payload(order)})
            return TakeOrderOutput(ok=True)
        except ServiceError as e:
            return TakeOrderOutput(ok=False, error=e.message)
        except Exception:
            self.db.rollback()
            logger.exception("take_order failed")
            return TakeOrderOutput(ok=False, error="Could not update an order")

    # --- subscriptions; these must be called from inside the event loop ---

    def subscribe_pending_orders(self, owner: User) -> Subscription:
        owner_id = owner.id
        return self.pubsub.subscribe(
            NEW_PENDING_ORDER,
            filter_fn=lambda payload: payload["owner_id"] == owner_id,
            resolve=lambda payload: payload["order"],
        )

    def subscribe_cooked_orders(self) -> Subscription:
        return self.pubsub.subscribe(NEW_COOKED_ORDER, resolve=lambda payload: payload["order"])

    def subscribe_order(self, user: User, order_id: int) -> Union[Subscription, ServiceError]:
        """Stream of updates for one order, or an error object (not raised).

        Unauthorized covers both a missing order and one the user may not see.
        """
        try:
            order = self._load(order_id)
        except Exception:
            logger.exception("subscribe_order failed")
            return InternalFailure("Could not subscribe to order")
        if order is None or not can_see_order(user, order):
            return Unauthorized()
        return self.pubsub.subscribe(
            NEW_ORDER_UPDATE,
            filter_fn=lambda payload: payload["order"]["id"] == order_id,
            resolve=lambda payload: payload["order"],
        )
