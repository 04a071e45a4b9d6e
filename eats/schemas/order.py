from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

from eats.models.order import OrderStatus
from eats.schemas.common import CoreOutput


class OrderItemChoice(BaseModel):
    # option name on the dish
    name: str
    # choice name inside that option, when the option has choices
    choice: Optional[str] = None


class CreateOrderItemInput(BaseModel):
    dish_id: int
    choices: List[OrderItemChoice] = []


class CreateOrderInput(BaseModel):
    restaurant_id: int
    items: List[CreateOrderItemInput]


class CreateOrderOutput(CoreOutput):
    order_id: Optional[int] = None


class OrderItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    dish_id: int
    choices: Optional[List[OrderItemChoice]] = None


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: OrderStatus
    total: int
    customer_id: Optional[int] = None
    driver_id: Optional[int] = None
    restaurant_id: Optional[int] = None
    items: List[OrderItemRead] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GetOrdersOutput(CoreOutput):
    orders: Optional[List[OrderRead]] = None


class GetOrderOutput(CoreOutput):
    order: Optional[OrderRead] = None


class EditOrderInput(BaseModel):
    status: OrderStatus


class EditOrderOutput(CoreOutput):
    pass


class TakeOrderOutput(CoreOutput):
    pass
