from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eats.db.session import get_db
from eats.models.order import OrderStatus
from eats.schemas.order import (
    CreateOrderInput, CreateOrderOutput, EditOrderInput, EditOrderOutput, GetOrderOutput, GetOrdersOutput,
    TakeOrderOutput,
)
from eats.services.auth import require_roles
from eats.services.orders import OrderService
from eats.utils.pubsub import PubSub, get_pubsub

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_service(db: Session = Depends(get_db), pubsub: PubSub = Depends(get_pubsub)):
    return OrderService(db, pubsub)


@router.post("", response_model=CreateOrderOutput)
@router.post("/", response_model=CreateOrderOutput)
def create_order(payload: CreateOrderInput, customer=Depends(require_roles("Client")),
                 service: OrderService = Depends(get_order_service)):
    return service.create_order(customer, payload)


@router.get("", response_model=GetOrdersOutput)
@router.get("/", response_model=GetOrdersOutput)
def list_orders(status: Optional[OrderStatus] = None, user=Depends(require_roles("Any")),
                service: OrderService = Depends(get_order_service)):
    return service.get_orders(user, status)


@router.get("/{order_id}", response_model=GetOrderOutput)
def get_order(order_id: int, user=Depends(require_roles("Any")),
              service: OrderService = Depends(get_order_service)):
    return service.get_order(user, order_id)


@router.patch("/{order_id}", response_model=EditOrderOutput)
def edit_order(order_id: int, payload: EditOrderInput, user=Depends(require_roles("Any")),
               service: OrderService = Depends(get_order_service)):
    """Set the order status; which statuses are allowed depends on the caller's role."""
    return service.edit_order(user, order_id, payload.status)


@router.post("/{order_id}/take", response_model=TakeOrderOutput)
def take_order(order_id: int, driver=Depends(require_roles("Delivery")),
               service: OrderService = Depends(get_order_service)):
    return service.take_order(driver, order_id)
