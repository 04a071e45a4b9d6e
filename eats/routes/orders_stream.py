import json

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.responses import StreamingResponse

from eats.core.exceptions import ServiceError, Unauthorized
from eats.routes.orders import get_order_service
from eats.services.auth import require_roles
from eats.services.orders import OrderService
from eats.utils.pubsub import Subscription

# server-sent event streams for live order notifications
router = APIRouter(prefix="/orders/stream", tags=["Orders"])


async def event_generator(subscription: Subscription):
    try:
        async for order in subscription:
            # yield as server-sent event
            yield f"data: {json.dumps(order)}\n\n"
    finally:
        # also reached when the client disconnects and the generator is cancelled
        subscription.close()


def stream(subscription: Subscription) -> StreamingResponse:
    return StreamingResponse(event_generator(subscription), media_type="text/event-stream")


@router.get("/pending")
async def pending_orders(owner=Depends(require_roles("Owner")),
                         service: OrderService = Depends(get_order_service)):
    """New orders placed at any restaurant the caller owns."""
    return stream(service.subscribe_pending_orders(owner))


@router.get("/cooked")
async def cooked_orders(driver=Depends(require_roles("Delivery")),
                        service: OrderService = Depends(get_order_service)):
    """Orders the kitchen marked as cooked, for every driver."""
    return stream(service.subscribe_cooked_orders())


@router.get("/{order_id}")
async def order_updates(order_id: int, user=Depends(require_roles("Any")),
                        service: OrderService = Depends(get_order_service)):
    subscription = service.subscribe_order(user, order_id)
    if isinstance(subscription, Unauthorized):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=subscription.message)
    if isinstance(subscription, ServiceError):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=subscription.message)
    return stream(subscription)
