import asyncio
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from starlette.requests import Request

logger = logging.getLogger("eats.pubsub")

NEW_PENDING_ORDER = "new-pending-order"
NEW_COOKED_ORDER = "new-cooked-order"
NEW_ORDER_UPDATE = "order-updated"

_CLOSED = object()


class Subscription:
    """Async iterator over the events of one channel for one listener.

    Each subscription owns an unbounded queue bound to the event loop it was
    created on, so a publisher never waits for the listener.
    """

    def __init__(self, pubsub: "PubSub", channel: str,
                 filter_fn: Optional[Callable[[Any], bool]] = None,
                 resolve: Optional[Callable[[Any], Any]] = None):
        self.pubsub = pubsub
        self.channel = channel
        self.filter_fn = filter_fn
        self.resolve = resolve
        self.loop = asyncio.get_running_loop()
        self.queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    def matches(self, payload: Any) -> bool:
        if self.filter_fn is None:
            return True
        try:
            return bool(self.filter_fn(payload))
        except Exception:
            logger.exception("Subscription filter failed on channel %s", self.channel)
            return False

    def push(self, item: Any) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self.loop:
            self.queue.put_nowait(item)
        else:
            # publishing from a worker thread (sync route) or another loop
            try:
                self.loop.call_soon_threadsafe(self.queue.put_nowait, item)
            except RuntimeError:
                # listener's loop already closed; drop it
                self.pubsub.unsubscribe(self)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.closed and self.queue.empty():
            raise StopAsyncIteration
        item = await self.queue.get()
        if item is _CLOSED:
            self.closed = True
            raise StopAsyncIteration
        return self.resolve(item) if self.resolve else item

    def close(self) -> None:
        """Stop listening; pending events are still drained by the iterator."""
        if self.closed:
            return
        self.pubsub.unsubscribe(self)
        self.push(_CLOSED)


class PubSub:
    """In-process fan-out publish/subscribe.

    One instance lives for the whole process. Every listener subscribed to a
    channel at publish time receives its own copy of each matching event;
    nothing is stored for listeners that subscribe later.
    """

    def __init__(self):
        self._channels: Dict[str, List[Subscription]] = {}
        self._lock = threading.Lock()
        self._closed = False

    def subscribe(self, channel: str, filter_fn: Callable[[Any], bool] = None,
                  resolve: Callable[[Any], Any] = None) -> Subscription:
        """Register a listener; must be called from inside a running event loop."""
        sub = Subscription(self, channel, filter_fn=filter_fn, resolve=resolve)
        with self._lock:
            if self._closed:
                sub.closed = True
                sub.queue.put_nowait(_CLOSED)
                return sub
            self._channels.setdefault(channel, []).append(sub)
        logger.debug(f"subscribe channel={channel} listeners={self.listener_count(channel)}")
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            try:
                self._channels.get(sub.channel, []).remove(sub)
            except ValueError:
                pass

    def publish(self, channel: str, payload: Any) -> int:
        """Deliver ``payload`` to every matching listener; returns how many got it."""
        with self._lock:
            listeners = list(self._channels.get(channel, []))
        delivered = 0
        for sub in listeners:
            if not sub.matches(payload):
                continue
            sub.push(payload)
            delivered += 1
        logger.debug(f"publish channel={channel} delivered={delivered}")
        return delivered

    def listener_count(self, channel: str = None) -> int:
        with self._lock:
            if channel is not None:
                return len(self._channels.get(channel, []))
            return sum(len(subs) for subs in self._channels.values())

    def get_status(self) -> dict:
        """Small debug status: number of listeners per channel."""
        with self._lock:
            return {channel: len(subs) for channel, subs in self._channels.items()}

    def close(self) -> None:
        """End every open stream; later subscriptions end immediately."""
        with self._lock:
            self._closed = True
            listeners = [sub for subs in self._channels.values() for sub in subs]
            self._channels.clear()
        for sub in listeners:
            sub.push(_CLOSED)
        logger.info(f"pubsub closed, {len(listeners)} listener(s) released")


def get_pubsub(request: Request) -> PubSub:
    """FastAPI dependency returning the process-wide bus created at startup."""
    return request.app.state.pubsub
