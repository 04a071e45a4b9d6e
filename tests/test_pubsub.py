import asyncio
import threading

from eats.utils.pubsub import NEW_COOKED_ORDER, NEW_PENDING_ORDER, PubSub


async def _take(subscription, n, timeout=1.0):
    items = []
    for _ in range(n):
        items.append(await asyncio.wait_for(subscription.__anext__(), timeout))
    return items


def test_every_listener_gets_each_event():
    async def scenario():
        bus = PubSub()
        first = bus.subscribe(NEW_COOKED_ORDER)
        second = bus.subscribe(NEW_COOKED_ORDER)
        assert bus.publish(NEW_COOKED_ORDER, {"id": 1}) == 2
        assert bus.publish(NEW_COOKED_ORDER, {"id": 2}) == 2
        assert await _take(first, 2) == [{"id": 1}, {"id": 2}]
        assert await _take(second, 2) == [{"id": 1}, {"id": 2}]

    asyncio.run(scenario())


def test_channels_are_independent():
    async def scenario():
        bus = PubSub()
        pending = bus.subscribe(NEW_PENDING_ORDER)
        assert bus.publish(NEW_COOKED_ORDER, {"id": 1}) == 0
        assert pending.queue.empty()

    asyncio.run(scenario())


def test_filter_and_resolve():
    async def scenario():
        bus = PubSub()
        sub = bus.subscribe(
            NEW_PENDING_ORDER,
            filter_fn=lambda payload: payload["owner_id"] == 7,
            resolve=lambda payload: payload["order"],
        )
        assert bus.publish(NEW_PENDING_ORDER, {"owner_id": 8, "order": {"id": 1}}) == 0
        assert bus.publish(NEW_PENDING_ORDER, {"owner_id": 7, "order": {"id": 2}}) == 1
        assert await _take(sub, 1) == [{"id": 2}]

    asyncio.run(scenario())


def test_failing_filter_skips_listener():
    async def scenario():
        bus = PubSub()
        bus.subscribe(NEW_PENDING_ORDER, filter_fn=lambda payload: payload["missing"])
        assert bus.publish(NEW_PENDING_ORDER, {}) == 0

    asyncio.run(scenario())


def test_late_subscriber_gets_nothing_old():
    async def scenario():
        bus = PubSub()
        bus.publish(NEW_COOKED_ORDER, {"id": 1})
        sub = bus.subscribe(NEW_COOKED_ORDER)
        bus.publish(NEW_COOKED_ORDER, {"id": 2})
        assert await _take(sub, 1) == [{"id": 2}]
        assert sub.queue.empty()

    asyncio.run(scenario())


def test_close_subscription_ends_iteration():
    async def scenario():
        bus = PubSub()
        sub = bus.subscribe(NEW_COOKED_ORDER)
        bus.publish(NEW_COOKED_ORDER, {"id": 1})
        sub.close()
        assert bus.listener_count(NEW_COOKED_ORDER) == 0
        assert [item async for item in sub] == [{"id": 1}]

    asyncio.run(scenario())


def test_closing_bus_ends_all_streams():
    async def scenario():
        bus = PubSub()
        subs = [bus.subscribe(NEW_COOKED_ORDER), bus.subscribe(NEW_PENDING_ORDER)]
        bus.close()
        for sub in subs:
            assert [item async for item in sub] == []
        late = bus.subscribe(NEW_COOKED_ORDER)
        assert [item async for item in late] == []
        assert bus.get_status() == {}

    asyncio.run(scenario())


def test_publish_from_worker_thread():
    async def scenario():
        bus = PubSub()
        sub = bus.subscribe(NEW_COOKED_ORDER)
        worker = threading.Thread(target=bus.publish, args=(NEW_COOKED_ORDER, {"id": 3}))
        worker.start()
        await asyncio.to_thread(worker.join)
        assert await _take(sub, 1) == [{"id": 3}]

    asyncio.run(scenario())


def test_status_counts_listeners():
    async def scenario():
        bus = PubSub()
        bus.subscribe(NEW_COOKED_ORDER)
        bus.subscribe(NEW_COOKED_ORDER)
        bus.subscribe(NEW_PENDING_ORDER)
        assert bus.get_status() == {NEW_COOKED_ORDER: 2, NEW_PENDING_ORDER: 1}
        assert bus.listener_count() == 3

    asyncio.run(scenario())
