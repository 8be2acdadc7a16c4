import anyio
import pytest

from crimson import Scheduler

pytestmark = pytest.mark.anyio


def test_negative_quantum_is_rejected():
    with pytest.raises(ValueError):
        Scheduler(quantum=-1)


async def test_call_later_never_runs_inline():
    scheduler = Scheduler(quantum=0.01)
    ran = []

    async with anyio.create_task_group() as tg:
        tg.start_soon(scheduler.run)

        scheduler.call_later(lambda: ran.append("x"))
        assert ran == []

        await anyio.sleep(0)
        assert ran == []

        await scheduler.next_tick()
        assert ran == []

        await scheduler.next_tick()
        assert ran == ["x"]

        scheduler.close()


async def test_call_later_is_released_on_the_second_tick():
    scheduler = Scheduler(quantum=0.01)
    released_on = []

    async with anyio.create_task_group() as tg:
        tg.start_soon(scheduler.run)

        submitted_on = scheduler.tick
        scheduler.call_later(lambda: released_on.append(scheduler.tick))
        await scheduler.next_tick()
        await scheduler.next_tick()
        scheduler.close()

    assert released_on == [submitted_on + 2]


async def test_ticks_are_at_least_one_quantum_apart():
    quantum = 0.02
    scheduler = Scheduler(quantum=quantum)
    seen = []
    scheduler.on_tick(lambda: seen.append(anyio.current_time()))

    async with anyio.create_task_group() as tg:
        tg.start_soon(scheduler.run)
        for _ in range(4):
            await scheduler.next_tick()
        scheduler.close()

    gaps = [b - a for a, b in zip(seen, seen[1:])]
    assert all(gap >= quantum * 0.99 for gap in gaps)


async def test_hooks_run_before_release():
    scheduler = Scheduler(quantum=0.005)
    order = []
    scheduler.on_tick(lambda: order.append(("hook", scheduler.tick)))

    async with anyio.create_task_group() as tg:
        tg.start_soon(scheduler.run)
        scheduler.call_later(lambda: order.append(("release", scheduler.tick)))
        await scheduler.next_tick()
        await scheduler.next_tick()
        scheduler.close()

    assert order[:3] == [("hook", 1), ("hook", 2), ("release", 2)]


async def test_submissions_are_released_in_order():
    scheduler = Scheduler(quantum=0.001)
    order = []

    async with anyio.create_task_group() as tg:
        tg.start_soon(scheduler.run)
        for i in range(50):
            scheduler.call_later(lambda i=i: order.append(i))
        scheduler.close()

    assert order == list(range(50))


async def test_close_releases_backlog_and_drops_later_calls():
    scheduler = Scheduler(quantum=0.005)
    ran = []

    async with anyio.create_task_group() as tg:
        tg.start_soon(scheduler.run)
        scheduler.call_later(lambda: ran.append("before"))
        scheduler.close()
        scheduler.call_later(lambda: ran.append("after"))

    assert scheduler.closed
    assert ran == ["before"]
    assert scheduler.pending == 0
