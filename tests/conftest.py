import dataclasses
from collections.abc import Callable

import anyio
import pytest

from crimson import monkay


class Collector:
    """Actor that records every `(from_, value)` it receives."""

    def __init__(self) -> None:
        self.received: list[tuple[str, object]] = []

    @property
    def values(self) -> list[object]:
        return [value for _, value in self.received]

    def run(self, sender, receiver) -> None:
        receiver.on(lambda from_, value: self.received.append((from_, value)))


class Forwarder:
    """Actor that passes every value on to a fixed address."""

    def __init__(self, to: str) -> None:
        self.to = to

    def run(self, sender, receiver) -> None:
        receiver.on(lambda from_, value: sender.send(self.to, value))


class Boom:
    """Actor that raises on the value "boom" and records everything else."""

    def __init__(self) -> None:
        self.seen: list[object] = []

    def run(self, sender, receiver) -> None:
        def handle(from_, value):
            if value == "boom":
                raise RuntimeError("crash")
            self.seen.append(value)

        receiver.on(handle)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    with anyio.fail_after(timeout):
        while not predicate():
            await anyio.sleep(0.001)


def flatten(exc: BaseException) -> list[BaseException]:
    inner = getattr(exc, "exceptions", None)
    if inner is None:
        return [exc]
    return [leaf for e in inner for leaf in flatten(e)]


@pytest.fixture(scope="module", params=["asyncio"])
def anyio_backend(request):
    return request.param


@pytest.fixture()
def settings():
    conf = monkay.settings
    saved = dataclasses.asdict(conf)
    yield conf
    for key, value in saved.items():
        setattr(conf, key, value)
