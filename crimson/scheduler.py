from __future__ import annotations
"""
The scheduling clock.

Every timed step in a system runs on one shared grid of ticks, at least one
quantum apart. At each tick the scheduler, in this order and without
yielding:

1. runs its tick hooks (the system uses them to mark each mailbox's backlog),
2. releases the deferred submissions that were waiting at the previous tick,
3. wakes every drain loop waiting in `next_tick()`.

An actor's `send(...)` is therefore released on the second tick after the
call and reaches its receiver on the tick after that. Two full quanta always
separate a send from its delivery, and one actor answering another never
grows the call stack.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field

import anyio
import anyio.abc

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Scheduler:
    """
    Tick clock and one-quantum deferral queue.

    Must be created inside a running event loop.

    Parameters
    ----------
    quantum:
        Minimum time in seconds between two ticks. A quantum of 0 ticks on
        every scheduling checkpoint.
    """

    quantum: float = 0.001
    _send: anyio.abc.ObjectSendStream[Callable[[], None]] = field(init=False, repr=False)
    _recv: anyio.abc.ObjectReceiveStream[Callable[[], None]] = field(init=False, repr=False)
    _tick_event: anyio.Event = field(init=False, repr=False)
    _hooks: list[Callable[[], None]] = field(init=False, default_factory=list, repr=False)
    _tick: int = field(init=False, default=0)
    _ready: int = field(init=False, default=0)
    _waiters: int = field(init=False, default=0)
    _closed: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        if self.quantum < 0:
            raise ValueError("quantum must be >= 0.")
        send, recv = anyio.create_memory_object_stream[Callable[[], None]](math.inf)
        self._send = send
        self._recv = recv
        self._tick_event = anyio.Event()

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._send.statistics().current_buffer_used

    def on_tick(self, hook: Callable[[], None]) -> None:
        """Run `hook` at every tick, before deferred submissions are released."""
        self._hooks.append(hook)

    def call_later(self, func: Callable[[], None]) -> None:
        """
        Run `func` on the second tick from now.

        Once the scheduler is closed, submissions are dropped.
        """
        if self._closed:
            logger.debug("Scheduler closed; dropping late submission %r.", func)
            return
        self._send.send_nowait(func)

    async def next_tick(self) -> int:
        """Wait for the next tick and return its number."""
        event = self._tick_event
        self._waiters += 1
        try:
            await event.wait()
        finally:
            self._waiters -= 1
        return self._tick

    async def run(self) -> None:
        """
        Drive the clock until the scheduler is closed, its backlog released
        and no drain loop is waiting for a tick.

        Exceptions raised by a released callable propagate out of this task.
        """
        async with self._recv:
            while not (self._closed and self.pending == 0 and self._waiters == 0):
                await anyio.sleep(self.quantum)
                self._advance()

    def _advance(self) -> None:
        self._tick += 1

        for hook in self._hooks:
            hook()

        release, self._ready = self._ready, 0
        for _ in range(release):
            func = self._recv.receive_nowait()
            func()
        self._ready = self.pending

        event, self._tick_event = self._tick_event, anyio.Event()
        event.set()

    def close(self) -> None:
        """
        Stop accepting submissions.

        Anything already submitted is still released by `run()`.
        """
        if self._closed:
            return
        self._closed = True
        self._send.close()
