from __future__ import annotations

"""
System: registry, router and drain loops.

This is the runtime entry-point. It owns:
- the registry of mounted actors and one mailbox per address,
- the scheduler and the task group where the drain loops run,
- the started/stopped lifecycle.

Message flow
------------
actor.send(to, v)                   tick n (or between n and n + 1)
    -> scheduler                    released at tick n + 2
    -> outbound raw channel of the sender
    -> router: append to the mailbox of `to`
    -> drain loop of `to`           tick n + 3 at the earliest
    -> inbound raw channel of `to`
    -> Receiver callback of `to`
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

import anyio
import anyio.abc

from ._envelope import Envelope
from .channel import ChannelSender, channel
from .conf import settings as get_settings
from .deadletters import DeadLetter, DeadLetters
from .endpoint import Receiver, Sender
from .exceptions import AddressInUse, SystemNotStarted, SystemStarted, SystemStopped
from .mailbox import Mailbox
from .scheduler import Scheduler
from .typing import Actor, Address

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class _Route:
    """
    Internal wiring record for a single address.

    Notes
    -----
    - `actor` is None for the system's own address.
    - `mailbox` and `inbound` are created when the system starts.
    """

    address: Address
    actor: Optional[Actor[Any]] = None
    mailbox: Optional[Mailbox] = field(default=None, repr=False)
    inbound: Optional[ChannelSender[Envelope[Any]]] = field(default=None, repr=False)


class System(Generic[T]):
    """
    Router and scheduler for a group of actors.

    Parameters
    ----------
    address:
        The system's own address. The caller talks to actors through it.
    quantum:
        Scheduling quantum in seconds.
    isolate_failures:
        Log receiver callback exceptions instead of propagating them.
    on_dead_letter:
        Called with every `DeadLetter` the router produces.
    max_dead_letters:
        Size of the dead letter buffer.

    Every argument left as None falls back to `crimson.conf.settings()`.
    """

    def __init__(
        self,
        address: Optional[Address] = None,
        *,
        quantum: Optional[float] = None,
        isolate_failures: Optional[bool] = None,
        on_dead_letter: Optional[Callable[[DeadLetter], Any]] = None,
        max_dead_letters: Optional[int] = None,
    ) -> None:
        conf = get_settings()

        self._address: Address = address if address is not None else conf.system_address
        self._quantum: float = quantum if quantum is not None else conf.quantum
        if self._quantum < 0:
            raise ValueError("quantum must be >= 0.")
        self._isolate_failures: bool = (
            isolate_failures if isolate_failures is not None else conf.isolate_failures
        )
        self._on_dead_letter = on_dead_letter
        self._dead_letters = DeadLetters(
            max_size=max_dead_letters if max_dead_letters is not None else conf.max_dead_letters
        )

        self._routes: dict[Address, _Route] = {self._address: _Route(self._address)}

        self._scheduler: Scheduler | None = None
        self._tg: anyio.abc.TaskGroup | None = None
        self._started = False
        self._stopped = False
        self._closed = False
        self._endpoints: tuple[Sender[T], Receiver[T]] | None = None

    @property
    def address(self) -> Address:
        return self._address

    @property
    def quantum(self) -> float:
        return self._quantum

    @property
    def isolate_failures(self) -> bool:
        return self._isolate_failures

    @property
    def started(self) -> bool:
        return self._started

    @property
    def addresses(self) -> list[Address]:
        """Mounted actor addresses, in mount order."""
        return [a for a, route in self._routes.items() if route.actor is not None]

    @property
    def dead_letters(self) -> DeadLetters:
        return self._dead_letters

    @property
    def sender(self) -> Sender[T]:
        """The system's own sender. Available once started."""
        return self._require_endpoints()[0]

    @property
    def receiver(self) -> Receiver[T]:
        """The system's own receiver. Available once started."""
        return self._require_endpoints()[1]

    def pending(self, address: Address) -> int:
        """Number of envelopes waiting in the mailbox of `address`."""
        mailbox = self._routes[address].mailbox
        return 0 if mailbox is None else len(mailbox)

    def mount(self, address: Address, actor: Actor[T]) -> None:
        """
        Register `actor` at `address`. Its mailbox is created on start.

        Raises
        ------
        SystemStarted
            If the system was already started.
        AddressInUse
            If `address` is already mounted or is the system's own address.
        """
        if self._started or self._stopped:
            raise SystemStarted("Cannot mount actors once the system has been started.")
        if address in self._routes:
            raise AddressInUse(f"Address {address!r} is already in use.")

        self._routes[address] = _Route(address, actor=actor)
        logger.debug("Mounted %r at %r on system %r.", actor, address, self._address)

    async def start(self) -> tuple[Sender[T], Receiver[T]]:
        """
        Wire every address, run the actors and launch the drain loops.

        Returns
        -------
        tuple[Sender, Receiver]
            The system's own pair, usable exactly like an actor's.

        Raises
        ------
        SystemStarted
            If the system is already running.
        SystemStopped
            If the system was stopped before.
        """
        if self._stopped:
            raise SystemStopped("System has been stopped and cannot be started again.")
        if self._started:
            raise SystemStarted("System is already started.")

        scheduler = Scheduler(quantum=self._quantum)
        scheduler.on_tick(self._mark)
        self._scheduler = scheduler

        self._tg = await anyio.create_task_group().__aenter__()
        self._started = True
        self._tg.start_soon(scheduler.run)

        try:
            for route in list(self._routes.values()):
                sender, receiver = self._wire(route, scheduler)
                if route.actor is not None:
                    route.actor.run(sender, receiver)
                else:
                    self._endpoints = (sender, receiver)
                self._tg.start_soon(self._drain, scheduler, route.address, route.mailbox, route.inbound)
        except Exception:
            await self.aclose()
            raise

        logger.debug("System %r started with %d actor(s).", self._address, len(self.addresses))
        return self._require_endpoints()

    def stop(self) -> None:
        """
        Signal every drain loop to exit.

        Loops notice at the top of their next cycle, so the cycle in flight
        still completes: whatever sits in a mailbox when the next tick comes
        is delivered once more. Deferred sends already submitted are still
        routed; later sends are dropped.
        """
        if not self._started:
            return
        self._started = False
        self._stopped = True
        if self._scheduler is not None:
            self._scheduler.close()
        logger.debug("System %r stopping.", self._address)

    async def aclose(self) -> None:
        """
        Stop the system and wait for all of its loops to finish.

        With `isolate_failures=False`, a receiver exception that tore the
        system down is raised from here, wrapped in an exception group.
        """
        await self._shutdown(None, None, None)

    async def _shutdown(self, exc_type, exc, tb) -> None:
        if self._closed:
            return
        self._closed = True
        self.stop()
        self._stopped = True

        try:
            if self._tg is not None:
                tg = self._tg
                self._tg = None
                await tg.__aexit__(exc_type, exc, tb)
        finally:
            for route in self._routes.values():
                if route.mailbox is not None:
                    route.mailbox.close()

    def _wire(self, route: _Route, scheduler: Scheduler) -> tuple[Sender[T], Receiver[T]]:
        """Create the mailbox and both channel pairs for one address."""
        out_tx, out_rx = channel()
        in_tx, in_rx = channel()
        out_rx.on(self._route)
        route.mailbox = Mailbox(route.address)
        route.inbound = in_tx
        return (
            Sender(route.address, out_tx, scheduler),
            Receiver(route.address, in_rx),
        )

    def _route(self, env: Envelope[Any]) -> None:
        """Append `env` to its destination mailbox, or drop it."""
        route = self._routes.get(env.to)
        if route is None or route.mailbox is None:
            self._dead_letter(env)
            return
        try:
            route.mailbox.put(env)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            logger.debug("Mailbox %r is closed; dropping message from %r.", env.to, env.from_)

    def _mark(self) -> None:
        for route in self._routes.values():
            if route.mailbox is not None:
                route.mailbox.mark()

    def _dead_letter(self, env: Envelope[Any]) -> None:
        logger.debug("No actor at %r; dropping message from %r.", env.to, env.from_)
        dl = DeadLetter(envelope=env, when=anyio.current_time())
        self._dead_letters.record(dl)
        if self._on_dead_letter is None:
            return
        try:
            self._on_dead_letter(dl)
        except Exception:
            logger.exception("on_dead_letter hook failed for message to %r.", env.to)

    async def _drain(
        self,
        scheduler: Scheduler,
        address: Address,
        mailbox: Mailbox,
        inbound: ChannelSender[Envelope[Any]],
    ) -> None:
        """Per-address loop moving marked envelopes into the inbound channel."""
        while self._started:
            await scheduler.next_tick()
            for env in mailbox.drain():
                self._deliver(inbound, env)

        logger.debug("Drain loop for %r exited.", address)

    def _deliver(self, inbound: ChannelSender[Envelope[Any]], env: Envelope[Any]) -> None:
        try:
            inbound.send(env)
        except Exception:
            if not self._isolate_failures:
                raise
            logger.exception(
                "Receiver at %r failed handling a message from %r.", env.to, env.from_
            )

    def _require_endpoints(self) -> tuple[Sender[T], Receiver[T]]:
        if self._endpoints is None:
            raise SystemNotStarted("System has not been started. Did you call await system.start()?")
        return self._endpoints

    async def __aenter__(self) -> "System[T]":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._shutdown(exc_type, exc, tb)
