from __future__ import annotations

"""
Actor-scoped sender and receiver.

These are the only handles an actor gets. Both know the address of the actor
they belong to: the sender stamps it as `from_` on outgoing envelopes, and the
receiver strips envelopes back down to `(from_, value)` before calling the
actor's callback.
"""

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._envelope import Envelope
from .channel import ChannelReceiver, ChannelSender
from .typing import Address, ReceiveCallback

if TYPE_CHECKING:  # pragma: no cover
    from .scheduler import Scheduler

T = TypeVar("T")


def _ignore(from_: Address, value: Any) -> None:
    return None


class Sender(Generic[T]):
    """
    Addressed sender handed to an actor.

    `send(...)` never delivers inline: the envelope is queued on the
    scheduler and reaches the system router two ticks later. There is no
    backpressure; every send is accepted.
    """

    __slots__ = ("_address", "_channel", "_scheduler")

    def __init__(
        self,
        address: Address,
        channel: ChannelSender[Envelope[T]],
        scheduler: "Scheduler",
    ) -> None:
        self._address = address
        self._channel = channel
        self._scheduler = scheduler

    @property
    def address(self) -> Address:
        return self._address

    def send(self, to: Address, value: T) -> None:
        """
        Send `value` to the actor mounted at `to`.

        Messages to unknown addresses are dropped by the router without error.
        """
        env = Envelope(from_=self._address, to=to, value=value)
        self._scheduler.call_later(lambda: self._channel.send(env))

    def __repr__(self) -> str:
        return f"<Sender {self._address!r}>"


class Receiver(Generic[T]):
    """
    Addressed receiver handed to an actor.

    Unlike a raw channel receiver, `on(...)` may be called any number of
    times; the latest callback replaces the previous one.
    """

    __slots__ = ("_address", "_func")

    def __init__(self, address: Address, channel: ChannelReceiver[Envelope[T]]) -> None:
        self._address = address
        self._func: ReceiveCallback = _ignore
        channel.on(self._dispatch)

    @property
    def address(self) -> Address:
        return self._address

    def on(self, func: ReceiveCallback) -> None:
        """
        Register `func(from_, value)` as the message handler, replacing any
        previous one.
        """
        self._func = func

    def _dispatch(self, env: Envelope[T]) -> None:
        self._func(env.from_, env.value)

    def __repr__(self) -> str:
        return f"<Receiver {self._address!r}>"
