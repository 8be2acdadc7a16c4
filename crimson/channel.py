from __future__ import annotations

"""
Raw channel pairs.

A channel is the smallest hand-off primitive in crimson: one sender, one
receiver, and a direct synchronous call between them. There is no buffering
and no scheduling here; every `send(...)` runs the receiver's callback before
returning.

The higher level `Sender`/`Receiver` (see `crimson.endpoint`) and the
`System` router are built on top of these pairs.
"""

from typing import Callable, Generic, TypeVar

from .exceptions import AlreadySubscribed

T = TypeVar("T")


def _discard(value: object) -> None:
    return None


class ChannelReceiver(Generic[T]):
    """
    Receiving end of a channel pair.

    Holds at most one subscribed callback. Until `on(...)` is called, values
    are passed to a no-op and lost.
    """

    __slots__ = ("_func", "_subscribed")

    def __init__(self) -> None:
        self._func: Callable[[T], None] = _discard
        self._subscribed = False

    @property
    def subscribed(self) -> bool:
        return self._subscribed

    def on(self, func: Callable[[T], None]) -> None:
        """
        Subscribe to values sent through the channel.

        Raises
        ------
        AlreadySubscribed
            If a callback was already registered on this receiver.
        """
        if self._subscribed:
            raise AlreadySubscribed("Cannot subscribe to a channel receiver more than once.")
        self._func = func
        self._subscribed = True

    def dispatch(self, value: T) -> None:
        self._func(value)


class ChannelSender(Generic[T]):
    """
    Sending end of a channel pair.

    Created by `channel()`; forwards each value straight to its receiver.
    """

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[T], None]) -> None:
        self._func = func

    def send(self, value: T) -> None:
        """
        Hand `value` to the receiver.

        Exceptions raised by the receiver's callback are not caught here.
        """
        self._func(value)


def channel() -> tuple[ChannelSender[T], ChannelReceiver[T]]:
    """
    Create a uni-directional, single-subscriber channel.

    Returns
    -------
    tuple[ChannelSender, ChannelReceiver]
        The two coupled ends of the channel.
    """
    receiver: ChannelReceiver[T] = ChannelReceiver()
    sender: ChannelSender[T] = ChannelSender(receiver.dispatch)
    return sender, receiver
