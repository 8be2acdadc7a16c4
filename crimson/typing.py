from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:  # pragma: no cover
    from .endpoint import Receiver, Sender

Address = str
"""Routing key of an actor or of the system itself."""

MessageT = TypeVar("MessageT")

ReceiveCallback = Callable[[Address, Any], None]


@runtime_checkable
class Actor(Protocol[MessageT]):
    """
    Protocol implemented by everything that can be mounted on a System.

    `run(...)` is called exactly once, synchronously, while the system starts.
    The actor registers its behaviour with `receiver.on(...)` and keeps the
    sender for whenever it wants to talk. The system never calls into the
    actor again after `run(...)` returns.

    Usage
    -----
    class Echo:
        def run(self, sender: Sender[str], receiver: Receiver[str]) -> None:
            receiver.on(lambda from_, value: sender.send(from_, value))
    """

    def run(self, sender: "Sender[MessageT]", receiver: "Receiver[MessageT]") -> None: ...
