from __future__ import annotations
"""
Internal message envelope type.

Actors never see envelopes directly: the addressed `Sender` wraps outgoing
values, and the addressed `Receiver` unwraps them again into `(from_, value)`.
In between, the System router reads `to` to pick a mailbox.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Envelope(Generic[T]):
    """
    An addressed message.

    Attributes
    ----------
    from_:
        Address of the sender. Spelled with a trailing underscore because
        `from` is reserved.
    to:
        Address of the intended recipient.
    value:
        The user payload.
    """

    from_: str
    to: str
    value: T
