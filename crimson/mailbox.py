from __future__ import annotations
"""
Mailbox primitives for crimson.

A mailbox is an unbounded FIFO of envelopes owned by one address. The System
router appends to it, and that address's drain loop empties it, so each
mailbox has exactly one writer and one reader. At every tick the backlog is
marked first; a drain only takes marked envelopes.

Implementation notes
--------------------
We use `anyio.create_memory_object_stream` with an infinite buffer. Both
`send_nowait` and `receive_nowait` are plain synchronous calls, which is all
the router and the drain loop need: neither ever waits on a mailbox.
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass, field

import anyio
import anyio.abc

from ._envelope import Envelope


@dataclass(slots=True)
class Mailbox:
    """
    Unbounded mailbox backed by an AnyIO memory object stream.

    Parameters
    ----------
    address:
        The address this mailbox belongs to. Informational only.
    """

    address: str
    _send: anyio.abc.ObjectSendStream[Envelope] = field(init=False, repr=False)
    _recv: anyio.abc.ObjectReceiveStream[Envelope] = field(init=False, repr=False)
    _ready: int = field(init=False, default=0)
    _closed: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        send, recv = anyio.create_memory_object_stream[Envelope](math.inf)
        self._send = send
        self._recv = recv

    def __len__(self) -> int:
        return self._send.statistics().current_buffer_used

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, env: Envelope) -> None:
        """
        Append an envelope at the tail.

        Raises
        ------
        anyio.ClosedResourceError
            If the mailbox has been closed.
        """
        self._send.send_nowait(env)

    def mark(self) -> None:
        """
        Mark everything queued right now as ready for the next `drain()`.

        Envelopes appended after the mark wait for the following one.
        """
        self._ready = len(self)

    def drain(self) -> Iterator[Envelope]:
        """
        Pop every envelope marked ready, oldest first.
        """
        ready, self._ready = self._ready, 0
        for _ in range(ready):
            try:
                yield self._recv.receive_nowait()
            except (anyio.WouldBlock, anyio.EndOfStream, anyio.ClosedResourceError):
                return

    def close(self) -> None:
        """Close both ends. Queued envelopes are discarded."""
        if self._closed:
            return
        self._closed = True
        self._send.close()
        self._recv.close()
