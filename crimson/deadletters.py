from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any

from ._envelope import Envelope


@dataclass(frozen=True, slots=True)
class DeadLetter:
    """
    An envelope the router could not deliver because nothing is mounted at
    its destination.

    This is for diagnostics and observability only; the sender is never told.
    """

    envelope: Envelope[Any]
    when: float

    @property
    def to(self) -> str:
        return self.envelope.to

    @property
    def from_(self) -> str:
        return self.envelope.from_

    @property
    def value(self) -> Any:
        return self.envelope.value


@dataclass(slots=True)
class DeadLetters:
    """
    Bounded record of the most recent dead letters.

    Parameters
    ----------
    max_size:
        How many dead letters to keep. Older ones are discarded first.
    """

    max_size: int = 1000
    _messages: deque[DeadLetter] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._messages = deque(maxlen=self.max_size)

    @property
    def messages(self) -> list[DeadLetter]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def record(self, dl: DeadLetter) -> None:
        self._messages.append(dl)

    def clear(self) -> None:
        self._messages.clear()
