from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Settings:
    """
    Default runtime settings.

    Every `System` argument left as None falls back to these values.

    Attributes
    ----------
    system_address:
        Address the system answers on when none is given.
    quantum:
        Scheduling quantum in seconds: the minimum time between two ticks
        of the system clock.
    isolate_failures:
        If True, an exception raised by a receiver callback is logged and the
        drain loop carries on. If False it propagates and tears the system
        down.
    max_dead_letters:
        Size of the dead letter buffer kept per system.
    """

    system_address: str = "system"
    quantum: float = 0.001
    isolate_failures: bool = True
    max_dead_letters: int = 1000
