from __future__ import annotations


class CrimsonError(Exception):
    """Base exception for all crimson runtime errors."""


class AlreadySubscribed(CrimsonError):
    """
    Raised when `on(...)` is called a second time on a raw channel receiver.

    A raw channel has exactly one subscriber for its whole life. The
    addressed `Receiver` handed to actors is re-subscribable; the plumbing
    underneath it is not.
    """


class AddressInUse(CrimsonError):
    """
    Raised when mounting an actor at an address that is already taken.

    This covers both a second mount at the same address and a mount at the
    system's own address.
    """


class SystemStarted(CrimsonError):
    """
    Raised when the registry is modified, or the system started again, after
    `start()` has run.

    Actors are wired exactly once, so the set of addresses is frozen on start.
    """


class SystemStopped(CrimsonError):
    """
    Raised when starting a system that has already been stopped.

    A system's lifecycle runs one way only: created, started, stopped.
    """


class SystemNotStarted(CrimsonError):
    """
    Raised when the system's own sender or receiver is requested before
    `start()` has wired them.
    """
