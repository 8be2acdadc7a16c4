__version__ = "0.1.0"

import logging

from ._envelope import Envelope
from .channel import ChannelReceiver, ChannelSender, channel
from .conf import monkay
from .conf.global_settings import Settings
from .deadletters import DeadLetter, DeadLetters
from .endpoint import Receiver, Sender
from .exceptions import (
    AddressInUse,
    AlreadySubscribed,
    CrimsonError,
    SystemNotStarted,
    SystemStarted,
    SystemStopped,
)
from .mailbox import Mailbox
from .scheduler import Scheduler
from .system import System
from .typing import Actor, Address

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Actor",
    "Address",
    "AddressInUse",
    "AlreadySubscribed",
    "ChannelReceiver",
    "ChannelSender",
    "CrimsonError",
    "DeadLetter",
    "DeadLetters",
    "Envelope",
    "Mailbox",
    "Receiver",
    "Scheduler",
    "Sender",
    "Settings",
    "System",
    "SystemNotStarted",
    "SystemStarted",
    "SystemStopped",
    "channel",
    "monkay",
]
