from __future__ import annotations

import os
from typing import TYPE_CHECKING

from monkay import Monkay

if TYPE_CHECKING:  # pragma: no cover
    from .global_settings import Settings

ENVIRONMENT_VARIABLE = "CRIMSON_SETTINGS_MODULE"

monkay: Monkay[None, Settings] = Monkay(
    globals(),
    settings_path=os.environ.get(ENVIRONMENT_VARIABLE, "crimson.conf.global_settings:Settings"),
)


def settings() -> Settings:
    """Return the active settings object."""
    return monkay.settings


__all__ = ["ENVIRONMENT_VARIABLE", "monkay", "settings"]
