"""
lifesim/telemetry.py
~~~~~~~~~~~~~~~~~~~~
Fire-and-forget notifications about character state transitions.

A sink that raises never disturbs the session: ``emit`` logs the failure
and carries on.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)

CHARACTER_CREATED = "character_created"
STAT_CHANGED = "stat_changed"
AGE_CHANGED = "age_changed"
DEATH = "death"


class Telemetry(Protocol):
    def notify(self, event: str, payload: dict[str, Any]) -> None: ...


class LoggingTelemetry:
    """Writes every notification to the ``lifesim.telemetry`` logger at debug level."""

    def __init__(self, level: int = logging.DEBUG):
        self.level = level

    def notify(self, event: str, payload: dict[str, Any]) -> None:
        logger.log(self.level, "%s %s", event, payload)


class RecordingTelemetry:
    """Keeps notifications in memory, in arrival order."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def notify(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))

    def names(self) -> list[str]:
        return [event for event, _ in self.events]


def emit(sink: Telemetry | None, event: str, payload: dict[str, Any]) -> None:
    if sink is None:
        return
    try:
        sink.notify(event, payload)
    except Exception as e:
        logger.warning("Telemetry sink failed on %s: %s", event, e)
