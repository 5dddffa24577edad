"""Shared test doubles for the synthesizer's random source, sleep and clock."""
from __future__ import annotations

from datetime import datetime, timezone

from truthguard.processors.synthesizer import ContentSynthesizer

FIXED_TIME = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class ScriptedRandom:
    """Random source replaying fixed values, then repeating *default*."""

    def __init__(self, values: list[float], default: float = 0.5) -> None:
        self._values = list(values)
        self._default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return self._default


async def no_sleep(_delay: float) -> None:
    return None


def make_synthesizer(values: list[float] | None = None, default: float = 0.5) -> ContentSynthesizer:
    rng = ScriptedRandom(values or [], default=default)
    return ContentSynthesizer(rng=rng, sleep=no_sleep, clock=lambda: FIXED_TIME)
