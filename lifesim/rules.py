"""
Tunable simulation constants.

Defaults reproduce the shipped balance; ``config/rules.json`` may override
any of them. ``DEFAULT_RULES`` is frozen and safe to share between
sessions.
"""

from __future__ import annotations

from pydantic import ConfigDict, Field, model_validator

from lifesim.models import CamelModel


class AgeBand(CamelModel):
    """Decision points per aged year for every age below ``below_age``."""

    model_config = ConfigDict(frozen=True)

    below_age: int = Field(gt=0)
    interval: int = Field(gt=0)


_DEFAULT_BANDS = (
    AgeBand(below_age=5, interval=2),
    AgeBand(below_age=12, interval=3),
    AgeBand(below_age=18, interval=4),
    AgeBand(below_age=30, interval=5),
    AgeBand(below_age=50, interval=6),
    AgeBand(below_age=70, interval=8),
)


class Rules(CamelModel):
    model_config = ConfigDict(frozen=True)

    natural_death_age: int = 80
    natural_death_chance: float = Field(default=0.1, ge=0.0, le=1.0)
    disease_onset_age: int = 60
    disease_onset_chance: float = Field(default=0.1, ge=0.0, le=1.0)
    bonus_event_chance: float = Field(default=0.1, ge=0.0, le=1.0)
    # No derivation behind this factor; it keeps authored death chances
    # survivable over a whole life.
    death_chance_dampening: float = Field(default=0.1, ge=0.0)
    min_starting_age: int = Field(default=18, ge=0)
    max_starting_age: int = Field(default=65, ge=0)
    age_event_intervals: tuple[AgeBand, ...] = _DEFAULT_BANDS
    elder_event_interval: int = Field(default=10, gt=0)

    @model_validator(mode="after")
    def bands_ascending(self) -> Rules:
        ages = [band.below_age for band in self.age_event_intervals]
        if ages != sorted(ages):
            raise ValueError("ageEventIntervals must be sorted by belowAge.")
        if self.max_starting_age < self.min_starting_age:
            raise ValueError("maxStartingAge must be greater than or equal to minStartingAge.")
        return self


DEFAULT_RULES = Rules()
