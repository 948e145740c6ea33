"""
lifesim/mortality.py
~~~~~~~~~~~~~~~~~~~~
Decides whether a character dies after a stat mutation, and why.

Nothing here mutates state; callers set ``is_alive``/``death_cause``.
"""

from __future__ import annotations

import logging
import random

from lifesim.models import Character, CharacterStats
from lifesim.rules import DEFAULT_RULES, Rules

logger = logging.getLogger(__name__)

CRITICAL_HEALTH = -50
CRITICAL_ENERGY = -50
CRITICAL_HAPPINESS = -30

CAUSE_HEALTH = "Critical health failure"
CAUSE_EXHAUSTION = "Complete exhaustion"
CAUSE_DEPRESSION = "Severe depression"
CAUSE_ACCIDENT = "Unfortunate accident"
CAUSE_UNKNOWN = "Unknown causes"
CAUSE_NATURAL = "Natural causes"


def critical_condition(stats: CharacterStats) -> str | None:
    """Cause of the first deterministic terminal condition, in priority order."""
    if stats.health <= CRITICAL_HEALTH:
        return CAUSE_HEALTH
    if stats.energy <= CRITICAL_ENERGY:
        return CAUSE_EXHAUSTION
    if stats.happiness <= CRITICAL_HAPPINESS:
        return CAUSE_DEPRESSION
    return None


def adjusted_death_chance(
    death_chance: float,
    difficulty_multiplier: float,
    rules: Rules = DEFAULT_RULES,
) -> float:
    return death_chance * difficulty_multiplier * rules.death_chance_dampening


def check_death(
    stats: CharacterStats,
    death_chance: float | None = 0.0,
    difficulty_multiplier: float = 1.0,
    *,
    rng: random.Random,
    rules: Rules = DEFAULT_RULES,
) -> bool:
    """
    True when the character dies.

    Deterministic thresholds are checked first and never consume a draw.
    Only a positive ``death_chance`` triggers the single random draw.
    """
    if critical_condition(stats) is not None:
        return True

    if death_chance and death_chance > 0:
        adjusted = adjusted_death_chance(death_chance, difficulty_multiplier, rules)
        return rng.random() < adjusted

    return False


def get_death_cause(stats: CharacterStats, death_chance: float | None = 0.0) -> str:
    cause = critical_condition(stats)
    if cause is not None:
        return cause
    if death_chance and death_chance > 0:
        return CAUSE_ACCIDENT
    return CAUSE_UNKNOWN


def evaluate_death(
    character: Character,
    death_chance: float | None,
    difficulty_multiplier: float,
    *,
    rng: random.Random,
    rules: Rules = DEFAULT_RULES,
) -> Character:
    """
    Caller-side helper: run ``check_death`` and, on death, return a
    terminal copy of the character. Otherwise the character comes back
    unchanged.
    """
    if not check_death(character.stats, death_chance, difficulty_multiplier, rng=rng, rules=rules):
        return character

    cause = get_death_cause(character.stats, death_chance)
    logger.info("%s (%s) died at age %d: %s", character.name, character.id, character.age, cause)
    return character.model_copy(update={"is_alive": False, "death_cause": cause})
