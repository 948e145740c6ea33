"""
lifesim/character.py
~~~~~~~~~~~~~~~~~~~~
Building a new character from seed data.
"""

from __future__ import annotations

import datetime
import logging
import random

from lifesim.bounds import clamp_value
from lifesim.catalog import Catalog, DifficultyLevel
from lifesim.effects import apply_effects
from lifesim.models import (
    AchievementRecord,
    Character,
    CharacterRelationships,
    CharacterSeed,
    CharacterSkills,
    CharacterStats,
    MilestoneRecord,
)
from lifesim.rules import DEFAULT_RULES, Rules
from utils.utils import current_timestamp, generate_character_id

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MIN_BIRTH_YEAR = 1900

# Starting skill ranges, lower bound inclusive and upper bound exclusive.
CORE_SKILL_RANGE = (20, 40)
TRADE_SKILL_RANGE = (10, 25)
FAMILY_RANGE = (50, 80)
FRIENDS_RANGE = (30, 50)


def validate_character_seed(seed: CharacterSeed, current_year: int | None = None) -> list[str]:
    """Problems with ``seed``; an empty list means it can be used."""
    if current_year is None:
        current_year = datetime.date.today().year

    errors = []
    if len(seed.name.strip()) < MIN_NAME_LENGTH:
        errors.append(f"Name must be at least {MIN_NAME_LENGTH} characters.")
    if not seed.country.strip():
        errors.append("Country is required.")
    if not MIN_BIRTH_YEAR <= seed.birth_year <= current_year:
        errors.append(f"Birth year must be between {MIN_BIRTH_YEAR} and {current_year}.")
    return errors


def _draw(rng: random.Random, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return rng.randrange(low, high)


def starting_age(birth_year: int, current_year: int, rules: Rules = DEFAULT_RULES) -> int:
    return clamp_value(current_year - birth_year, rules.min_starting_age, rules.max_starting_age)


def create_character(
    seed: CharacterSeed,
    difficulty: DifficultyLevel | None,
    catalog: Catalog,
    rng: random.Random,
    rules: Rules = DEFAULT_RULES,
    current_year: int | None = None,
    now: int | None = None,
) -> Character | None:
    """
    Create a living character from ``seed``.

    Returns None for an invalid seed. The difficulty's starting bonus is
    added to the base stats and the result is clamped; an unknown
    difficulty falls back to medium, then to no bonus at all.
    """
    if current_year is None:
        current_year = datetime.date.today().year
    errors = validate_character_seed(seed, current_year)
    if errors:
        logger.warning("Rejected character seed %r: %s", seed.name, " ".join(errors))
        return None

    if difficulty is None:
        difficulty = catalog.get_difficulty("medium")

    now = current_timestamp() if now is None else now
    skills = CharacterSkills(
        intelligence=_draw(rng, CORE_SKILL_RANGE),
        creativity=_draw(rng, CORE_SKILL_RANGE),
        social=_draw(rng, CORE_SKILL_RANGE),
        physical=_draw(rng, CORE_SKILL_RANGE),
        business=_draw(rng, TRADE_SKILL_RANGE),
        technical=_draw(rng, TRADE_SKILL_RANGE),
    )
    relationships = CharacterRelationships(
        family=_draw(rng, FAMILY_RANGE),
        friends=_draw(rng, FRIENDS_RANGE),
        romantic=0,
        colleagues=0,
    )

    character = Character(
        id=generate_character_id(rng, now),
        name=seed.name.strip(),
        country=seed.country.strip(),
        birth_year=seed.birth_year,
        age=starting_age(seed.birth_year, current_year, rules),
        stats=CharacterStats(),
        skills=skills,
        relationships=relationships,
        achievements=[AchievementRecord(id=a.id) for a in catalog.achievements],
        milestones=[MilestoneRecord(id=m.id) for m in catalog.milestones],
    )
    if difficulty is not None:
        character = apply_effects(character, difficulty.starting_bonus)

    logger.info(
        "Created %s (%s) from %s, age %d, difficulty %s.",
        character.name, character.id, character.country, character.age,
        difficulty.id if difficulty else "none",
    )
    return character
