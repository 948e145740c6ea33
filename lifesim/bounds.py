"""
lifesim/bounds.py
~~~~~~~~~~~~~~~~~
Clamping of stats, skills and relationships into their valid ranges.

Every function here is pure, total and idempotent. Callers re-clamp after
every mutation; out-of-range values are corrected silently, never raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lifesim.models import CharacterRelationships, CharacterSkills, CharacterStats

STAT_BOUNDS: dict[str, tuple[int, int]] = {
    "health": (-100, 200),
    "happiness": (-50, 150),
    "energy": (-50, 150),
    "wealth": (0, 1_000_000),
}
SKILL_BOUNDS: tuple[int, int] = (0, 200)
RELATIONSHIP_BOUNDS: tuple[int, int] = (-100, 100)


def clamp_value(value: int, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


def clamp_stats(stats: CharacterStats) -> CharacterStats:
    """Return a copy of ``stats`` with every field inside STAT_BOUNDS."""
    return stats.model_copy(update={
        name: clamp_value(getattr(stats, name), low, high)
        for name, (low, high) in STAT_BOUNDS.items()
    })


def clamp_skills(skills: CharacterSkills) -> CharacterSkills:
    low, high = SKILL_BOUNDS
    return skills.model_copy(update={
        name: clamp_value(getattr(skills, name), low, high)
        for name in type(skills).model_fields
    })


def clamp_relationships(relationships: CharacterRelationships) -> CharacterRelationships:
    low, high = RELATIONSHIP_BOUNDS
    return relationships.model_copy(update={
        name: clamp_value(getattr(relationships, name), low, high)
        for name in type(relationships).model_fields
    })


def in_bounds(stats: CharacterStats) -> bool:
    """True when every stat already lies inside its range."""
    return all(
        low <= getattr(stats, name) <= high
        for name, (low, high) in STAT_BOUNDS.items()
    )
