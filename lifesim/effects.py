"""
lifesim/effects.py
~~~~~~~~~~~~~~~~~~
Merges an ``EventEffect`` into a character.

All functions return new objects and leave their inputs untouched. Death
is not decided here: callers run the mortality check straight after
``apply_effects`` and append the history record themselves.
"""

from __future__ import annotations

from lifesim.bounds import (
    RELATIONSHIP_BOUNDS,
    SKILL_BOUNDS,
    clamp_stats,
    clamp_value,
)
from lifesim.models import (
    Character,
    CharacterRelationships,
    CharacterSkills,
    CharacterStats,
    EventEffect,
    RelationshipDelta,
    SkillDelta,
)


def apply_stat_effects(stats: CharacterStats, effect: EventEffect) -> CharacterStats:
    """Add the effect's stat deltas, then clamp every stat."""
    updated = {
        name: getattr(stats, name) + delta
        for name, delta in effect.stat_deltas()
    }
    return clamp_stats(stats.model_copy(update=updated))


def apply_skill_effects(skills: CharacterSkills, delta: SkillDelta | None) -> CharacterSkills:
    """Add each present skill delta and clamp it; other skills are untouched."""
    if delta is None:
        return skills
    low, high = SKILL_BOUNDS
    updated = {
        name: clamp_value(getattr(skills, name) + value, low, high)
        for name, value in delta.items()
    }
    return skills.model_copy(update=updated)


def apply_relationship_effects(
    relationships: CharacterRelationships,
    delta: RelationshipDelta | None,
) -> CharacterRelationships:
    if delta is None:
        return relationships
    low, high = RELATIONSHIP_BOUNDS
    updated = {
        name: clamp_value(getattr(relationships, name) + value, low, high)
        for name, value in delta.items()
    }
    return relationships.model_copy(update=updated)


def apply_effects(character: Character, effect: EventEffect | None) -> Character:
    """
    Return ``character`` with ``effect`` merged in.

    Assignments (profession, education, disease) overwrite the current
    value when present. ``is_alive`` and ``death_cause`` are never touched.
    A ``None`` effect is a no-op.
    """
    if effect is None:
        return character

    update = {
        "stats": apply_stat_effects(character.stats, effect),
        "skills": apply_skill_effects(character.skills, effect.skills),
        "relationships": apply_relationship_effects(character.relationships, effect.relationships),
    }
    if effect.profession is not None:
        update["profession"] = effect.profession
    if effect.education is not None:
        update["education_level"] = effect.education
    if effect.disease is not None:
        update["current_disease"] = effect.disease

    return character.model_copy(update=update)
