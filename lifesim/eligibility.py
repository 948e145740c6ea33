"""
lifesim/eligibility.py
~~~~~~~~~~~~~~~~~~~~~~
Which professions and education tracks a character qualifies for, what a
profession pays, and the effects that follow from holding one.

Pure functions with no error conditions: an unknown id is simply "not
eligible" or zero income.
"""

from __future__ import annotations

import math
import random

from lifesim.catalog import Catalog, EducationLevel, Profession
from lifesim.models import Character, CharacterSkills, EventEffect, SkillDelta

MAX_LEVEL_WEALTH_SHARE = 0.8


def meets_skill_requirements(required: dict[str, int], skills: CharacterSkills) -> bool:
    """Every named requirement met or exceeded; an empty map is always met."""
    return all(getattr(skills, skill, 0) >= level for skill, level in required.items())


def can_assign(
    entry: Profession | EducationLevel | None,
    skills: CharacterSkills,
    age: int | None = None,
) -> bool:
    """
    Eligibility predicate shared by professions and education levels.

    Education entries are also age-gated; without a known age an education
    entry is never assignable.
    """
    if entry is None:
        return False
    if not meets_skill_requirements(entry.required_skills, skills):
        return False
    if isinstance(entry, EducationLevel):
        return age is not None and age >= entry.required_age
    return True


def list_available(entries, skills: CharacterSkills, age: int | None = None) -> list:
    """Filter a catalog table with ``can_assign``, preserving table order."""
    return [entry for entry in entries if can_assign(entry, skills, age)]


def can_get_profession(catalog: Catalog, profession_id: str, skills: CharacterSkills) -> bool:
    return can_assign(catalog.get_profession(profession_id), skills)


def can_start_education(catalog: Catalog, education_id: str, age: int, skills: CharacterSkills) -> bool:
    return can_assign(catalog.get_education(education_id), skills, age)


def available_professions(catalog: Catalog, skills: CharacterSkills) -> list[Profession]:
    return list_available(catalog.professions, skills)


def available_education(catalog: Catalog, skills: CharacterSkills, age: int) -> list[EducationLevel]:
    return list_available(catalog.education_levels, skills, age)


# ---------------------------------------------------------------------------
#  Income
# ---------------------------------------------------------------------------


def skill_multiplier(required: dict[str, int], skills: CharacterSkills) -> float:
    multiplier = 1.0
    for skill, level in required.items():
        multiplier *= 1 + (getattr(skills, skill, 0) - level) / 100
    return multiplier


def profession_income(catalog: Catalog, profession_id: str | None, skills: CharacterSkills) -> int:
    """Monthly income: base income scaled by how far skills exceed requirements."""
    profession = catalog.get_profession(profession_id)
    if profession is None:
        return 0
    income = math.floor(profession.min_income * skill_multiplier(profession.required_skills, skills))
    return max(0, income)


def at_max_level(catalog: Catalog, character: Character) -> bool:
    """The profession's top tier: savings of at least 80% of its max income."""
    profession = catalog.get_profession(character.profession)
    if profession is None:
        return False
    return character.stats.wealth >= profession.max_income * MAX_LEVEL_WEALTH_SHARE


# ---------------------------------------------------------------------------
#  Effects derived from professions and education
# ---------------------------------------------------------------------------


def passive_effect(profession: Profession | None) -> EventEffect:
    """Skill and relationship drift a profession applies on every aging step."""
    if profession is None:
        return EventEffect()
    return EventEffect(
        skills=profession.skill_growth,
        relationships=profession.relationship_growth,
    )


def hiring_effect(profession: Profession) -> EventEffect:
    return EventEffect(profession=profession.id)


def enrollment_effect(education: EducationLevel) -> EventEffect:
    """Pay for the course, gain its skills and hold the qualification."""
    return EventEffect(
        wealth=-education.cost,
        skills=education.skill_growth,
        education=education.id,
    )


def work_effect(catalog: Catalog, character: Character, rng: random.Random) -> EventEffect | None:
    """
    One working day: a routine day, a demanding project or a problem at
    work, drawn uniformly. None when the character holds no known profession.
    """
    profession = catalog.get_profession(character.profession)
    if profession is None:
        return None

    income = profession_income(catalog, profession.id, character.skills)
    key_skill = next(iter(profession.required_skills), None)
    outcomes = [
        EventEffect(
            energy=-5,
            wealth=income // 30,
        ),
        EventEffect(
            energy=-10,
            happiness=5,
            wealth=income // 20,
        ),
        EventEffect(
            energy=-15,
            happiness=-10,
            skills=SkillDelta(**{key_skill: 2}) if key_skill else None,
        ),
    ]
    return rng.choice(outcomes)
