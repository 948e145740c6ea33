"""
lifesim/aging.py
~~~~~~~~~~~~~~~~
Advancing a character's age, and the slow changes that come with it.

``age_up`` is the only place where death can happen without a stat
threshold being crossed (natural causes in old age). Threshold deaths are
the mortality module's job and are not checked here.
"""

from __future__ import annotations

import logging
import random

from lifesim.catalog import Catalog
from lifesim.effects import apply_effects, apply_skill_effects
from lifesim.eligibility import passive_effect
from lifesim.models import Character, EventEffect, SkillDelta
from lifesim.mortality import CAUSE_NATURAL
from lifesim.rules import DEFAULT_RULES, Rules

logger = logging.getLogger(__name__)


def age_skill_drift(age: int) -> SkillDelta:
    """Skill change for one aging step, selected by the age reached."""
    if age < 20:
        return SkillDelta(intelligence=2, physical=1)
    if age < 50:
        return SkillDelta(intelligence=1, business=1)
    if age < 70:
        return SkillDelta(physical=-1)
    return SkillDelta(physical=-2, intelligence=-1)


def age_up(
    character: Character,
    years: int = 1,
    *,
    catalog: Catalog,
    rng: random.Random,
    rules: Rules = DEFAULT_RULES,
) -> Character:
    """
    Advance ``character`` by ``years`` and apply one step of age effects.

    Draw order: natural death (age >= 80), then disease onset (age >= 60
    and currently healthy), then the disease pick. Drift and profession
    effects are applied once per call, not once per year. ``years < 1`` is
    a no-op.
    """
    if years < 1:
        logger.warning("Ignoring age_up of %s by %d years.", character.id, years)
        return character

    new_age = character.age + years

    if new_age >= rules.natural_death_age and rng.random() < rules.natural_death_chance:
        logger.info("%s (%s) died of natural causes at age %d.", character.name, character.id, new_age)
        return character.model_copy(update={
            "age": new_age,
            "is_alive": False,
            "death_cause": CAUSE_NATURAL,
        })

    skills = apply_skill_effects(character.skills, age_skill_drift(new_age))

    disease = character.current_disease
    if new_age >= rules.disease_onset_age and disease is None:
        candidates = catalog.age_related_diseases()
        if candidates and rng.random() < rules.disease_onset_chance:
            disease = rng.choice(candidates).id
            logger.info("%s (%s) developed %s at age %d.", character.name, character.id, disease, new_age)

    aged = character.model_copy(update={
        "age": new_age,
        "skills": skills,
        "current_disease": disease,
    })

    if aged.profession is not None:
        aged = apply_effects(aged, passive_effect(catalog.get_profession(aged.profession)))

    return aged


def disease_effect(catalog: Catalog, disease_id: str | None) -> EventEffect | None:
    disease = catalog.get_disease(disease_id)
    if disease is None:
        return None
    return EventEffect(
        health=disease.health_impact,
        happiness=disease.happiness_impact,
        energy=disease.energy_impact,
    )


def apply_disease_effects(character: Character, catalog: Catalog) -> Character:
    """Apply one bout of the current disease. Healthy characters are unchanged."""
    effect = disease_effect(catalog, character.current_disease)
    if effect is None:
        return character
    return apply_effects(character, effect)


def recover_from_disease(character: Character) -> Character:
    if character.current_disease is None:
        return character
    return character.model_copy(update={"current_disease": None})


def life_stage(age: int) -> str:
    if age < 5:
        return "infancy"
    if age < 12:
        return "childhood"
    if age < 18:
        return "adolescence"
    if age < 25:
        return "youth"
    if age < 40:
        return "young adulthood"
    if age < 60:
        return "maturity"
    if age < 75:
        return "senior years"
    return "old age"


def age_event_interval(age: int, rules: Rules = DEFAULT_RULES) -> int:
    """Decision points to resolve before the character ages another year."""
    for band in rules.age_event_intervals:
        if age < band.below_age:
            return band.interval
    return rules.elder_event_interval
