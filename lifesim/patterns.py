"""
lifesim/patterns.py
~~~~~~~~~~~~~~~~~~~
Choosing an event pattern and turning it into an age-appropriate decision
point.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable

from lifesim.catalog import Catalog, EventPattern
from lifesim.models import (
    Branch,
    DecisionPoint,
    EventEffect,
    RelationshipDelta,
    SkillDelta,
)
from utils.utils import generate_event_id

logger = logging.getLogger(__name__)

CHILD_AGE = 12
YOUNG_ADULT_AGE = 18
ADULT_AGE = 30
SENIOR_AGE = 60

CHILD_HEALTH_SCALE = {"A": 1.5, "B": 1.2, "C": 0.8}
CHILD_INTELLIGENCE_BONUS = {"A": 2, "B": 1}
YOUNG_ADULT_FRIENDS_BONUS = {"A": 3, "B": 5}
YOUNG_ADULT_ROMANTIC_BONUS = {"C": 5}
ADULT_WEALTH_SCALE = {"A": 1.3, "B": 1.5, "C": 1.2}
SENIOR_HEALTH_SCALE = {"A": 2.0, "B": 1.8, "C": 1.5}
SENIOR_PENALTY_DAMPENING = 0.7

BRANCH_TEXT = {
    "A": "Play it safe",
    "B": "Take the middle road",
    "C": "Take the bold option",
}


def _scale(value: int | None, factor: float) -> int | None:
    if value is None:
        return None
    return int(round(value * factor))


def _add_skill(delta: SkillDelta | None, skill: str, amount: int) -> SkillDelta:
    current = delta.model_dump() if delta is not None else {}
    current[skill] = (current.get(skill) or 0) + amount
    return SkillDelta(**current)


def _add_relationship(delta: RelationshipDelta | None, name: str, amount: int) -> RelationshipDelta:
    current = delta.model_dump() if delta is not None else {}
    current[name] = (current.get(name) or 0) + amount
    return RelationshipDelta(**current)


def adapt_branch(branch_id: str, effect: EventEffect, age: int) -> EventEffect:
    """Age-adapted copy of one branch effect. Ages 12 to 17 are left as they are."""
    if age < CHILD_AGE:
        update = {"health": _scale(effect.health, CHILD_HEALTH_SCALE[branch_id])}
        bonus = CHILD_INTELLIGENCE_BONUS.get(branch_id)
        if bonus:
            update["skills"] = _add_skill(effect.skills, "intelligence", bonus)
        return effect.model_copy(update=update)

    if age < YOUNG_ADULT_AGE:
        return effect

    if age < ADULT_AGE:
        relationships = effect.relationships
        if branch_id in YOUNG_ADULT_FRIENDS_BONUS:
            relationships = _add_relationship(relationships, "friends", YOUNG_ADULT_FRIENDS_BONUS[branch_id])
        if branch_id in YOUNG_ADULT_ROMANTIC_BONUS:
            relationships = _add_relationship(relationships, "romantic", YOUNG_ADULT_ROMANTIC_BONUS[branch_id])
        return effect.model_copy(update={"relationships": relationships})

    if age < SENIOR_AGE:
        return effect.model_copy(update={"wealth": _scale(effect.wealth, ADULT_WEALTH_SCALE[branch_id])})

    health = _scale(effect.health, SENIOR_HEALTH_SCALE[branch_id])
    if branch_id == "C" and health is not None and health < 0:
        health = _scale(health, SENIOR_PENALTY_DAMPENING)
    return effect.model_copy(update={"health": health})


def adapt_pattern_to_age(pattern: EventPattern, age: int) -> dict[str, EventEffect]:
    """
    Adapt every branch of ``pattern`` to ``age``.

    The catalog pattern is never modified, so each generated event starts
    from the base template and adaptation never compounds.
    """
    return {
        branch_id: adapt_branch(branch_id, effect, age)
        for branch_id, effect in pattern.branches().items()
    }


def patterns_by_strategy(catalog: Catalog, strategy: str) -> list[EventPattern]:
    return [p for p in catalog.event_patterns if p.strategy == strategy]


def pick_pattern(
    catalog: Catalog,
    rng: random.Random,
    exclude: Iterable[str] = (),
) -> EventPattern | None:
    """
    Uniform pick among the patterns not named in ``exclude``. When every
    pattern is excluded the exclusion is dropped.
    """
    patterns = catalog.event_patterns
    if not patterns:
        return None
    excluded = set(exclude)
    candidates = [p for p in patterns if p.name not in excluded] or list(patterns)
    return rng.choice(candidates)


def build_decision_point(
    pattern: EventPattern,
    age: int,
    rng: random.Random,
    situation: str | None = None,
) -> DecisionPoint:
    branches = {
        branch_id: Branch(text=BRANCH_TEXT[branch_id], effects=effect)
        for branch_id, effect in adapt_pattern_to_age(pattern, age).items()
    }
    decision = DecisionPoint(
        id=generate_event_id(rng),
        situation=situation or pattern.description or pattern.name,
        pattern=pattern.name,
        branches=branches,
    )
    logger.debug("Generated decision %s from pattern '%s' at age %d.", decision.id, pattern.name, age)
    return decision
