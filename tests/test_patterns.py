import random

from conftest import ScriptedRandom
from lifesim.catalog import EventPattern
from lifesim.models import EventEffect, RelationshipDelta, SkillDelta
from lifesim.patterns import (
    adapt_pattern_to_age,
    build_decision_point,
    patterns_by_strategy,
    pick_pattern,
)

BASE = EventPattern(
    name="test_pattern",
    description="A test situation",
    strategy="balanced",
    A=EventEffect(health=10, wealth=100),
    B=EventEffect(health=10, wealth=100, relationships=RelationshipDelta(friends=2)),
    C=EventEffect(health=-10, wealth=100, skills=SkillDelta(creativity=3)),
)


def test_children_scale_health_and_gain_intelligence():
    adapted = adapt_pattern_to_age(BASE, 8)
    assert [adapted[b].health for b in "ABC"] == [15, 12, -8]
    assert adapted["A"].skills.intelligence == 2
    assert adapted["B"].skills.intelligence == 1
    assert adapted["C"].skills == SkillDelta(creativity=3)


def test_teenagers_are_unchanged():
    assert adapt_pattern_to_age(BASE, 15) == BASE.branches()


def test_young_adults_gain_relationships():
    adapted = adapt_pattern_to_age(BASE, 25)
    assert adapted["A"].relationships.friends == 3
    assert adapted["B"].relationships.friends == 7
    assert adapted["C"].relationships.romantic == 5
    assert adapted["A"].health == 10


def test_adults_scale_wealth():
    adapted = adapt_pattern_to_age(BASE, 40)
    assert [adapted[b].wealth for b in "ABC"] == [130, 150, 120]


def test_seniors_scale_health_and_dampen_penalties():
    adapted = adapt_pattern_to_age(BASE, 70)
    assert adapted["A"].health == 20
    assert adapted["B"].health == 18
    # -10 x 1.5 x 0.7
    assert adapted["C"].health == -10


def test_absent_fields_stay_absent():
    pattern = BASE.model_copy(update={"a": EventEffect(happiness=5)})
    adapted = adapt_pattern_to_age(pattern, 40)
    assert adapted["A"].wealth is None
    assert adapted["A"].health is None


def test_adaptation_does_not_compound():
    first = adapt_pattern_to_age(BASE, 70)
    second = adapt_pattern_to_age(BASE, 70)
    assert first == second
    assert BASE.a.health == 10


def test_pick_pattern_excludes_recent(catalog):
    names = [p.name for p in catalog.event_patterns]
    keep = names[0]
    picked = pick_pattern(catalog, random.Random(3), exclude=names[1:])
    assert picked.name == keep


def test_pick_pattern_falls_back_when_all_excluded(catalog):
    names = [p.name for p in catalog.event_patterns]
    assert pick_pattern(catalog, random.Random(3), exclude=names) is not None


def test_patterns_by_strategy(catalog):
    risky = patterns_by_strategy(catalog, "risk_reward")
    assert risky
    assert all(p.strategy == "risk_reward" for p in risky)


def test_build_decision_point():
    decision = build_decision_point(BASE, 40, ScriptedRandom())
    assert set(decision.branches) == {"A", "B", "C"}
    assert decision.pattern == "test_pattern"
    assert decision.situation == "A test situation"
    assert decision.branches["B"].effects.wealth == 150
