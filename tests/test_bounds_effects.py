import pytest

from lifesim.bounds import STAT_BOUNDS, clamp_stats, in_bounds
from lifesim.effects import apply_effects, apply_stat_effects
from lifesim.models import (
    CharacterStats,
    EventEffect,
    RelationshipDelta,
    SkillDelta,
)


@pytest.mark.parametrize("values", [
    {"health": 500, "happiness": 500, "energy": 500, "wealth": 5_000_000},
    {"health": -500, "happiness": -500, "energy": -500, "wealth": -10},
    {"health": 200, "happiness": -50, "energy": 150, "wealth": 0},
    {"health": 37, "happiness": 12, "energy": -3, "wealth": 999},
])
def test_clamp_is_idempotent_and_in_range(values):
    once = clamp_stats(CharacterStats(**values))
    assert clamp_stats(once) == once
    assert in_bounds(once)
    for name, (low, high) in STAT_BOUNDS.items():
        assert low <= getattr(once, name) <= high


def test_clamp_leaves_valid_stats_alone():
    stats = CharacterStats(health=50, happiness=60, energy=70, wealth=80)
    assert clamp_stats(stats) == stats


def test_character_is_reclamped_on_load(make_character):
    character = make_character(stats={"health": 900, "wealth": -5}, skills={"social": 400})
    assert character.stats.health == 200
    assert character.stats.wealth == 0
    assert character.skills.social == 200


def test_stat_effect_adds_and_clamps():
    stats = apply_stat_effects(CharacterStats(health=190), EventEffect(health=30, wealth=-5000))
    assert stats.health == 200
    assert stats.wealth == 0
    assert stats.happiness == 100


def test_zero_effect_is_noop(make_character):
    character = make_character()
    assert apply_effects(character, EventEffect()) == character
    assert apply_effects(character, None) == character


def test_effect_only_touches_named_fields(make_character):
    character = make_character(skills={"intelligence": 30, "social": 10})
    effect = EventEffect(
        wealth=6000,
        skills=SkillDelta(intelligence=5),
        relationships=RelationshipDelta(friends=-20),
    )
    updated = apply_effects(character, effect)

    assert updated.stats.wealth == 7000
    assert updated.stats.health == character.stats.health
    assert updated.skills.intelligence == 35
    assert updated.skills.social == 10
    assert updated.relationships.friends == -20
    assert updated.relationships.family == character.relationships.family
    assert updated.history == character.history


def test_skill_and_relationship_deltas_clamp(make_character):
    character = make_character(skills={"physical": 195}, relationships={"romantic": -95})
    updated = apply_effects(character, EventEffect(
        skills=SkillDelta(physical=20),
        relationships=RelationshipDelta(romantic=-20),
    ))
    assert updated.skills.physical == 200
    assert updated.relationships.romantic == -100


def test_assignments_overwrite(make_character):
    character = make_character(profession="teacher", education_level="high_school")
    updated = apply_effects(character, EventEffect(profession="doctor", disease="flu"))
    assert updated.profession == "doctor"
    assert updated.education_level == "high_school"
    assert updated.current_disease == "flu"


def test_apply_effects_never_kills(make_character):
    character = make_character()
    updated = apply_effects(character, EventEffect(health=-1000, death_chance=1.0))
    assert updated.is_alive
    assert updated.stats.health == -100


def test_input_is_not_mutated(make_character):
    character = make_character()
    apply_effects(character, EventEffect(wealth=100, skills=SkillDelta(business=3)))
    assert character.stats.wealth == 1000
    assert character.skills.business == 0


def test_death_chance_is_clamped_to_probability():
    assert EventEffect(death_chance=3.0).death_chance == 1.0
    assert EventEffect(death_chance=-1.0).death_chance == 0.0


def test_unknown_delta_names_are_ignored():
    assert SkillDelta.model_validate({"juggling": 5, "social": 2}).items() == [("social", 2)]
    assert RelationshipDelta.model_validate({"rivals": -5}).items() == []
