import pytest

from conftest import ScriptedRandom
from lifesim.models import CharacterStats
from lifesim.mortality import (
    CAUSE_ACCIDENT,
    CAUSE_DEPRESSION,
    CAUSE_EXHAUSTION,
    CAUSE_HEALTH,
    CAUSE_UNKNOWN,
    check_death,
    evaluate_death,
    get_death_cause,
)


def test_critical_health_kills():
    stats = CharacterStats(health=-60)
    rng = ScriptedRandom()
    assert check_death(stats, 0.0, rng=rng)
    assert get_death_cause(stats, 0.0) == CAUSE_HEALTH


@pytest.mark.parametrize("death_chance", [None, 0.0, 0.5, 1.0])
def test_critical_health_kills_regardless_of_death_chance(death_chance):
    rng = ScriptedRandom([0.99])
    assert check_death(CharacterStats(health=-50), death_chance, rng=rng)
    # Deterministic deaths consume no draw.
    assert rng.values == [0.99]


def test_cause_priority():
    stats = CharacterStats(health=-70, energy=-50, happiness=-40)
    assert get_death_cause(stats) == CAUSE_HEALTH
    assert get_death_cause(CharacterStats(energy=-50, happiness=-40)) == CAUSE_EXHAUSTION
    assert get_death_cause(CharacterStats(happiness=-30)) == CAUSE_DEPRESSION


def test_healthy_character_without_death_chance_survives_without_drawing():
    rng = ScriptedRandom([0.0])
    assert not check_death(CharacterStats(), 0.0, rng=rng)
    assert rng.values == [0.0]


def test_death_chance_is_dampened(rules):
    # 1.0 x 1.0 x 0.1 dampening leaves a 10% chance.
    assert check_death(CharacterStats(), 1.0, 1.0, rng=ScriptedRandom([0.05]), rules=rules)
    assert not check_death(CharacterStats(), 1.0, 1.0, rng=ScriptedRandom([0.2]), rules=rules)


def test_difficulty_multiplier_scales_chance(rules):
    # hard: 0.5 x 1.5 x 0.1 = 0.075
    assert check_death(CharacterStats(), 0.5, 1.5, rng=ScriptedRandom([0.07]), rules=rules)
    assert not check_death(CharacterStats(), 0.5, 1.0, rng=ScriptedRandom([0.07]), rules=rules)


def test_causes_without_threshold():
    assert get_death_cause(CharacterStats(), 0.3) == CAUSE_ACCIDENT
    assert get_death_cause(CharacterStats(), 0.0) == CAUSE_UNKNOWN


def test_evaluate_death_marks_terminal(make_character):
    character = make_character(stats={"health": -60})
    dead = evaluate_death(character, None, 1.0, rng=ScriptedRandom())
    assert not dead.is_alive
    assert dead.death_cause == CAUSE_HEALTH
    assert character.is_alive


def test_evaluate_death_returns_survivor_unchanged(make_character):
    character = make_character()
    assert evaluate_death(character, 0.0, 1.0, rng=ScriptedRandom()) is character
