import random

from conftest import ScriptedRandom
from lifesim.models import CharacterSeed
from lifesim.simulation import LifeSession
from main import play_life, print_statistics, run_main


def test_play_life_runs_to_death(catalog, rules):
    rng = random.Random(11)
    session = LifeSession.start(
        CharacterSeed(name="Auto", country="DE", birth_year=1960),
        catalog, rules=rules, rng=rng,
    )
    character = play_life(session, rng)
    assert not character.is_alive
    assert character.death_cause
    assert len(character.history) > 0


def test_play_life_respects_cap(catalog, rules):
    session = LifeSession.start(
        CharacterSeed(name="Capped", country="DE", birth_year=1990),
        catalog, rules=rules, rng=ScriptedRandom(),
    )
    character = play_life(session, ScriptedRandom(), max_decisions=3)
    assert len(character.history) <= 3


def test_run_main_prints_statistics(capsys):
    lives = run_main(3, seed=5)
    assert len(lives) == 3
    out = capsys.readouterr().out
    assert "Age at Death" in out
    assert "Causes of Death" in out


def test_print_statistics_handles_survivors(make_character, capsys):
    print_statistics([make_character()])
    out = capsys.readouterr().out
    assert "Still alive" in out
