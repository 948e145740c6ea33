import random

import pytest

from lifesim.character import create_character, starting_age, validate_character_seed
from lifesim.models import CharacterSeed

YEAR = 2024


def _seed(**overrides):
    data = {"name": "Ada Lovelace", "country": "GB", "birth_year": 1990}
    data.update(overrides)
    return CharacterSeed(**data)


@pytest.mark.parametrize("overrides, problem", [
    ({"name": "A"}, "Name"),
    ({"name": "  "}, "Name"),
    ({"country": ""}, "Country"),
    ({"birth_year": 1850}, "Birth year"),
    ({"birth_year": YEAR + 1}, "Birth year"),
])
def test_invalid_seeds(overrides, problem):
    errors = validate_character_seed(_seed(**overrides), YEAR)
    assert any(problem in e for e in errors)


def test_valid_seed():
    assert validate_character_seed(_seed(), YEAR) == []


def test_invalid_seed_creates_nothing(catalog):
    assert create_character(_seed(name=""), None, catalog, random.Random(1), current_year=YEAR) is None


def test_starting_age_is_clamped(rules):
    assert starting_age(2020, YEAR, rules) == 18
    assert starting_age(1990, YEAR, rules) == 34
    assert starting_age(1901, YEAR, rules) == 65


def test_new_character(catalog, rules):
    character = create_character(
        _seed(), catalog.get_difficulty("medium"), catalog, random.Random(7),
        rules, current_year=YEAR, now=123,
    )
    assert character.is_alive
    assert character.id.startswith("char_123_")
    assert character.age == 34
    assert character.stats.health == 100
    assert character.stats.wealth == 1000
    assert 20 <= character.skills.intelligence < 40
    assert 10 <= character.skills.technical < 25
    assert 50 <= character.relationships.family < 80
    assert character.relationships.romantic == 0
    assert len(character.achievements) == len(catalog.achievements)
    assert not any(a.unlocked for a in character.achievements)
    assert len(character.milestones) == len(catalog.milestones)


@pytest.mark.parametrize("difficulty, health, wealth", [("easy", 120, 1500), ("hard", 80, 700)])
def test_starting_bonus_is_added(catalog, rules, difficulty, health, wealth):
    character = create_character(
        _seed(), catalog.get_difficulty(difficulty), catalog, random.Random(7),
        rules, current_year=YEAR,
    )
    assert character.stats.health == health
    assert character.stats.energy == health
    assert character.stats.wealth == wealth


def test_same_seed_same_character(catalog, rules):
    a = create_character(_seed(), None, catalog, random.Random(9), rules, current_year=YEAR, now=1)
    b = create_character(_seed(), None, catalog, random.Random(9), rules, current_year=YEAR, now=1)
    assert a == b
