import random

import pytest

from lifesim.config_loader import ConfigLoader
from lifesim.models import (
    Character,
    CharacterRelationships,
    CharacterSkills,
    CharacterStats,
)


class ScriptedRandom(random.Random):
    """
    ``random()`` returns the queued values in order, then DEFAULT.

    ``choice`` and ``randrange`` still go through ``getrandbits`` and never
    consume queued values.
    """

    DEFAULT = 0.99

    def __init__(self, values=()):
        super().__init__(0)
        self.values = list(values)

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.DEFAULT

    def getrandbits(self, k):
        return super().getrandbits(k)


@pytest.fixture(scope="session")
def config_loader():
    return ConfigLoader()


@pytest.fixture(scope="session")
def catalog(config_loader):
    return config_loader.build_catalog()


@pytest.fixture(scope="session")
def rules(config_loader):
    return config_loader.get_rules()


@pytest.fixture
def make_character():
    def _make(stats=None, skills=None, relationships=None, **fields):
        data = {
            "id": "char_test",
            "name": "Test Person",
            "country": "US",
            "birth_year": 1990,
            "age": 30,
            "stats": CharacterStats(**(stats or {})),
            "skills": CharacterSkills(**(skills or {})),
            "relationships": CharacterRelationships(**(relationships or {})),
        }
        data.update(fields)
        return Character(**data)

    return _make
