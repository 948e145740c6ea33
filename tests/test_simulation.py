import random

import pytest

from conftest import ScriptedRandom
from lifesim.models import Branch, CharacterSeed, DecisionPoint, EventEffect
from lifesim.mortality import CAUSE_HEALTH
from lifesim.simulation import LifeSession
from lifesim.telemetry import AGE_CHANGED, CHARACTER_CREATED, DEATH, STAT_CHANGED, RecordingTelemetry


def _decision(**effects):
    return DecisionPoint(
        id="evt_test",
        situation="A quiet day",
        branches={b: Branch(text=b, effects=EventEffect(**effects)) for b in "ABC"},
    )


@pytest.fixture
def telemetry():
    return RecordingTelemetry()


@pytest.fixture
def session_for(catalog, rules, telemetry):
    def _session(character):
        return LifeSession(
            character, catalog, rules=rules,
            rng=ScriptedRandom(), clock=lambda: 42, telemetry=telemetry,
        )

    return _session


def test_start(catalog, rules, telemetry):
    session = LifeSession.start(
        CharacterSeed(name="Grace", country="US", birth_year=1990),
        catalog, "easy", rules=rules, rng=random.Random(1),
        telemetry=telemetry, current_year=2024,
    )
    assert session.difficulty.id == "easy"
    assert session.character.age == 34
    assert "prime_age" in session.character.completed_milestones()
    assert telemetry.names()[0] == CHARACTER_CREATED


def test_start_with_bad_seed(catalog):
    assert LifeSession.start(CharacterSeed(name="", country="US", birth_year=1990), catalog) is None


def test_unknown_difficulty_falls_back_to_medium(catalog):
    session = LifeSession.start(
        CharacterSeed(name="Grace", country="US", birth_year=1990),
        catalog, "nightmare", rng=random.Random(1),
    )
    assert session.difficulty.id == "medium"


def test_decision_is_stable_until_chosen(make_character, session_for):
    session = session_for(make_character())
    decision = session.next_decision()
    assert session.next_decision() is decision
    assert session.choose("D") is None
    assert session.next_decision() is decision

    result = session.choose("B")
    assert result.record.event_id == decision.id
    assert result.record.choice == "B"
    assert result.record.timestamp == 42
    assert session.character.history[-1] == result.record
    assert session.decision is None


def test_choose_without_decision(make_character, session_for):
    assert session_for(make_character()).choose("A") is None


def test_recent_patterns_are_not_repeated(make_character, session_for):
    session = session_for(make_character())
    seen = []
    for _ in range(5):
        seen.append(session.next_decision().pattern)
        session.choose("B")
    assert len(set(seen)) == 5


def test_fatal_choice_ends_the_turn(make_character, session_for, telemetry):
    session = session_for(make_character(stats={"health": -45}))
    session.decision = _decision(health=-10)

    result = session.choose("A")
    assert result.died
    assert session.character.death_cause == CAUSE_HEALTH
    assert not result.aged
    assert result.rewards == []
    assert session.next_decision() is None
    assert session.choose("A") is None
    assert telemetry.names() == [STAT_CHANGED, DEATH]


def test_character_ages_after_interval(make_character, session_for, telemetry):
    session = session_for(make_character(age=30))
    # Ages 30 to 49 resolve six decisions per year.
    for turn in range(6):
        session.decision = _decision()
        result = session.choose("A")
        assert result.aged == (turn == 5)
    assert session.character.age == 31
    assert session.decisions_this_year == 0
    assert AGE_CHANGED in telemetry.names()


def test_rewards_scanned_after_choice(make_character, session_for):
    session = session_for(make_character(stats={"wealth": 5000}))
    session.decision = _decision(wealth=6000)
    result = session.choose("C")
    assert "rich" in session.character.unlocked_achievements()
    assert "rich" in [r.id for r in result.rewards]

    session.decision = _decision()
    assert "rich" not in [r.id for r in session.choose("C").rewards]


def test_assign_profession(make_character, session_for):
    session = session_for(make_character(skills={"intelligence": 40, "social": 40}))
    assert not session.assign_profession("doctor")
    assert session.character.profession is None
    assert session.assign_profession("teacher")
    assert session.character.profession == "teacher"
    assert "first_job" in session.character.unlocked_achievements()


def test_enroll(make_character, session_for):
    session = session_for(make_character(skills={"intelligence": 90}, stats={"wealth": 100}))
    assert not session.enroll("college")
    session.character = session.character.model_copy(update={
        "stats": session.character.stats.model_copy(update={"wealth": 5000}),
    })
    assert session.enroll("college")
    assert session.character.education_level == "college"
    assert "college_graduate" in session.character.unlocked_achievements()


def test_work_requires_profession(make_character, session_for):
    assert session_for(make_character()).work() is None
    session = session_for(make_character(profession="waiter"))
    before = session.character.stats.energy
    assert session.work().stats.energy < before


def test_disease_and_treatment(make_character, session_for):
    session = session_for(make_character(current_disease="flu"))
    assert session.suffer_disease().stats.health == 85
    assert session.treat_disease()
    assert session.character.current_disease is None
    assert session.character.stats.wealth == 800
    assert not session.treat_disease()


def test_unaffordable_treatment(make_character, session_for):
    session = session_for(make_character(current_disease="cancer"))
    assert not session.treat_disease()
    assert session.character.current_disease == "cancer"


def test_snapshot_round_trip(make_character, session_for, catalog):
    session = session_for(make_character())
    session.next_decision()
    session.choose("A")
    restored = LifeSession.restore(session.snapshot(), catalog)
    assert restored.character == session.character
    assert "isAlive" in session.snapshot()


def test_broken_telemetry_does_not_interrupt(make_character, catalog):
    class Broken:
        def notify(self, event, payload):
            raise RuntimeError("sink down")

    session = LifeSession(make_character(), catalog, rng=ScriptedRandom(), telemetry=Broken())
    session.decision = _decision(health=-5)
    result = session.choose("A")
    assert result.character.stats.health == 95
