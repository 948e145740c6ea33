"""
lifesim/simulation.py
~~~~~~~~~~~~~~~~~~~~~
``LifeSession``: one character played decision by decision.

Each decision point is resolved completely before the next one can be
generated: effects, history, mortality, aging, bonus roll, reward scan,
then telemetry. A session owns its character; catalogs and rules are
shared read-only.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable

from lifesim.aging import age_event_interval, age_up, apply_disease_effects, recover_from_disease
from lifesim.catalog import Catalog, DifficultyLevel
from lifesim.character import create_character
from lifesim.effects import apply_effects
from lifesim.eligibility import (
    can_get_profession,
    can_start_education,
    enrollment_effect,
    hiring_effect,
    work_effect,
)
from lifesim.models import BRANCH_IDS, Character, CharacterSeed, DecisionPoint, HistoryRecord, RewardEvent
from lifesim.mortality import evaluate_death
from lifesim.patterns import build_decision_point, pick_pattern
from lifesim.persistence import from_snapshot, to_snapshot
from lifesim.rewards import grant_bonus, roll_bonus, scan_progress
from lifesim.rules import DEFAULT_RULES, Rules
from lifesim.telemetry import AGE_CHANGED, CHARACTER_CREATED, DEATH, STAT_CHANGED, Telemetry, emit
from utils.utils import current_timestamp

logger = logging.getLogger(__name__)

RECENT_PATTERN_MEMORY = 5


@dataclass
class TurnResult:
    """What resolving one decision point did to the character."""

    character: Character
    record: HistoryRecord
    aged: bool = False
    rewards: list[RewardEvent] = field(default_factory=list)

    @property
    def died(self) -> bool:
        return not self.character.is_alive


class LifeSession:
    def __init__(
        self,
        character: Character,
        catalog: Catalog,
        difficulty: DifficultyLevel | None = None,
        rules: Rules = DEFAULT_RULES,
        rng: random.Random | None = None,
        clock: Callable[[], int] = current_timestamp,
        telemetry: Telemetry | None = None,
    ):
        self.character = character
        self.catalog = catalog
        self.difficulty = difficulty or catalog.get_difficulty("medium")
        self.rules = rules
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock
        self.telemetry = telemetry
        self.decision: DecisionPoint | None = None
        self.decisions_this_year = 0
        self.recent_patterns: deque[str] = deque(maxlen=RECENT_PATTERN_MEMORY)

    @classmethod
    def start(
        cls,
        seed: CharacterSeed,
        catalog: Catalog,
        difficulty_id: str = "medium",
        rules: Rules = DEFAULT_RULES,
        rng: random.Random | None = None,
        clock: Callable[[], int] = current_timestamp,
        telemetry: Telemetry | None = None,
        current_year: int | None = None,
    ) -> LifeSession | None:
        """New session for a freshly created character; None for an invalid seed."""
        rng = rng if rng is not None else random.Random()
        difficulty = catalog.get_difficulty(difficulty_id)
        if difficulty is None:
            logger.warning("Unknown difficulty '%s', using medium.", difficulty_id)
            difficulty = catalog.get_difficulty("medium")

        character = create_character(
            seed, difficulty, catalog, rng, rules,
            current_year=current_year, now=clock(),
        )
        if character is None:
            return None

        session = cls(character, catalog, difficulty, rules, rng, clock, telemetry)
        # Characters start at 18 or older, so early milestones are already behind them.
        session.character = scan_progress(session.character, catalog, clock()).character
        emit(telemetry, CHARACTER_CREATED, {
            "characterId": character.id,
            "name": character.name,
            "age": character.age,
            "difficulty": difficulty.id if difficulty else None,
        })
        return session

    @property
    def multiplier(self) -> float:
        return self.difficulty.death_chance_multiplier if self.difficulty else 1.0

    @property
    def is_alive(self) -> bool:
        return self.character.is_alive

    # ------------------------------------------------------------------
    #  Decision points
    # ------------------------------------------------------------------

    def next_decision(self) -> DecisionPoint | None:
        """
        The active decision point, generating one if none is pending.
        Dead characters get no further decisions.
        """
        if not self.character.is_alive:
            return None
        if self.decision is not None:
            return self.decision

        pattern = pick_pattern(self.catalog, self.rng, exclude=self.recent_patterns)
        if pattern is None:
            logger.warning("No event patterns loaded; cannot generate a decision.")
            return None
        self.recent_patterns.append(pattern.name)
        self.decision = build_decision_point(pattern, self.character.age, self.rng)
        return self.decision

    def choose(self, choice: str) -> TurnResult | None:
        """Resolve the active decision point with branch ``choice``."""
        decision = self.decision
        if decision is None or not self.character.is_alive:
            logger.warning("No active decision point to resolve for %s.", self.character.id)
            return None
        if choice not in BRANCH_IDS:
            logger.warning("Invalid branch %r for decision %s.", choice, decision.id)
            return None

        before = self.character
        effect = decision.branches[choice].effects
        now = self.clock()

        character = apply_effects(before, effect)
        record = HistoryRecord(
            event_id=decision.id,
            situation=decision.situation,
            choice=choice,
            effects=effect,
            timestamp=now,
        )
        character = character.model_copy(update={"history": [*character.history, record]})
        self.decision = None

        character = evaluate_death(character, effect.death_chance, self.multiplier, rng=self.rng, rules=self.rules)
        result = TurnResult(character, record)

        if character.is_alive:
            self.decisions_this_year += 1
            if self.decisions_this_year >= age_event_interval(character.age, self.rules):
                character = age_up(character, catalog=self.catalog, rng=self.rng, rules=self.rules)
                self.decisions_this_year = 0
                result.aged = True
                if character.is_alive:
                    bonus = roll_bonus(self.catalog, self.rng, self.rules)
                    if bonus is not None:
                        character, reward = grant_bonus(character, bonus, now)
                        result.rewards.append(reward)

            if character.is_alive:
                progress = scan_progress(character, self.catalog, now)
                character = progress.character
                result.rewards.extend(progress.rewards)

        result.character = character
        self.character = character
        self._notify(before, character)
        return result

    # ------------------------------------------------------------------
    #  Career, education and health
    # ------------------------------------------------------------------

    def _mutate(self, effect, death_chance: float | None = None) -> Character:
        before = self.character
        character = apply_effects(before, effect)
        character = evaluate_death(character, death_chance, self.multiplier, rng=self.rng, rules=self.rules)
        if character.is_alive:
            character = scan_progress(character, self.catalog, self.clock()).character
        self.character = character
        self._notify(before, character)
        return character

    def assign_profession(self, profession_id: str) -> bool:
        if not self.character.is_alive:
            return False
        if not can_get_profession(self.catalog, profession_id, self.character.skills):
            logger.warning("%s is not eligible for profession '%s'.", self.character.id, profession_id)
            return False
        self._mutate(hiring_effect(self.catalog.get_profession(profession_id)))
        return True

    def enroll(self, education_id: str) -> bool:
        """Start an education track: eligible and able to pay its cost."""
        character = self.character
        if not character.is_alive:
            return False
        if not can_start_education(self.catalog, education_id, character.age, character.skills):
            logger.warning("%s is not eligible for education '%s'.", character.id, education_id)
            return False
        education = self.catalog.get_education(education_id)
        if character.stats.wealth < education.cost:
            logger.warning("%s cannot afford education '%s'.", character.id, education_id)
            return False
        self._mutate(enrollment_effect(education))
        return True

    def work(self) -> Character | None:
        if not self.character.is_alive:
            return None
        effect = work_effect(self.catalog, self.character, self.rng)
        if effect is None:
            return None
        return self._mutate(effect)

    def suffer_disease(self) -> Character | None:
        """One bout of the current disease, followed by a mortality check."""
        character = self.character
        if not character.is_alive or character.current_disease is None:
            return None
        before = character
        character = apply_disease_effects(character, self.catalog)
        character = evaluate_death(character, None, self.multiplier, rng=self.rng, rules=self.rules)
        self.character = character
        self._notify(before, character)
        return character

    def treat_disease(self) -> bool:
        character = self.character
        if not character.is_alive or character.current_disease is None:
            return False
        disease = self.catalog.get_disease(character.current_disease)
        cost = disease.treatment_cost if disease else 0
        if character.stats.wealth < cost:
            logger.warning("%s cannot afford treatment for '%s'.", character.id, character.current_disease)
            return False
        treated = recover_from_disease(character.model_copy(update={
            "stats": character.stats.model_copy(update={"wealth": character.stats.wealth - cost}),
        }))
        self.character = treated
        self._notify(character, treated)
        return True

    # ------------------------------------------------------------------
    #  Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        return to_snapshot(self.character)

    @classmethod
    def restore(
        cls,
        data: dict[str, Any],
        catalog: Catalog,
        difficulty_id: str = "medium",
        **kwargs,
    ) -> LifeSession | None:
        character = from_snapshot(data)
        if character is None:
            return None
        return cls(character, catalog, catalog.get_difficulty(difficulty_id), **kwargs)

    # ------------------------------------------------------------------
    #  Telemetry
    # ------------------------------------------------------------------

    def _notify(self, before: Character, after: Character) -> None:
        if before.stats != after.stats:
            emit(self.telemetry, STAT_CHANGED, {
                "characterId": after.id,
                "before": before.stats.model_dump(by_alias=True),
                "after": after.stats.model_dump(by_alias=True),
            })
        if before.age != after.age:
            emit(self.telemetry, AGE_CHANGED, {"characterId": after.id, "age": after.age})
        if before.is_alive and not after.is_alive:
            emit(self.telemetry, DEATH, {
                "characterId": after.id,
                "age": after.age,
                "cause": after.death_cause,
            })
