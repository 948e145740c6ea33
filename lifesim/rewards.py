"""
lifesim/rewards.py
~~~~~~~~~~~~~~~~~~
Achievement and milestone detection, and bonus events.

Unlocking is one-shot: an achievement or milestone already marked on the
character is skipped, so its reward is never applied twice no matter how
often a scan runs.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from lifesim.catalog import (
    Achievement,
    AgeRequirement,
    BonusEvent,
    Catalog,
    ComboRequirement,
    EducationRequirement,
    Milestone,
    ProfessionRequirement,
    RelationshipRequirement,
    SkillRequirement,
    WealthRequirement,
)
from lifesim.effects import apply_effects
from lifesim.eligibility import at_max_level
from lifesim.models import AchievementRecord, Character, MilestoneRecord, RewardEvent
from lifesim.rules import DEFAULT_RULES, Rules
from utils.utils import current_timestamp

logger = logging.getLogger(__name__)


@dataclass
class ProgressResult:
    character: Character
    rewards: list[RewardEvent] = field(default_factory=list)

    @property
    def unlocked_ids(self) -> list[str]:
        return [reward.id for reward in self.rewards]


# ---------------------------------------------------------------------------
#  Requirement predicates
# ---------------------------------------------------------------------------


def requirement_met(requirement, character: Character, catalog: Catalog) -> bool:
    if isinstance(requirement, SkillRequirement):
        return all(
            getattr(character.skills, skill, 0) >= level
            for skill, level in requirement.value.items()
        )
    if isinstance(requirement, RelationshipRequirement):
        return all(
            getattr(character.relationships, name, 0) >= level
            for name, level in requirement.value.items()
        )
    if isinstance(requirement, AgeRequirement):
        return character.age >= requirement.value
    if isinstance(requirement, WealthRequirement):
        return character.stats.wealth >= requirement.value
    if isinstance(requirement, EducationRequirement):
        if requirement.value == "any":
            return character.education_level is not None
        return character.education_level == requirement.value
    if isinstance(requirement, ProfessionRequirement):
        if requirement.value == "any":
            return character.profession is not None
        if requirement.value == "max_level":
            return at_max_level(catalog, character)
        return character.profession == requirement.value
    if isinstance(requirement, ComboRequirement):
        return all(requirement_met(nested, character, catalog) for nested in requirement.value)
    return False


# ---------------------------------------------------------------------------
#  Unlocking
# ---------------------------------------------------------------------------


def _replace_record(records: list, record) -> list:
    """New list with ``record`` in place of the entry sharing its id."""
    replaced = [record if r.id == record.id else r for r in records]
    if not any(r.id == record.id for r in records):
        replaced.append(record)
    return replaced


def unlock_achievement(character: Character, achievement: Achievement, now: int) -> tuple[Character, RewardEvent]:
    record = AchievementRecord(id=achievement.id, unlocked=True, unlocked_at=now)
    reward = RewardEvent(
        id=achievement.id,
        type="achievement",
        name=achievement.name,
        effects=achievement.reward,
        timestamp=now,
    )
    rewarded = apply_effects(character, achievement.reward)
    rewarded = rewarded.model_copy(update={
        "achievements": _replace_record(character.achievements, record),
        "rewards": [*character.rewards, reward],
    })
    logger.info("%s unlocked achievement '%s'.", character.name, achievement.name)
    return rewarded, reward


def complete_milestone(character: Character, milestone: Milestone, now: int) -> tuple[Character, RewardEvent]:
    record = MilestoneRecord(id=milestone.id, completed=True, completed_at=now)
    reward = RewardEvent(
        id=milestone.id,
        type="milestone",
        name=milestone.name,
        effects=milestone.reward,
        timestamp=now,
    )
    rewarded = apply_effects(character, milestone.reward)
    rewarded = rewarded.model_copy(update={
        "milestones": _replace_record(character.milestones, record),
        "rewards": [*character.rewards, reward],
    })
    logger.info("%s reached milestone '%s'.", character.name, milestone.name)
    return rewarded, reward


def scan_achievements(character: Character, catalog: Catalog, now: int | None = None) -> ProgressResult:
    """Single pass over the achievement catalog."""
    now = current_timestamp() if now is None else now
    result = ProgressResult(character)
    for achievement in catalog.achievements:
        record = result.character.achievement(achievement.id)
        if record is not None and record.unlocked:
            continue
        if requirement_met(achievement.requirement, result.character, catalog):
            result.character, reward = unlock_achievement(result.character, achievement, now)
            result.rewards.append(reward)
    return result


def scan_milestones(character: Character, catalog: Catalog, now: int | None = None) -> ProgressResult:
    now = current_timestamp() if now is None else now
    result = ProgressResult(character)
    for milestone in catalog.milestones:
        record = result.character.milestone(milestone.id)
        if record is not None and record.completed:
            continue
        if result.character.age >= milestone.age:
            result.character, reward = complete_milestone(result.character, milestone, now)
            result.rewards.append(reward)
    return result


def scan_progress(character: Character, catalog: Catalog, now: int | None = None) -> ProgressResult:
    """
    Scan milestones and achievements until nothing new unlocks.

    Rewards can themselves satisfy further achievements (a wealth reward
    crossing a wealth threshold), so passes repeat to a fixed point; each
    pass unlocks at least one entry, which bounds the loop by catalog size.
    A second call on the returned character therefore unlocks nothing.
    """
    now = current_timestamp() if now is None else now
    result = ProgressResult(character)
    while True:
        milestones = scan_milestones(result.character, catalog, now)
        achievements = scan_achievements(milestones.character, catalog, now)
        new_rewards = milestones.rewards + achievements.rewards
        if not new_rewards:
            return result
        result.character = achievements.character
        result.rewards.extend(new_rewards)


# ---------------------------------------------------------------------------
#  Bonus events
# ---------------------------------------------------------------------------


def roll_bonus(catalog: Catalog, rng: random.Random, rules: Rules = DEFAULT_RULES) -> BonusEvent | None:
    """At most one bonus per call: one chance draw, then a uniform pick."""
    bonuses = catalog.bonus_events
    if not bonuses:
        return None
    if rng.random() < rules.bonus_event_chance:
        return rng.choice(bonuses)
    return None


def grant_bonus(character: Character, bonus: BonusEvent, now: int | None = None) -> tuple[Character, RewardEvent]:
    now = current_timestamp() if now is None else now
    reward = RewardEvent(
        id=bonus.id,
        type="bonus",
        name=bonus.name,
        effects=bonus.effects,
        timestamp=now,
    )
    rewarded = apply_effects(character, bonus.effects)
    rewarded = rewarded.model_copy(update={"rewards": [*character.rewards, reward]})
    logger.info("%s received bonus '%s'.", character.name, bonus.name)
    return rewarded, reward
