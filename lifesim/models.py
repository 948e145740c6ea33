"""
Pydantic models for the LifeSim engine.

Attributes are snake_case in Python; serialized names are camelCase so a
snapshot dumped with ``by_alias=True`` round-trips field-for-field through
the persistence collaborator.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from lifesim.bounds import clamp_relationships, clamp_skills, clamp_stats

BranchId = Literal["A", "B", "C"]
BRANCH_IDS: tuple[str, ...] = ("A", "B", "C")


class CamelModel(BaseModel):
    """Base for every model that crosses a collaborator boundary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
#  Character vitals
# ---------------------------------------------------------------------------


class CharacterStats(CamelModel):
    health: int = 100
    happiness: int = 100
    energy: int = 100
    wealth: int = 1000


class CharacterSkills(CamelModel):
    intelligence: int = 0
    creativity: int = 0
    social: int = 0
    physical: int = 0
    business: int = 0
    technical: int = 0


class CharacterRelationships(CamelModel):
    family: int = 0
    friends: int = 0
    romantic: int = 0
    colleagues: int = 0


STAT_NAMES: tuple[str, ...] = tuple(CharacterStats.model_fields)


# ---------------------------------------------------------------------------
#  Effects
# ---------------------------------------------------------------------------


class SkillDelta(CamelModel):
    """Partial skill deltas. Unknown skill names are dropped on validation."""

    model_config = ConfigDict(frozen=True)

    intelligence: int | None = None
    creativity: int | None = None
    social: int | None = None
    physical: int | None = None
    business: int | None = None
    technical: int | None = None

    def items(self) -> list[tuple[str, int]]:
        """(skill, delta) pairs for the deltas that are present."""
        return [(name, value) for name, value in self if value is not None]


class RelationshipDelta(CamelModel):
    model_config = ConfigDict(frozen=True)

    family: int | None = None
    friends: int | None = None
    romantic: int | None = None
    colleagues: int | None = None

    def items(self) -> list[tuple[str, int]]:
        return [(name, value) for name, value in self if value is not None]


class EventEffect(CamelModel):
    """
    A delta applied to a character. Every field is optional; an absent
    field means "no change", never "set to zero".
    """

    model_config = ConfigDict(frozen=True)

    health: int | None = None
    happiness: int | None = None
    energy: int | None = None
    wealth: int | None = None
    skills: SkillDelta | None = None
    relationships: RelationshipDelta | None = None
    profession: str | None = None
    education: str | None = None
    disease: str | None = None
    death_chance: float | None = None

    @field_validator("death_chance", mode="after")
    @classmethod
    def death_chance_is_probability(cls, value: float | None) -> float | None:
        if value is None:
            return None
        return max(0.0, min(1.0, value))

    def stat_deltas(self) -> list[tuple[str, int]]:
        return [
            (name, getattr(self, name))
            for name in STAT_NAMES
            if getattr(self, name) is not None
        ]


# ---------------------------------------------------------------------------
#  Decision points
# ---------------------------------------------------------------------------


class Branch(CamelModel):
    text: str = ""
    effects: EventEffect = Field(default_factory=EventEffect)


class DecisionPoint(CamelModel):
    """A presented situation with exactly three effect-bearing branches."""

    id: str
    situation: str
    pattern: str | None = None
    branches: dict[BranchId, Branch]

    @model_validator(mode="after")
    def has_three_branches(self) -> DecisionPoint:
        missing = [b for b in BRANCH_IDS if b not in self.branches]
        if missing:
            raise ValueError(f"Decision point is missing branches: {', '.join(missing)}")
        return self


# ---------------------------------------------------------------------------
#  History and progression records
# ---------------------------------------------------------------------------


class HistoryRecord(CamelModel):
    event_id: str
    situation: str = ""
    choice: BranchId
    effects: EventEffect
    timestamp: int


class AchievementRecord(CamelModel):
    id: str
    unlocked: bool = False
    unlocked_at: int | None = None


class MilestoneRecord(CamelModel):
    id: str
    completed: bool = False
    completed_at: int | None = None


class RewardEvent(CamelModel):
    id: str
    type: Literal["achievement", "milestone", "bonus"]
    name: str
    effects: EventEffect
    timestamp: int


# ---------------------------------------------------------------------------
#  Character
# ---------------------------------------------------------------------------


class CharacterSeed(CamelModel):
    name: str = ""
    country: str = ""
    birth_year: int = 0


class Character(CamelModel):
    id: str
    name: str
    country: str
    birth_year: int
    age: int = 0
    stats: CharacterStats = Field(default_factory=CharacterStats)
    skills: CharacterSkills = Field(default_factory=CharacterSkills)
    relationships: CharacterRelationships = Field(default_factory=CharacterRelationships)
    is_alive: bool = True
    death_cause: str | None = None
    profession: str | None = None
    education_level: str | None = None
    current_disease: str | None = None
    history: list[HistoryRecord] = Field(default_factory=list)
    achievements: list[AchievementRecord] = Field(default_factory=list)
    milestones: list[MilestoneRecord] = Field(default_factory=list)
    rewards: list[RewardEvent] = Field(default_factory=list)

    @model_validator(mode="after")
    def reclamp(self) -> Character:
        # Snapshots from older builds may carry out-of-range values.
        self.stats = clamp_stats(self.stats)
        self.skills = clamp_skills(self.skills)
        self.relationships = clamp_relationships(self.relationships)
        return self

    def achievement(self, achievement_id: str) -> AchievementRecord | None:
        return next((a for a in self.achievements if a.id == achievement_id), None)

    def milestone(self, milestone_id: str) -> MilestoneRecord | None:
        return next((m for m in self.milestones if m.id == milestone_id), None)

    def unlocked_achievements(self) -> list[str]:
        return [a.id for a in self.achievements if a.unlocked]

    def completed_milestones(self) -> list[str]:
        return [m.id for m in self.milestones if m.completed]
