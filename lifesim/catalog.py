"""
lifesim/catalog.py
~~~~~~~~~~~~~~~~~~
Content-table entry models and the read-only ``Catalog`` they are looked
up from.

Entries are frozen pydantic models built once from the JSON tables in
``lifesim/config``. A ``Catalog`` is constructed by the caller (normally
via ``ConfigLoader.build_catalog``) and handed to every engine operation
that needs content; nothing is cached at module level.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Annotated, Literal, Union

from pydantic import ConfigDict, Field

from lifesim.models import CamelModel, EventEffect, RelationshipDelta, SkillDelta


class CatalogEntry(CamelModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
#  Professions, education, diseases
# ---------------------------------------------------------------------------


class Profession(CatalogEntry):
    id: str = Field(min_length=1)
    name: str
    category: Literal[
        "education", "healthcare", "technology", "business",
        "creative", "service", "skilled",
    ]
    required_skills: dict[str, int] = Field(default_factory=dict)
    # Passive drift re-applied on every aging step while employed.
    skill_growth: SkillDelta = Field(default_factory=SkillDelta)
    relationship_growth: RelationshipDelta = Field(default_factory=RelationshipDelta)
    min_income: int = Field(ge=0)
    max_income: int = Field(ge=0)
    happiness_modifier: int = 0
    energy_modifier: int = 0
    description: str = ""


class EducationLevel(CatalogEntry):
    id: str = Field(min_length=1)
    name: str
    required_age: int = Field(ge=0)
    duration: int = Field(ge=0)
    required_skills: dict[str, int] = Field(default_factory=dict)
    skill_growth: SkillDelta = Field(default_factory=SkillDelta)
    cost: int = Field(default=0, ge=0)
    description: str = ""


class Disease(CatalogEntry):
    id: str = Field(min_length=1)
    name: str
    severity: Literal["mild", "moderate", "severe", "critical"]
    health_impact: int = 0
    happiness_impact: int = 0
    energy_impact: int = 0
    recovery_time: int = Field(default=0, ge=0)
    treatment_cost: int = Field(default=0, ge=0)
    age_related: bool = False
    description: str = ""


# ---------------------------------------------------------------------------
#  Achievement requirements
# ---------------------------------------------------------------------------


class SkillRequirement(CatalogEntry):
    type: Literal["skill"]
    value: dict[str, int]


class RelationshipRequirement(CatalogEntry):
    type: Literal["relationship"]
    value: dict[str, int]


class AgeRequirement(CatalogEntry):
    type: Literal["age"]
    value: int


class WealthRequirement(CatalogEntry):
    type: Literal["wealth"]
    value: int


class EducationRequirement(CatalogEntry):
    """``value`` is an education id, or ``"any"``."""

    type: Literal["education"]
    value: str


class ProfessionRequirement(CatalogEntry):
    """``value`` is a profession id, ``"any"`` or ``"max_level"``."""

    type: Literal["profession"]
    value: str


class ComboRequirement(CatalogEntry):
    """Conjunction: every nested requirement must hold."""

    type: Literal["combo"]
    value: list[Requirement] = Field(min_length=1)


Requirement = Annotated[
    Union[
        SkillRequirement,
        RelationshipRequirement,
        AgeRequirement,
        WealthRequirement,
        EducationRequirement,
        ProfessionRequirement,
        ComboRequirement,
    ],
    Field(discriminator="type"),
]

ComboRequirement.model_rebuild()


# ---------------------------------------------------------------------------
#  Rewards, patterns, difficulty
# ---------------------------------------------------------------------------


class Achievement(CatalogEntry):
    id: str = Field(min_length=1)
    name: str
    description: str = ""
    requirement: Requirement
    reward: EventEffect = Field(default_factory=EventEffect)


class Milestone(CatalogEntry):
    id: str = Field(min_length=1)
    name: str
    description: str = ""
    age: int = Field(ge=0)
    reward: EventEffect = Field(default_factory=EventEffect)


class BonusEvent(CatalogEntry):
    id: str = Field(min_length=1)
    name: str
    description: str = ""
    effects: EventEffect


PatternStrategy = Literal["balanced", "risk_reward", "specialized", "trade_off", "random"]


class EventPattern(CatalogEntry):
    """A reusable three-branch effect template."""

    name: str = Field(min_length=1)
    description: str = ""
    strategy: PatternStrategy
    a: EventEffect = Field(alias="A")
    b: EventEffect = Field(alias="B")
    c: EventEffect = Field(alias="C")

    def branches(self) -> dict[str, EventEffect]:
        return {"A": self.a, "B": self.b, "C": self.c}


class DifficultyLevel(CatalogEntry):
    id: Literal["easy", "medium", "hard"]
    name: str
    death_chance_multiplier: float = Field(ge=0.0)
    historical_density: float = Field(default=1.0, ge=0.0)
    starting_bonus: EventEffect = Field(default_factory=EventEffect)


# ---------------------------------------------------------------------------
#  Catalog
# ---------------------------------------------------------------------------


def _index(entries, key: str = "id") -> MappingProxyType:
    return MappingProxyType({getattr(entry, key): entry for entry in entries})


class Catalog:
    """Immutable, id-keyed view over every content table."""

    def __init__(
        self,
        professions=(),
        education_levels=(),
        diseases=(),
        achievements=(),
        milestones=(),
        bonus_events=(),
        event_patterns=(),
        difficulty_levels=(),
    ):
        self._professions = _index(professions)
        self._education = _index(education_levels)
        self._diseases = _index(diseases)
        self._achievements = _index(achievements)
        self._milestones = _index(milestones)
        self._bonus_events = _index(bonus_events)
        self._patterns = _index(event_patterns, key="name")
        self._difficulty = _index(difficulty_levels)

    # ------------------------------------------------------------------
    #  Full tables, in declaration order
    # ------------------------------------------------------------------

    @property
    def professions(self) -> tuple[Profession, ...]:
        return tuple(self._professions.values())

    @property
    def education_levels(self) -> tuple[EducationLevel, ...]:
        return tuple(self._education.values())

    @property
    def diseases(self) -> tuple[Disease, ...]:
        return tuple(self._diseases.values())

    @property
    def achievements(self) -> tuple[Achievement, ...]:
        return tuple(self._achievements.values())

    @property
    def milestones(self) -> tuple[Milestone, ...]:
        return tuple(self._milestones.values())

    @property
    def bonus_events(self) -> tuple[BonusEvent, ...]:
        return tuple(self._bonus_events.values())

    @property
    def event_patterns(self) -> tuple[EventPattern, ...]:
        return tuple(self._patterns.values())

    @property
    def difficulty_levels(self) -> tuple[DifficultyLevel, ...]:
        return tuple(self._difficulty.values())

    # ------------------------------------------------------------------
    #  Lookups: unknown ids give None, never KeyError
    # ------------------------------------------------------------------

    def get_profession(self, profession_id: str | None) -> Profession | None:
        return self._professions.get(profession_id)

    def get_education(self, education_id: str | None) -> EducationLevel | None:
        return self._education.get(education_id)

    def get_disease(self, disease_id: str | None) -> Disease | None:
        return self._diseases.get(disease_id)

    def get_achievement(self, achievement_id: str | None) -> Achievement | None:
        return self._achievements.get(achievement_id)

    def get_milestone(self, milestone_id: str | None) -> Milestone | None:
        return self._milestones.get(milestone_id)

    def get_pattern(self, name: str | None) -> EventPattern | None:
        return self._patterns.get(name)

    def get_difficulty(self, difficulty_id: str | None) -> DifficultyLevel | None:
        return self._difficulty.get(difficulty_id)

    def age_related_diseases(self) -> tuple[Disease, ...]:
        return tuple(d for d in self._diseases.values() if d.age_related)

    def diseases_by_severity(self, severity: str) -> tuple[Disease, ...]:
        return tuple(d for d in self._diseases.values() if d.severity == severity)

    def professions_by_category(self, category: str) -> tuple[Profession, ...]:
        return tuple(p for p in self._professions.values() if p.category == category)
