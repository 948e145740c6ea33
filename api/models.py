"""
Pydantic models for the LifeSim API.

These models validate incoming request bodies before anything reaches a
session. Field names are camelCase to match the character snapshots the
API returns.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from lifesim.persistence import is_valid_slot


# ---------------------------------------------------------------------------
#  Life creation
# ---------------------------------------------------------------------------


class CreateLifeRequest(BaseModel):
    """Seed data for a new life. Business-rule checks happen in the engine."""

    name: str
    country: str
    birthYear: int
    difficulty: Literal["easy", "medium", "hard"] = "medium"


# ---------------------------------------------------------------------------
#  Turn and assignment requests
# ---------------------------------------------------------------------------


class ChoiceRequest(BaseModel):
    choice: Literal["A", "B", "C"]


class AssignmentRequest(BaseModel):
    """Profession or education id to assign."""

    id: str = Field(min_length=1)


class SaveRequest(BaseModel):
    slot: str = Field(min_length=1, max_length=64)

    @field_validator("slot", mode="after")
    @classmethod
    def slot_is_filename_safe(cls, slot: str) -> str:
        if not is_valid_slot(slot):
            raise ValueError("slot may only contain ASCII letters, digits, '_' and '-'.")
        return slot


# ---------------------------------------------------------------------------
#  Responses
# ---------------------------------------------------------------------------


class LifeState(BaseModel):
    sessionId: str
    character: dict
    decision: dict | None = None
    lifeStage: str
    difficulty: str = "medium"


class TurnOutcome(BaseModel):
    sessionId: str
    character: dict
    record: dict
    aged: bool
    died: bool
    rewards: list[dict] = Field(default_factory=list)
