"""
lifesim/persistence.py
~~~~~~~~~~~~~~~~~~~~~~
Character snapshots and JSON save slots.

Snapshots use the camelCase field names of the data model, so a snapshot
loaded back compares equal to the character it was taken from.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from lifesim.models import Character
from lifesim.paths import SAVE_DIR

logger = logging.getLogger(__name__)

SLOT_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}\Z")

DEFAULT_DIFFICULTY = "medium"


def to_snapshot(character: Character) -> dict[str, Any]:
    return character.model_dump(mode="json", by_alias=True)


def from_snapshot(data: dict[str, Any]) -> Character | None:
    """Rebuild a character; a malformed snapshot gives None."""
    try:
        return Character.model_validate(data)
    except ValidationError as e:
        logger.warning("Discarding unreadable snapshot: %s", e)
        return None


def is_valid_slot(slot: str) -> bool:
    return bool(SLOT_PATTERN.match(slot))


@dataclass
class SavedLife:
    character: Character
    difficulty_id: str = DEFAULT_DIFFICULTY


class SaveStore:
    """
    One JSON file per save slot under ``save_dir``. Each file holds the
    character snapshot and the id of the difficulty it was played on.
    """

    def __init__(self, save_dir=SAVE_DIR):
        self.save_dir = Path(save_dir)

    def _slot_path(self, slot: str) -> Path | None:
        if not is_valid_slot(slot):
            logger.warning("Invalid save slot name: %r", slot)
            return None
        return self.save_dir / f"{slot}.json"

    def save(self, slot: str, character: Character, difficulty_id: str = DEFAULT_DIFFICULTY) -> bool:
        path = self._slot_path(slot)
        if path is None:
            return False
        os.makedirs(self.save_dir, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump({"difficulty": difficulty_id, "character": to_snapshot(character)}, f, indent=2)
        logger.info("Saved %s to slot '%s'.", character.id, slot)
        return True

    def load(self, slot: str) -> SavedLife | None:
        path = self._slot_path(slot)
        if path is None or not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Save slot '%s' is not valid JSON: %s", slot, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Save slot '%s' does not hold a saved life.", slot)
            return None
        character = from_snapshot(data.get("character") or {})
        if character is None:
            return None
        return SavedLife(character, data.get("difficulty") or DEFAULT_DIFFICULTY)

    def list_slots(self) -> list[str]:
        if not self.save_dir.exists():
            return []
        return sorted(p.stem for p in self.save_dir.glob("*.json"))

    def delete(self, slot: str) -> bool:
        path = self._slot_path(slot)
        if path is None or not path.exists():
            return False
        path.unlink()
        return True
