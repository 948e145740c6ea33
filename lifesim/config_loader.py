import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from lifesim.catalog import (
    Achievement,
    BonusEvent,
    Catalog,
    ComboRequirement,
    Disease,
    DifficultyLevel,
    EducationLevel,
    EducationRequirement,
    EventPattern,
    Milestone,
    Profession,
    ProfessionRequirement,
)
from lifesim.paths import CONFIG_DIR
from lifesim.rules import Rules

logger = logging.getLogger(__name__)

###############################
### Imported to other files ###
###############################
# Toggle this to True if you want to log which tables were loaded and from where
LOADED_INFO_FILES = False
###############################

# category -> (filename, entry model)
TABLES = {
    'professions': ('professions.json', Profession),
    'education': ('education.json', EducationLevel),
    'diseases': ('diseases.json', Disease),
    'achievements': ('achievements.json', Achievement),
    'milestones': ('milestones.json', Milestone),
    'bonus_events': ('bonus_events.json', BonusEvent),
    'event_patterns': ('event_patterns.json', EventPattern),
    'difficulty': ('difficulty.json', DifficultyLevel),
}
RULES_FILE = 'rules.json'

# Achievement `profession` requirement values that are not profession ids
PROFESSION_KEYWORDS = {'any', 'max_level'}


class ConfigLoader:
    def __init__(self, config_folder=CONFIG_DIR):
        self.config_folder = Path(config_folder)
        self.config = {}
        self.tables = {}
        self.rules = Rules()
        self.load_configs()
        self.validate_configs()

    def _read(self, filename):
        file_path = self.config_folder / filename
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file {filename} not found in {self.config_folder}.")
        with open(file_path, 'r', encoding='utf-8') as file:
            try:
                data = json.load(file)
            except json.JSONDecodeError as e:
                raise ValueError(f"Error parsing {filename}: {e}")
        if LOADED_INFO_FILES:
            logger.info("Loaded configuration from %s.", file_path)
        return data

    def load_configs(self):
        for category, (filename, _) in TABLES.items():
            self.config[category] = self._read(filename)

        # rules.json is optional; every rule has a default
        if (self.config_folder / RULES_FILE).exists():
            self.config['rules'] = self._read(RULES_FILE)
        else:
            logger.warning("No %s in %s. Using default rules.", RULES_FILE, self.config_folder)
            self.config['rules'] = {}

    def validate_configs(self):
        # Shape of every entry
        for category, (filename, model) in TABLES.items():
            raw = self.config[category]
            if not isinstance(raw, list):
                raise ValueError(f"{filename} must contain a JSON array of entries.")
            try:
                entries = TypeAdapter(list[model]).validate_python(raw)
            except ValidationError as e:
                raise ValueError(f"Error validating {filename}: {e}")

            key = 'name' if model is EventPattern else 'id'
            seen = set()
            for entry in entries:
                entry_id = getattr(entry, key)
                if entry_id in seen:
                    raise ValueError(f"Duplicate {key} '{entry_id}' in {filename}.")
                seen.add(entry_id)
            self.tables[category] = entries

        try:
            self.rules = Rules.model_validate(self.config['rules'])
        except ValidationError as e:
            raise ValueError(f"Error validating {RULES_FILE}: {e}")

        # Cross-table references
        if not any(d.id == 'medium' for d in self.tables['difficulty']):
            raise ValueError("Missing 'medium' level in difficulty configuration.")

        if not any(d.age_related for d in self.tables['diseases']):
            logger.warning("No age-related diseases defined. Late-life disease onset will never fire.")

        education_ids = {e.id for e in self.tables['education']}
        profession_ids = {p.id for p in self.tables['professions']}
        for achievement in self.tables['achievements']:
            for requirement in _flatten(achievement.requirement):
                if isinstance(requirement, EducationRequirement):
                    if requirement.value != 'any' and requirement.value not in education_ids:
                        logger.warning(
                            "Achievement '%s' requires unknown education '%s'; it can never unlock.",
                            achievement.id, requirement.value,
                        )
                elif isinstance(requirement, ProfessionRequirement):
                    if requirement.value not in PROFESSION_KEYWORDS and requirement.value not in profession_ids:
                        logger.warning(
                            "Achievement '%s' requires unknown profession '%s'; it can never unlock.",
                            achievement.id, requirement.value,
                        )

        for profession in self.tables['professions']:
            if profession.max_income < profession.min_income:
                raise ValueError(f"Profession '{profession.id}' has maxIncome below minIncome.")

    def build_catalog(self):
        return Catalog(
            professions=self.tables['professions'],
            education_levels=self.tables['education'],
            diseases=self.tables['diseases'],
            achievements=self.tables['achievements'],
            milestones=self.tables['milestones'],
            bonus_events=self.tables['bonus_events'],
            event_patterns=self.tables['event_patterns'],
            difficulty_levels=self.tables['difficulty'],
        )

    def get_rules(self):
        return self.rules


def _flatten(requirement):
    """Yield every leaf requirement inside (possibly nested) combos."""
    if isinstance(requirement, ComboRequirement):
        for nested in requirement.value:
            yield from _flatten(nested)
    else:
        yield requirement
