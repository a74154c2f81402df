"""
Ordered, YAML-backed list of keyword rules.
"""
import logging
from pathlib import Path
from typing import Iterator, List, Tuple

import yaml
from pydantic import ValidationError

from keyword_linker.core.errors import RuleIndexError, RuleStoreError
from keyword_linker.core.models import Rule

logger = logging.getLogger(__name__)

# Key names of the Obsidian plugin's data.json
LEGACY_KEYS = {'displayWord': 'display_form', 'folder': 'scope_path'}


class RuleStore:
    """Rule list with explicit load/save; index-addressed edits."""

    def __init__(self, path: Path, autosave: bool = False):
        self.path = Path(path)
        self.autosave = autosave
        self.rules: List[Rule] = []

    def load(self) -> 'RuleStore':
        """Load rules from file. A missing file gives an empty store."""
        if not self.path.exists():
            logger.info(f"No rule file at {self.path}, starting empty")
            self.rules = []
            return self

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise RuleStoreError(f"Failed to read rule file {self.path}: {e}") from e

        raw_rules = data.get('rules', data.get('configurations', [])) if isinstance(data, dict) else None
        if not isinstance(raw_rules, list):
            raise RuleStoreError(f"{self.path}: 'rules' must be a list")

        rules = []
        for position, raw in enumerate(raw_rules):
            if not isinstance(raw, dict):
                raise RuleStoreError(f"{self.path}: rule #{position} is not a mapping")
            try:
                rules.append(Rule(**self._normalize_keys(raw)))
            except ValidationError as e:
                raise RuleStoreError(f"{self.path}: rule #{position} is invalid: {e}") from e

        self.rules = rules
        logger.info(f"Loaded {len(rules)} rules from {self.path}")
        return self

    def save(self):
        """Write rules to file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {'rules': [rule.model_dump() for rule in self.rules]}
        with open(self.path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)

    @staticmethod
    def _normalize_keys(raw: dict) -> dict:
        normalized = {}
        for key, value in raw.items():
            key = LEGACY_KEYS.get(key, key)
            normalized[key] = '' if value is None else str(value)
        return normalized

    def _check_index(self, index: int):
        if not 0 <= index < len(self.rules):
            raise RuleIndexError(f"No rule at index {index} ({len(self.rules)} rules)")

    def _changed(self):
        if self.autosave:
            self.save()

    def add(self, rule: Rule) -> int:
        """Append a rule; returns its index."""
        self.rules.append(rule)
        self._changed()
        return len(self.rules) - 1

    def update(self, index: int, rule: Rule):
        self._check_index(index)
        self.rules[index] = rule
        self._changed()

    def remove(self, index: int) -> Rule:
        self._check_index(index)
        rule = self.rules.pop(index)
        self._changed()
        return rule

    def get_rules(self) -> Tuple[Rule, ...]:
        """Immutable snapshot for one batch run."""
        return tuple(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.get_rules())
