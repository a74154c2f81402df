"""
Pydantic models for rules and batch results.
"""
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


class Rule(BaseModel):
    """One keyword rewrite rule: keyword -> [[display_form|keyword]] inside scope_path."""

    model_config = ConfigDict(frozen=True)

    keyword: str = ""
    display_form: str = ""
    scope_path: str = ""

    @property
    def is_valid(self) -> bool:
        return bool(self.keyword)


class DocumentFailure(BaseModel):
    path: str
    reason: str
    stage: Literal['scope', 'read', 'write']


class SkippedRule(BaseModel):
    index: int
    rule: Rule
    reason: str


class RuleOutcome(BaseModel):
    """What one rule did to the documents in its scope."""

    index: int
    rule: Rule
    changed: List[str] = Field(default_factory=list)
    unchanged: List[str] = Field(default_factory=list)
    failures: List[DocumentFailure] = Field(default_factory=list)


class BatchResult(BaseModel):
    """Summary of one apply_all run."""

    outcomes: List[RuleOutcome] = Field(default_factory=list)
    skipped: List[SkippedRule] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def failures(self) -> List[DocumentFailure]:
        return [f for outcome in self.outcomes for f in outcome.failures]

    @property
    def changed_paths(self) -> List[str]:
        """Distinct paths changed by at least one rule, in first-change order."""
        seen = {}
        for outcome in self.outcomes:
            for path in outcome.changed:
                seen.setdefault(path, None)
        return list(seen)

    @property
    def changed_count(self) -> int:
        return len(self.changed_paths)

    @property
    def unchanged_paths(self) -> List[str]:
        """Distinct visited paths that no rule changed and no rule failed on."""
        changed = set(self.changed_paths)
        failed = {f.path for f in self.failures if f.stage != 'scope'}
        seen = {}
        for outcome in self.outcomes:
            for path in outcome.unchanged:
                if path not in changed and path not in failed:
                    seen.setdefault(path, None)
        return list(seen)

    @property
    def unchanged_count(self) -> int:
        return len(self.unchanged_paths)

    @property
    def ok(self) -> bool:
        return not self.failures
