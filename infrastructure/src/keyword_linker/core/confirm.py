"""
Describe-then-commit protocol for a linking run.
"""
import logging
from typing import Iterable, Optional

from keyword_linker.core.engine import DocumentStore, apply_all
from keyword_linker.core.models import BatchResult, Rule

logger = logging.getLogger(__name__)

WARNING_TITLE = "Are you sure you want to proceed?"
WARNING_MESSAGE = "This will make changes to your MD files"


class PendingRun:
    """A prepared run: show title/message to the user, then call commit() once."""

    def __init__(self, rules: Iterable[Rule], corpus: DocumentStore, **options):
        self.rules = tuple(rules)
        self.corpus = corpus
        self.options = options
        self.result: Optional[BatchResult] = None

    @property
    def active_rules(self):
        return [rule for rule in self.rules if rule.is_valid]

    @property
    def title(self) -> str:
        return WARNING_TITLE

    @property
    def message(self) -> str:
        active = len(self.active_rules)
        skipped = len(self.rules) - active
        text = f"{WARNING_MESSAGE} ({active} keyword rule{'s' if active != 1 else ''}"
        if skipped:
            text += f", {skipped} empty rule{'s' if skipped != 1 else ''} will be skipped"
        return text + ")"

    @property
    def committed(self) -> bool:
        return self.result is not None

    def commit(self) -> BatchResult:
        if self.committed:
            raise RuntimeError("This run has already been committed")
        logger.info("Run confirmed")
        self.result = apply_all(self.rules, self.corpus, **self.options)
        return self.result


def prepare_run(rules: Iterable[Rule], corpus: DocumentStore, **options) -> PendingRun:
    """Snapshot rules now; nothing touches the corpus until commit()."""
    return PendingRun(rules, corpus, **options)
