"""
Batch application of keyword rules across a document corpus.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from tqdm import tqdm

from keyword_linker.core.errors import ReadError, ScopeNotFoundError, WriteError
from keyword_linker.core.models import BatchResult, DocumentFailure, Rule, RuleOutcome, SkippedRule
from keyword_linker.core.rewriter import rewrite_counted

logger = logging.getLogger(__name__)

# Per-document status values produced by LinkEngine._process_document
CHANGED = 'changed'
UNCHANGED = 'unchanged'
FAILED = 'failed'


class DocumentStore(Protocol):
    """Document access the engine needs from its environment."""

    def list_documents(self) -> List[str]: ...

    def resolve_prefix(self, path: str) -> Optional[str]: ...

    def read(self, path: str) -> str: ...

    def write(self, path: str, text: str) -> None: ...


class LinkEngine:
    """Applies rules to a corpus. Holds configuration only, no state between runs."""

    def __init__(self, corpus: DocumentStore, workers: int = 1, dry_run: bool = False,
                 progress: bool = False):
        self.corpus = corpus
        self.workers = max(1, workers)
        self.dry_run = dry_run
        self.progress = progress

    def resolve_scope(self, scope_path: str) -> List[str]:
        """Documents a rule with this scope applies to, in corpus order."""
        documents = self.corpus.list_documents()
        if scope_path:
            location = self.corpus.resolve_prefix(scope_path)
            if location is None:
                raise ScopeNotFoundError(scope_path)
            documents = [path for path in documents if path.startswith(location)]

        # A path must never be processed twice within one rule
        return list(dict.fromkeys(documents))

    def apply_all(self, rules: Iterable[Rule]) -> BatchResult:
        """Apply rules in order; per-rule and per-document failures are collected, never raised."""
        snapshot = tuple(rules)
        result = BatchResult(dry_run=self.dry_run)
        # Dry run: texts earlier rules would have written, so later rules see them
        pending = {} if self.dry_run else None

        for index, rule in enumerate(snapshot):
            if not rule.is_valid:
                logger.warning(f"Skipping rule #{index}: empty keyword")
                result.skipped.append(SkippedRule(index=index, rule=rule, reason='empty keyword'))
                continue
            result.outcomes.append(self.apply_rule(index, rule, pending))

        logger.info(
            f"Linking finished: {result.changed_count} changed, {result.unchanged_count} unchanged, "
            f"{len(result.failures)} failures, {len(result.skipped)} skipped rules"
        )
        return result

    def apply_rule(self, index: int, rule: Rule,
                   pending: Optional[Dict[str, str]] = None) -> RuleOutcome:
        outcome = RuleOutcome(index=index, rule=rule)

        try:
            paths = self.resolve_scope(rule.scope_path)
        except ScopeNotFoundError as e:
            logger.warning(f"Rule #{index} ({rule.keyword!r}): {e}")
            outcome.failures.append(
                DocumentFailure(path=rule.scope_path, reason=str(e), stage='scope')
            )
            return outcome

        logger.info(f"Rule #{index}: {rule.keyword!r} -> {rule.display_form!r} on {len(paths)} documents")

        for path, status, failure in self._process_paths(rule, paths, pending):
            if status == CHANGED:
                outcome.changed.append(path)
            elif status == UNCHANGED:
                outcome.unchanged.append(path)
            else:
                outcome.failures.append(failure)
        return outcome

    def _process_paths(self, rule: Rule, paths: Sequence[str], pending: Optional[Dict[str, str]]):
        """Process each path once; results come back in scope order."""
        bar = tqdm(total=len(paths), desc=rule.keyword, disable=not self.progress)
        try:
            if self.workers == 1 or len(paths) < 2:
                results = []
                for path in paths:
                    results.append(self._process_document(rule, path, pending))
                    bar.update(1)
                return results

            results = [None] * len(paths)
            with ThreadPoolExecutor(max_workers=min(self.workers, len(paths))) as ex:
                futures = {ex.submit(self._process_document, rule, path, pending): i
                           for i, path in enumerate(paths)}
                for future in as_completed(futures):
                    results[futures[future]] = future.result()
                    bar.update(1)
            return results
        finally:
            bar.close()

    def _process_document(self, rule: Rule, path: str, pending: Optional[Dict[str, str]] = None
                          ) -> Tuple[str, str, Optional[DocumentFailure]]:
        """Fetch -> rewrite -> conditional write for one document."""
        try:
            text = pending[path] if pending is not None and path in pending else self.corpus.read(path)
        except ReadError as e:
            logger.warning(f"Read failed for {path}: {e.reason}")
            return path, FAILED, DocumentFailure(path=path, reason=e.reason, stage='read')

        new_text, count = rewrite_counted(text, rule.keyword, rule.display_form)
        if new_text == text:
            return path, UNCHANGED, None

        if self.dry_run:
            if pending is not None:
                pending[path] = new_text
            logger.info(f"  [DRY] {path} ({count} links)")
            return path, CHANGED, None

        try:
            self.corpus.write(path, new_text)
        except WriteError as e:
            logger.warning(f"Write failed for {path}: {e.reason}")
            return path, FAILED, DocumentFailure(path=path, reason=e.reason, stage='write')

        logger.info(f"  [LINK] {path} ({count} links)")
        return path, CHANGED, None


def apply_all(rules: Iterable[Rule], corpus: DocumentStore, workers: int = 1,
              dry_run: bool = False, progress: bool = False) -> BatchResult:
    """Apply every rule to the corpus and return a summary."""
    engine = LinkEngine(corpus, workers=workers, dry_run=dry_run, progress=progress)
    return engine.apply_all(rules)


def resolve_scope(scope_path: str, corpus: DocumentStore) -> List[str]:
    return LinkEngine(corpus).resolve_scope(scope_path)
