"""
Plain-text rendering of a BatchResult.
"""
from typing import List

from keyword_linker.core.models import BatchResult


class ReportGenerator:
    """Formats run summaries for the terminal."""

    @staticmethod
    def summary_line(result: BatchResult) -> str:
        prefix = 'Dry run' if result.dry_run else 'Linking'
        verb = 'would change' if result.dry_run else 'changed'
        return (
            f"{prefix}: {result.changed_count} {verb}, {result.unchanged_count} unchanged, "
            f"{len(result.failures)} failed, {len(result.skipped)} skipped rules"
        )

    def generate(self, result: BatchResult, verbose: bool = False) -> str:
        lines: List[str] = [self.summary_line(result)]

        if verbose:
            for outcome in result.outcomes:
                rule = outcome.rule
                lines.append(
                    f"  #{outcome.index} {rule.keyword} -> {rule.display_form}: "
                    f"{len(outcome.changed)} changed, {len(outcome.unchanged)} unchanged"
                )
                for path in outcome.changed:
                    lines.append(f"    {path}")

        if result.skipped:
            lines.append('Skipped rules:')
            for skipped in result.skipped:
                lines.append(f"  #{skipped.index}: {skipped.reason}")

        if result.failures:
            lines.append('Failures:')
            for failure in result.failures:
                lines.append(f"  [{failure.stage}] {failure.path}: {failure.reason}")

        return '\n'.join(lines)
