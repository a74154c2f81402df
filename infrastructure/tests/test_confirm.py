"""
Tests for the describe-then-commit protocol and the run report.
"""
import pytest

from keyword_linker.core.confirm import prepare_run
from keyword_linker.core.models import Rule
from keyword_linker.output.report import ReportGenerator


class TestPendingRun:

    def test_nothing_happens_before_commit(self, corpus):
        pending = prepare_run([Rule(keyword='cat', display_form='Cat')], corpus)
        assert corpus.reads == []
        assert not pending.committed
        assert pending.message.startswith('This will make changes to your MD files')
        assert '1 keyword rule)' in pending.message

    def test_message_mentions_skipped_rules(self, corpus):
        pending = prepare_run([Rule(keyword='cat'), Rule(), Rule()], corpus)
        assert '2 empty rules will be skipped' in pending.message

    def test_commit_runs_once(self, corpus):
        pending = prepare_run([Rule(keyword='cat', display_form='Cat', scope_path='a')], corpus)
        result = pending.commit()

        assert result.changed_paths == ['a/x', 'a/y']
        assert pending.result is result
        with pytest.raises(RuntimeError):
            pending.commit()

    def test_rules_are_snapshotted_at_prepare_time(self, corpus):
        rules = [Rule(keyword='cat', display_form='Cat', scope_path='b')]
        pending = prepare_run(rules, corpus)
        rules.append(Rule(keyword='cat', display_form='Cat', scope_path='a'))

        assert pending.commit().changed_paths == ['b/z']

    def test_options_are_forwarded(self, corpus):
        result = prepare_run([Rule(keyword='cat', display_form='Cat')], corpus, dry_run=True).commit()
        assert result.dry_run
        assert corpus.writes == []


class TestReportGenerator:

    def test_report_lists_failures_and_skips(self, make_store):
        store = make_store({'a/x': 'cat', 'a/y': 'cat'}, fail_write=['a/y'])
        result = prepare_run([Rule(), Rule(keyword='cat', display_form='Cat')], store).commit()

        text = ReportGenerator().generate(result)

        assert text.splitlines()[0] == 'Linking: 1 changed, 0 unchanged, 1 failed, 1 skipped rules'
        assert '  #0: empty keyword' in text
        assert '  [write] a/y: permission denied' in text

    def test_dry_run_wording(self, corpus):
        result = prepare_run([Rule(keyword='cat', display_form='Cat')], corpus, dry_run=True).commit()
        text = ReportGenerator().generate(result, verbose=True)

        assert text.startswith('Dry run: 3 would change')
        assert '    a/x' in text
