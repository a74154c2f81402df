#!/usr/bin/env python3
"""
Keyword Linker - command line entry point.
Turns configured keywords in an Obsidian vault into [[display|keyword]] links.
"""
import sys
import argparse
import logging
from pathlib import Path

from keyword_linker.core.confirm import prepare_run
from keyword_linker.core.errors import KeywordLinkerError
from keyword_linker.core.models import Rule
from keyword_linker.core.rule_store import RuleStore
from keyword_linker.output.report import ReportGenerator
from keyword_linker.utils.config import load_settings
from keyword_linker.utils.vault_store import VaultDocumentStore

logger = logging.getLogger(__name__)


class KeywordLinkerApp:
    """Wires the rule store, vault and engine together for one CLI invocation."""

    def __init__(self, args, settings=None):
        self.args = args
        self.settings = settings or load_settings()

        vault_root = Path(args.vault) if getattr(args, 'vault', None) else self.settings.vault_root
        rules_file = Path(args.rules) if getattr(args, 'rules', None) else self.settings.rules_file
        if getattr(args, 'vault', None) and not getattr(args, 'rules', None):
            rules_file = vault_root / rules_file.name

        self.vault = VaultDocumentStore(vault_root)
        self.rule_store = RuleStore(rules_file, autosave=True).load()
        self.report = ReportGenerator()

    def list_rules(self) -> int:
        if not len(self.rule_store):
            print('No rules configured.')
            return 0
        for index, rule in enumerate(self.rule_store):
            scope = rule.scope_path or '(whole vault)'
            print(f"{index:>3}  {rule.keyword!r} -> {rule.display_form!r}  in {scope}")
        return 0

    def add_rule(self) -> int:
        rule = Rule(keyword=self.args.keyword, display_form=self.args.display,
                    scope_path=self.args.folder or '')
        index = self.rule_store.add(rule)
        logger.info(f"Added rule #{index}: {rule.keyword!r} -> {rule.display_form!r}")
        return 0

    def update_rule(self) -> int:
        rules = self.rule_store.get_rules()
        if not 0 <= self.args.index < len(rules):
            logger.error(f"No rule at index {self.args.index}")
            return 1
        current = rules[self.args.index]
        changes = {
            field: value for field, value in (
                ('keyword', self.args.keyword),
                ('display_form', self.args.display),
                ('scope_path', self.args.folder),
            ) if value is not None
        }
        self.rule_store.update(self.args.index, current.model_copy(update=changes))
        logger.info(f"Updated rule #{self.args.index}")
        return 0

    def remove_rule(self) -> int:
        rule = self.rule_store.remove(self.args.index)
        logger.info(f"Removed rule #{self.args.index}: {rule.keyword!r}")
        return 0

    def confirm(self, pending) -> bool:
        """Ask on the terminal unless --yes or --dry-run was given."""
        if self.args.yes or self.args.dry_run:
            return True
        print(pending.message)
        answer = input(f"{pending.title} [y/N] ")
        return answer.strip().lower() in ('y', 'yes')

    def run(self) -> int:
        """Main linking run."""
        workers = self.args.workers if self.args.workers is not None else self.settings.workers
        pending = prepare_run(
            self.rule_store.get_rules(), self.vault,
            workers=workers, dry_run=self.args.dry_run, progress=not self.args.no_progress,
        )

        if not self.confirm(pending):
            logger.info('Cancelled')
            return 0

        result = pending.commit()
        print(self.report.generate(result, verbose=self.args.verbose))
        return 0 if result.ok else 1


def create_argument_parser():
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(description='Link keywords in Markdown notes')
    parser.add_argument('--vault', help='Vault directory (default: $VAULT_ROOT)')
    parser.add_argument('--rules', help='Rule file (default: <vault>/.keyword-linker.yaml)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging and detailed report')

    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('list', help='Show configured rules')

    add = sub.add_parser('add', help='Add a keyword rule')
    add.add_argument('keyword')
    add.add_argument('display', help='Link target shown as [[display|keyword]]')
    add.add_argument('--folder', help='Only link notes under this folder')

    update = sub.add_parser('update', help='Edit a rule by index')
    update.add_argument('index', type=int)
    update.add_argument('--keyword')
    update.add_argument('--display')
    update.add_argument('--folder')

    remove = sub.add_parser('remove', help='Delete a rule by index')
    remove.add_argument('index', type=int)

    run = sub.add_parser('run', help='Apply all rules to the vault')
    run.add_argument('-y', '--yes', action='store_true', help='Do not ask for confirmation')
    run.add_argument('--dry-run', action='store_true', help='Show what would change without writing')
    run.add_argument('--workers', type=int, help='Parallel document workers per rule')
    run.add_argument('--no-progress', action='store_true', help='Hide the progress bar')

    return parser


COMMANDS = {
    'list': KeywordLinkerApp.list_rules,
    'add': KeywordLinkerApp.add_rule,
    'update': KeywordLinkerApp.update_rule,
    'remove': KeywordLinkerApp.remove_rule,
    'run': KeywordLinkerApp.run,
}


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(message)s'
    )

    try:
        app = KeywordLinkerApp(args)
        return COMMANDS[args.command](app)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1
    except KeywordLinkerError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
