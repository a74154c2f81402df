"""
Keyword Linker - rewrite plain keywords in a Markdown vault into [[display|keyword]] links.
"""
from keyword_linker.core.confirm import PendingRun, prepare_run
from keyword_linker.core.engine import DocumentStore, LinkEngine, apply_all, resolve_scope
from keyword_linker.core.errors import (
    DocumentError,
    InvalidRule,
    KeywordLinkerError,
    ReadError,
    RuleIndexError,
    RuleStoreError,
    ScopeNotFoundError,
    WriteError,
)
from keyword_linker.core.models import BatchResult, DocumentFailure, Rule, RuleOutcome, SkippedRule
from keyword_linker.core.rewriter import rewrite
from keyword_linker.core.rule_store import RuleStore
from keyword_linker.utils.vault_store import InMemoryDocumentStore, VaultDocumentStore

__version__ = '0.1.0'
