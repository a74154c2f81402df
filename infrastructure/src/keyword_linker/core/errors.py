"""
Exception types raised by the rule store, the document stores and the engine.
"""


class KeywordLinkerError(Exception):
    """Base class for every error raised by keyword_linker."""


class InvalidRule(KeywordLinkerError):
    """A rule that cannot be applied (empty keyword)."""


class ScopeNotFoundError(KeywordLinkerError):
    """The scope path of a rule does not resolve to a location in the corpus."""

    def __init__(self, scope_path: str):
        super().__init__(f"Scope not found: {scope_path!r}")
        self.scope_path = scope_path


class DocumentError(KeywordLinkerError):
    """Per-document I/O failure."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ReadError(DocumentError):
    pass


class WriteError(DocumentError):
    pass


class RuleStoreError(KeywordLinkerError):
    """Rule file could not be parsed, or an index is out of range."""


class RuleIndexError(RuleStoreError, IndexError):
    """Rule index outside the current rule list."""
