"""
Document stores: an Obsidian vault on disk and an in-memory corpus.
"""
import os
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from keyword_linker.core.errors import ReadError, WriteError

logger = logging.getLogger(__name__)

# Retrying these only delays the WriteError
PERMANENT_WRITE_ERRORS = (FileNotFoundError, NotADirectoryError, PermissionError)


class VaultDocumentStore:
    """Markdown notes under a vault directory, addressed by vault-relative POSIX path."""

    def __init__(self, root: Path, pattern: str = '*.md', write_attempts: int = 3):
        self.root = Path(root)
        self.pattern = pattern
        self.write_attempts = write_attempts

    def _full_path(self, path: str) -> Path:
        return self.root / path

    def list_documents(self) -> List[str]:
        """All matching notes, sorted; hidden directories (.obsidian, .trash) are skipped."""
        documents = []
        for note in self.root.rglob(self.pattern):
            rel_path = note.relative_to(self.root)
            if any(part.startswith('.') for part in rel_path.parts):
                continue
            if note.is_file():
                documents.append(rel_path.as_posix())
        return sorted(documents)

    def resolve_prefix(self, path: str) -> Optional[str]:
        """Normalized location for a folder or note path, None when it does not exist."""
        location = path.replace('\\', '/').strip('/')
        if not location:
            return ''
        return location if self._full_path(location).exists() else None

    def read(self, path: str) -> str:
        # newline='' keeps CRLF notes byte-identical on write-back
        try:
            with open(self._full_path(path), 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(path, str(e)) from e

    def write(self, path: str, text: str):
        """Replace the note content in one step; a failed write leaves the old content."""
        writer = retry(
            wait=wait_random_exponential(min=0.05, max=1),
            stop=stop_after_attempt(self.write_attempts),
            retry=(retry_if_exception_type(OSError)
                   & retry_if_not_exception_type(PERMANENT_WRITE_ERRORS)),
            reraise=True,
        )(self._replace)
        try:
            writer(self._full_path(path), text)
        except OSError as e:
            raise WriteError(path, str(e)) from e

    @staticmethod
    def _replace(target: Path, text: str):
        # Write through symlinks; the new file takes the old note's permission bits
        target = Path(os.path.realpath(target))
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f'.{target.name}.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
            if target.exists():
                shutil.copymode(target, tmp_name)
            os.replace(tmp_name, target)
        except OSError:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise


class InMemoryDocumentStore:
    """Corpus held in a dict; paths are listed in insertion order."""

    def __init__(self, documents: Optional[Dict[str, str]] = None):
        self.documents: Dict[str, str] = dict(documents or {})

    def list_documents(self) -> List[str]:
        return list(self.documents)

    def resolve_prefix(self, path: str) -> Optional[str]:
        location = path.strip('/')
        if not location:
            return ''
        for doc_path in self.documents:
            if doc_path == location or doc_path.startswith(location + '/'):
                return location
        return None

    def read(self, path: str) -> str:
        try:
            return self.documents[path]
        except KeyError:
            raise ReadError(path, 'no such document') from None

    def write(self, path: str, text: str):
        self.documents[path] = text
