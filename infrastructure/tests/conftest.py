"""
Pytest configuration and fixtures.
"""
from pathlib import Path
from typing import Dict, Iterable

import pytest

from keyword_linker.core.errors import ReadError, WriteError
from keyword_linker.utils.vault_store import InMemoryDocumentStore


class FlakyDocumentStore(InMemoryDocumentStore):
    """In-memory store whose reads/writes fail for selected paths; records every call."""

    def __init__(self, documents: Dict[str, str], fail_read: Iterable[str] = (),
                 fail_write: Iterable[str] = ()):
        super().__init__(documents)
        self.fail_read = set(fail_read)
        self.fail_write = set(fail_write)
        self.reads = []
        self.writes = []

    def read(self, path: str) -> str:
        self.reads.append(path)
        if path in self.fail_read:
            raise ReadError(path, 'locked')
        return super().read(path)

    def write(self, path: str, text: str):
        if path in self.fail_write:
            raise WriteError(path, 'permission denied')
        self.writes.append(path)
        super().write(path, text)


@pytest.fixture
def corpus() -> FlakyDocumentStore:
    return FlakyDocumentStore({
        'a/x': 'the cat sat',
        'a/y': 'a cat and a category',
        'b/z': 'no cat here? yes, cat',
    })


@pytest.fixture
def make_store():
    return FlakyDocumentStore


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """Small vault with nested folders and a hidden config folder."""
    (tmp_path / 'Animals').mkdir()
    (tmp_path / 'Notes').mkdir()
    (tmp_path / '.obsidian').mkdir()
    (tmp_path / 'Animals' / 'cat.md').write_text('A cat is an animal.\n', encoding='utf-8')
    (tmp_path / 'Animals' / 'dog.md').write_text('A dog chases the cat.\n', encoding='utf-8')
    (tmp_path / 'Notes' / 'daily.md').write_text('Fed the cat. See [[Cat|cat]].\n', encoding='utf-8')
    (tmp_path / 'Notes' / 'image.png').write_bytes(b'\x89PNG')
    (tmp_path / '.obsidian' / 'workspace.md').write_text('cat', encoding='utf-8')
    return tmp_path
