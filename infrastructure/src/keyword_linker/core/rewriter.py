"""
Keyword -> [[link]] rewriting for a single document.

A keyword occurrence is rewritten when it stands alone (no word character
directly before or after it) and is not inside an existing link. "Inside a
link" is decided by scanning forward from the occurrence: if the first link
delimiter found is ``]]`` the occurrence is skipped, if it is ``[[`` or there is
none the occurrence is linked. Bracket depth is not tracked, so malformed or
nested ``[[`` inside a link can make an occurrence look unlinked.
"""
import re
from functools import lru_cache
from typing import Tuple

from keyword_linker.core.errors import InvalidRule

LINK_OPEN = '[['
LINK_CLOSE = ']]'
LINK_PIPE = '|'

# Next delimiter after the match is a closer -> we are inside [[...]]
_INSIDE_LINK = (
    r'(?!(?:(?!' + re.escape(LINK_OPEN) + r').)*?' + re.escape(LINK_CLOSE) + r')'
)


@lru_cache(maxsize=256)
def make_pattern(keyword: str) -> re.Pattern:
    """Compile the match expression for a literal keyword."""
    if not keyword:
        raise InvalidRule("keyword must not be empty")
    return re.compile(r'(?<!\w)' + re.escape(keyword) + r'(?!\w)' + _INSIDE_LINK, re.DOTALL)


def make_link(keyword: str, display_form: str) -> str:
    return f"{LINK_OPEN}{display_form}{LINK_PIPE}{keyword}{LINK_CLOSE}"


def rewrite_counted(text: str, keyword: str, display_form: str) -> Tuple[str, int]:
    """Same as rewrite(), also returning how many occurrences were linked."""
    pattern = make_pattern(keyword)
    link = make_link(keyword, display_form)
    # Function replacement: display_form is inserted literally, no \1 expansion
    return pattern.subn(lambda _match: link, text)


def rewrite(text: str, keyword: str, display_form: str) -> str:
    """Wrap every unlinked, standalone occurrence of keyword into [[display_form|keyword]].

    Returns text unchanged (same content) when nothing qualifies.
    """
    return rewrite_counted(text, keyword, display_form)[0]
