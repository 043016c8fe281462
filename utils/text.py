"""
Text Processing Module

Line-break truncation of rendered messages and the escaping helpers applied
to user submitted fields.
"""

import re
from typing import List, Tuple

from config import settings

BR_TAG = '<br>'
NEWLINE = '\n'

# Tag-like token followed by the text up to the next tag
_TAG_TOKEN = re.compile(r'(</?([\w+]+)[^>]*>)?([^<>]*)', re.ASCII)
_OPENING_TAG = re.compile(r'<\w+[^>]*>', re.ASCII)
_BR_NAME = re.compile(r'br', re.IGNORECASE)

_ESCAPE_TABLE = str.maketrans({
    '&': '&amp;',
    '"': '&quot;',
    "'": '&#039;',
    '<': '&lt;',
    '>': '&gt;',
})

_SPECIAL_ENTITIES = {
    '&amp;': '&',
    '&quot;': '"',
    '&#039;': "'",
    '&#39;': "'",
    '&lt;': '<',
    '&gt;': '>',
}
_SPECIAL_ENTITY = re.compile('|'.join(re.escape(e) for e in _SPECIAL_ENTITIES))


def _offsets(haystack: str, needle: str) -> List[int]:
    result = []
    pos = haystack.find(needle)
    while pos != -1:
        result.append(pos)
        pos = haystack.find(needle, pos + 1)
    return result


def count_linebreaks(text: str) -> int:
    """Count '<br>' and newline breaks combined."""
    return text.count(BR_TAG) + text.count(NEWLINE)


def close_open_tags(text: str) -> str:
    """
    Append closing tags for every opening tag found in text.

    Closing tags are emitted most-recently-opened first. Explicit closing
    tags already present are not matched against the stack, so a tag that
    was opened and closed still gets closed again. Any tag name containing
    "br" is skipped.
    """
    open_tags = []
    for match in _TAG_TOKEN.finditer(text):
        name = match.group(2) or ''
        if _BR_NAME.search(name):
            continue

        if _OPENING_TAG.search(match.group(0)):
            open_tags.insert(0, name)

    return text + ''.join(f'</{tag}>' for tag in open_tags)


def truncate_linebreaks(
    text: str,
    br_count: int = settings.DEFAULT_TRUNCATE_BREAKS,
    handle_html: bool = True
) -> Tuple[str, bool]:
    """
    Truncate text before its br_count-th line break ('<br>' or newline).

    Args:
        text: Plain or rendered HTML text.
        br_count: Number of line breaks allowed before cutting.
        handle_html: Close tags left open by the cut.

    Returns:
        Tuple[str, bool]: (text, truncated). Text is returned unchanged with
            False when it has br_count breaks or fewer.
    """
    if count_linebreaks(text) <= br_count:
        return text, False

    offsets = sorted(_offsets(text, BR_TAG) + _offsets(text, NEWLINE))

    # A non-positive threshold keeps the full text, only the tag repair runs
    if br_count > 0:
        text = text[:offsets[br_count - 1]]

    if handle_html:
        text = close_open_tags(text)

    return text, True


def clean_field(field: str) -> str:
    """Escape a user submitted text field before it is stored."""
    return field.translate(_ESCAPE_TABLE)


def decode_special_chars(text: str) -> str:
    """Reverse clean_field() in a single pass, leaving other entities as-is."""
    return _SPECIAL_ENTITY.sub(lambda m: _SPECIAL_ENTITIES[m.group(0)], text)


def break_long_words(text: str, max_len: int) -> str:
    """
    Hard-wrap words longer than max_len with newlines.

    Only space-separated words are considered; existing newlines restart
    the count and sentences are never re-flowed.
    """
    if max_len <= 0:
        return text

    def _wrap(word: str) -> str:
        lines = []
        for line in word.split(NEWLINE):
            chunks = [line[i:i + max_len] for i in range(0, len(line), max_len)] or ['']
            lines.append(NEWLINE.join(chunks))
        return NEWLINE.join(lines)

    return ' '.join(_wrap(word) for word in text.split(' '))
