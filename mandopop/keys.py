"""
English key extraction for the dictionary compiler.

Each CC-CEDICT definition ("to run (of a machine)", "ice cream") is
turned into the lowercase keys it should be reachable under: every
meaningful single word, plus the whole definition when it is a short,
clean phrase.
"""

import re
from typing import List, Set

# ============================================================================
# Stop Words
# ============================================================================
# Function words plus CEDICT markers (sb = somebody, sth = something,
# and abbreviations such as "cf." or "lit.", which tokenize to "cf", "lit").

STOP_WORDS: Set[str] = {
    'a', 'an', 'the', 'to', 'of', 'in', 'on', 'at', 'for', 'by', 'with',
    'or', 'and', 'as', 'is', 'be', 'it', 'sb', 'sth', 'esp', 'etc', 'ie',
    'eg', 'vs', 'also', 'see', 'cf', 'lit', 'fig', 'var', 'abbr', 'pr',
}

MIN_PHRASE_WORDS = 2
MAX_PHRASE_WORDS = 3

_ANNOTATION_RES = (
    re.compile(r'\([^)]*\)'),
    re.compile(r'\[[^\]]*\]'),
    re.compile(r'\{[^}]*\}'),
)
_WHITESPACE_RE = re.compile(r'\s+')
_WORD_RE = re.compile(r"[a-z][-'a-z]*")
_PHRASE_RE = re.compile(r"^[a-z][-'a-z ]*[a-z]$")


def clean_definition(definition: str) -> str:
    """
    Strip usage notes from a definition.

    Parenthesized, bracketed and braced spans are replaced with a space,
    whitespace is collapsed and the result is lowercased and trimmed.
    """
    cleaned = definition
    for pattern in _ANNOTATION_RES:
        cleaned = pattern.sub(' ', cleaned)
    return _WHITESPACE_RE.sub(' ', cleaned).strip().lower()


def extract_word_keys(definition: str) -> List[str]:
    """
    Extract single-word keys from a definition.

    Args:
        definition: One definition from a CEDICT entry

    Returns:
        Distinct keys in order of first appearance. Stop words and
        one-letter tokens are never returned.

    Example:
        >>> extract_word_keys("cat (domestic animal)")
        ['cat']
    """
    keys = []
    seen = set()

    for token in _WORD_RE.findall(clean_definition(definition)):
        if len(token) <= 1 or token in STOP_WORDS or token in seen:
            continue
        seen.add(token)
        keys.append(token)

    return keys


def extract_phrase_keys(definition: str) -> List[str]:
    """
    Extract the phrase key of a definition, if it has one.

    The whole cleaned definition becomes a key when it is made of plain
    letters, hyphens, apostrophes and single spaces, has 2-3 words, and
    neither starts nor ends on a stop word ("to steal" and "a basket"
    are definitional patterns, not phrases).

    Returns:
        A list holding the phrase, or an empty list
    """
    cleaned = clean_definition(definition)

    if not _PHRASE_RE.match(cleaned):
        return []

    words = cleaned.split(' ')
    if not MIN_PHRASE_WORDS <= len(words) <= MAX_PHRASE_WORDS:
        return []

    if words[0] in STOP_WORDS or words[-1] in STOP_WORDS:
        return []

    return [cleaned]
