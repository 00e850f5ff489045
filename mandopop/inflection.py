"""
Word-form normalization for lookups.

A user selection ("Running", "cats.", "ice creams") rarely matches an
index key exactly. normalize() generates the keys it could stand for,
most confident first: the cleaned selection itself, then forms with
trailing punctuation or common English inflections removed.

The suffix rules are a heuristic stemmer. They don't know irregular
forms ("went", "children") and may propose non-words ("makin"), which
simply miss in the index. All applicable rules fire, in a fixed order,
and duplicates are kept; lookups take the first candidate that hits.
"""

import re
from typing import List, Optional

MAX_SELECTION_LENGTH = 100

MIN_PHRASE_WORDS = 2
MAX_PHRASE_WORDS = 3

# Cap on combinations generated for a multi-word selection
MAX_PHRASE_CANDIDATES = 20

_TRAILING_PUNCT_RE = re.compile(r'''[.,!?;:'"]+$''')


def _clean(text: str) -> Optional[str]:
    cleaned = text.lower().strip()
    if not cleaned or len(cleaned) > MAX_SELECTION_LENGTH:
        return None
    return cleaned


def _has_double_ending(base: str) -> bool:
    """True for doubled final consonants ("runn" in "running")."""
    return len(base) > 1 and base[-1] == base[-2]


# ============================================================================
# Single Words
# ============================================================================

def word_variants(word: str) -> List[str]:
    """
    Apply the suffix rules to a cleaned lowercase word.

    Returns:
        The word followed by every variant the rules produce, in rule
        order (may contain duplicates)
    """
    variants = [word]

    # Trailing punctuation (cat. -> cat)
    stripped = _TRAILING_PUNCT_RE.sub('', word)
    if stripped != word:
        variants.append(stripped)

    # -ies (studies -> study)
    if word.endswith('ies') and len(word) > 4:
        variants.append(word[:-3] + 'y')

    # -s / -es (cats -> cat, boxes -> box)
    if word.endswith('s') and len(word) > 2:
        variants.append(word[:-1])
        if word.endswith('es') and len(word) > 3:
            variants.append(word[:-2])
        if word.endswith('ses') or word.endswith('zes'):
            variants.append(word[:-2])

    # -ing (running -> run, making -> make)
    if word.endswith('ing') and len(word) > 4:
        base = word[:-3]
        variants.append(base)
        variants.append(base + 'e')
        if _has_double_ending(base):
            variants.append(base[:-1])

    # -ed (liked -> like, stopped -> stop)
    if word.endswith('ed') and len(word) > 3:
        base = word[:-2]
        variants.append(base)
        variants.append(word[:-1])
        if _has_double_ending(base):
            variants.append(base[:-1])

    # -er (nicer -> nice, bigger -> big)
    if word.endswith('er') and len(word) > 3:
        base = word[:-2]
        variants.append(base)
        variants.append(word[:-1])
        if _has_double_ending(base):
            variants.append(base[:-1])

    # -est (fastest -> fast, nicest -> nice)
    if word.endswith('est') and len(word) > 4:
        variants.append(word[:-3])
        variants.append(word[:-2])

    # -ly (quickly -> quick)
    if word.endswith('ly') and len(word) > 3:
        variants.append(word[:-2])

    return variants


def normalize_word(word: str) -> Optional[List[str]]:
    """
    Generate candidate keys for a single word.

    Args:
        word: Raw word as selected

    Returns:
        Candidate keys, the lowercased trimmed word first, or None if the
        word is empty or longer than MAX_SELECTION_LENGTH

    Example:
        >>> normalize_word("Cats")
        ['cats', 'cat']
    """
    cleaned = _clean(word)
    if cleaned is None:
        return None
    return word_variants(cleaned)


# ============================================================================
# Phrases
# ============================================================================

def expand_phrase(options: List[List[str]], limit: int = MAX_PHRASE_CANDIDATES) -> List[str]:
    """
    Combine per-word candidates into phrase candidates.

    Combinations are generated with the first word varying slowest, so
    the all-original-words phrase comes first. At most limit phrases are
    returned; each level is capped at limit as well, which keeps the
    earliest combinations of the full product.
    """
    combos: List[List[str]] = [[]]

    for position in options:
        extended = []
        for prefix in combos:
            for candidate in position:
                extended.append(prefix + [candidate])
                if len(extended) >= limit:
                    break
            if len(extended) >= limit:
                break
        combos = extended

    return [' '.join(combo) for combo in combos]


def normalize(selection: str) -> Optional[List[str]]:
    """
    Generate candidate dictionary keys for a selection.

    Single words go through the suffix rules. Selections of 2-3 words are
    normalized word by word and recombined ("ice creams" gives
    "ice creams", "ice cream", ...).

    Args:
        selection: Raw selected text

    Returns:
        Ordered candidate keys, or None for empty, oversized or
        too-many-word selections
    """
    cleaned = _clean(selection)
    if cleaned is None:
        return None

    if ' ' not in cleaned:
        return word_variants(cleaned)

    words = cleaned.split()
    if not MIN_PHRASE_WORDS <= len(words) <= MAX_PHRASE_WORDS:
        return None

    return expand_phrase([word_variants(w) for w in words])
