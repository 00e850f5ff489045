"""
Lookup resolution: selection -> dictionary entries.
"""

from typing import Optional, Tuple

from mandopop.dictionary import DictionaryIndex, LexiconEntry
from mandopop.inflection import normalize


def resolve_with_key(
    selection: str,
    index: Optional[DictionaryIndex],
) -> Tuple[Optional[str], Optional[Tuple[LexiconEntry, ...]]]:
    """
    Resolve a selection and report which candidate key matched.

    Returns:
        Tuple of (matched key, entries), or (None, None) on no match
    """
    if index is None:
        return None, None

    candidates = normalize(selection)
    if candidates is None:
        return None, None

    for key in candidates:
        entries = index.get(key)
        if entries:
            return key, entries

    return None, None


def resolve(
    selection: str,
    index: Optional[DictionaryIndex],
) -> Optional[Tuple[LexiconEntry, ...]]:
    """
    Find the entries for a selection.

    Candidates from normalize() are tried in order and the first one
    present in the index wins. Entry lists are never merged across keys.

    Args:
        selection: Raw selected text
        index: Loaded index, or None if not loaded yet

    Returns:
        Ranked entries, or None if nothing matches
    """
    _, entries = resolve_with_key(selection, index)
    return entries
