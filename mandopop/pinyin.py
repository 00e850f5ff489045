"""
Pinyin tone rendering for mandopop.

CC-CEDICT writes pronunciations as numbered syllables ("ni3 hao3").
This module converts them to diacritic pinyin ("nǐ hǎo") for display.
"""

import re

# ============================================================================
# Tone Tables
# ============================================================================
# Index 0-3 hold tones 1-4, index 4 is the neutral (unmarked) form.

TONE_MARKS = {
    'a': ('ā', 'á', 'ǎ', 'à', 'a'),
    'e': ('ē', 'é', 'ě', 'è', 'e'),
    'i': ('ī', 'í', 'ǐ', 'ì', 'i'),
    'o': ('ō', 'ó', 'ǒ', 'ò', 'o'),
    'u': ('ū', 'ú', 'ǔ', 'ù', 'u'),
    'ü': ('ǖ', 'ǘ', 'ǚ', 'ǜ', 'ü'),
    'A': ('Ā', 'Á', 'Ǎ', 'À', 'A'),
    'E': ('Ē', 'É', 'Ě', 'È', 'E'),
    'I': ('Ī', 'Í', 'Ǐ', 'Ì', 'I'),
    'O': ('Ō', 'Ó', 'Ǒ', 'Ò', 'O'),
    'U': ('Ū', 'Ú', 'Ǔ', 'Ù', 'U'),
    'Ü': ('Ǖ', 'Ǘ', 'Ǚ', 'Ǜ', 'Ü'),
}

VOWELS = frozenset('aeiouü')

NEUTRAL_TONE = 5

_SYLLABLE_RE = re.compile(r'^(.+?)([1-5])?$')


# ============================================================================
# Rendering
# ============================================================================

def _replace_umlaut(base: str) -> str:
    """Expand the ASCII spellings of ü ("v" and CEDICT's "u:")."""
    return (
        base.replace('u:', 'ü').replace('U:', 'Ü')
        .replace('v', 'ü').replace('V', 'Ü')
    )


def find_tone_vowel(base: str) -> int:
    """
    Find the index of the vowel that carries the tone mark.

    Placement rules, in priority order:
        1. the first 'a'
        2. the first 'e'
        3. the 'o' of 'ou'
        4. the last vowel of the syllable

    Args:
        base: Syllable without tone number (ü already substituted)

    Returns:
        Index into base, or -1 if the syllable has no vowel (e.g. "hm")
    """
    lowered = base.lower()

    if 'a' in lowered:
        return lowered.index('a')
    if 'e' in lowered:
        return lowered.index('e')
    if 'ou' in lowered:
        return lowered.index('ou')

    for i in range(len(lowered) - 1, -1, -1):
        if lowered[i] in VOWELS:
            return i

    return -1


def render_tone(syllable: str) -> str:
    """
    Convert one numbered syllable to diacritic form.

    Never fails: anything that cannot be marked comes back unmarked.

    Example:
        >>> render_tone("lv3")
        'lǚ'
        >>> render_tone("ma5")
        'ma'
    """
    match = _SYLLABLE_RE.match(syllable)
    if not match:
        return syllable

    base, tone_digit = match.groups()
    tone = int(tone_digit) if tone_digit else NEUTRAL_TONE
    base = _replace_umlaut(base)

    if tone == NEUTRAL_TONE:
        return base

    index = find_tone_vowel(base)
    if index == -1:
        return base

    marks = TONE_MARKS.get(base[index])
    if marks is None:
        return base

    return base[:index] + marks[tone - 1] + base[index + 1:]


def render_pinyin(pinyin: str) -> str:
    """
    Render a space-separated numbered pinyin string.

    Each syllable is rendered on its own and the result is rejoined
    with single spaces.

    Example:
        >>> render_pinyin("ni3 hao3")
        'nǐ hǎo'
    """
    return ' '.join(render_tone(syllable) for syllable in pinyin.split())
