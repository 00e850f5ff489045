"""
Dictionary compiler for mandopop.

Builds the English-keyed index from a CC-CEDICT lexicon. Each entry
line:

    Traditional Simplified [pin1 yin1] /definition 1/definition 2/

is indexed under every meaningful English word of its definitions and
under short clean definitions as whole phrases. Each key's entries are
then ranked and truncated to MAX_ENTRIES_PER_KEY.
"""

import argparse
import logging
import re
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

from mandopop.config import DEFAULT_INDEX_PATH, DEFAULT_LEXICON_PATH, DEFAULT_TRIE_PATH
from mandopop.dictionary import MAX_ENTRIES_PER_KEY, DictionaryIndex, LexiconEntry
from mandopop.keys import extract_phrase_keys, extract_word_keys
from mandopop.pinyin import render_pinyin

logger = logging.getLogger(__name__)


# ============================================================================
# Ranking Policy
# ============================================================================

# Everyday words that should win over rarer translations of the same key
COMMON_WORDS: Set[str] = {
    '的', '是', '不', '了', '在', '有', '人', '这', '我', '他',
    '你好', '谢谢', '再见', '对不起', '没关系', '请', '好', '是的', '不是',
    '银行', '电脑', '手机', '汽车', '飞机', '火车', '地铁', '公共汽车',
    '学校', '医院', '餐厅', '商店', '超市', '机场', '车站',
    '吃', '喝', '看', '听', '说', '读', '写', '走', '跑', '来', '去',
    '大', '小', '多', '少', '高', '低', '长', '短', '新', '旧',
    '钱', '时间', '工作', '学习', '朋友', '家', '书', '水', '茶', '咖啡',
}


def rank_key(entry: LexiconEntry) -> Tuple[int, int, int]:
    """
    Sort key for entries under one English key (lower sorts first).

    Returns:
        (common_priority, length_class, gloss_length) where
        common_priority is 0 for COMMON_WORDS, length_class prefers
        two-character words, then single characters, then longer words,
        and gloss_length favours entries with shorter definitions.
    """
    common_priority = 0 if entry.characters in COMMON_WORDS else 1

    length = len(entry.characters)
    if length == 2:
        length_class = 0
    elif length == 1:
        length_class = 1
    else:
        length_class = 2

    return (common_priority, length_class, entry.gloss_length)


def rank_entries(entries: List[LexiconEntry]) -> List[LexiconEntry]:
    """Stable-sort entries by rank_key and keep the top MAX_ENTRIES_PER_KEY."""
    return sorted(entries, key=rank_key)[:MAX_ENTRIES_PER_KEY]


# ============================================================================
# Line Parsing
# ============================================================================

CEDICT_LINE_RE = re.compile(
    r'^(?P<trad>\S+)\s+(?P<simp>\S+)\s+\[(?P<pinyin>[^\]]+)\]\s+/(?P<defs>.+)/\s*$'
)

COMMENT_PREFIX = '#'


def parse_line(line: str) -> Optional[LexiconEntry]:
    """
    Parse one CC-CEDICT line.

    Args:
        line: A raw lexicon line

    Returns:
        The entry, or None for comments, blank lines and anything that
        doesn't have the entry shape
    """
    if line.startswith(COMMENT_PREFIX) or not line.strip():
        return None

    match = CEDICT_LINE_RE.match(line)
    if not match:
        return None

    definitions = tuple(d for d in match.group('defs').split('/') if d.strip())
    if not definitions:
        return None

    return LexiconEntry(
        characters=match.group('simp'),
        pronunciation=render_pinyin(match.group('pinyin')),
        definitions=definitions,
    )


def entry_keys(entry: LexiconEntry) -> List[str]:
    """All index keys for an entry, words and phrases per definition."""
    keys = []
    for definition in entry.definitions:
        keys.extend(extract_word_keys(definition))
        keys.extend(extract_phrase_keys(definition))
    return keys


# ============================================================================
# Compilation
# ============================================================================

@dataclass
class CompileResult:
    """Compiled index plus build statistics."""
    index: DictionaryIndex
    entries: int
    skipped: int

    @property
    def keys(self) -> int:
        return len(self.index)

    @property
    def phrase_keys(self) -> int:
        return sum(1 for key in self.index.keys() if ' ' in key)


def collect_entries(lines: Iterable[str]) -> Tuple[Dict[str, List[LexiconEntry]], int, int]:
    """
    Group parsed entries by English key, in lexicon order.

    An entry is added to a key at most once per (characters, pinyin)
    pair; later duplicates keep the first-seen definitions.

    Returns:
        Tuple of (key -> entries, parsed entry count, skipped line count)
    """
    grouped: Dict[str, List[LexiconEntry]] = {}
    seen: Dict[str, Set[Tuple[str, str]]] = {}
    entry_count = 0
    skipped = 0

    for line in lines:
        entry = parse_line(line)
        if entry is None:
            if line.strip() and not line.startswith(COMMENT_PREFIX):
                skipped += 1
            continue

        entry_count += 1
        for key in entry_keys(entry):
            identities = seen.setdefault(key, set())
            if entry.identity in identities:
                continue
            identities.add(entry.identity)
            grouped.setdefault(key, []).append(entry)

    return grouped, entry_count, skipped


def compile_lexicon(lines: Iterable[str]) -> CompileResult:
    """
    Compile lexicon lines into a ranked DictionaryIndex.

    Args:
        lines: CC-CEDICT lines (comments and malformed lines are skipped)

    Returns:
        CompileResult with the index and statistics
    """
    grouped, entry_count, skipped = collect_entries(lines)

    ranked = {key: rank_entries(entries) for key, entries in grouped.items()}

    return CompileResult(
        index=DictionaryIndex.from_mapping(ranked),
        entries=entry_count,
        skipped=skipped,
    )


def build_index(lines: Iterable[str]) -> DictionaryIndex:
    """Compile lexicon lines and return only the index."""
    return compile_lexicon(lines).index


def compile_file(lexicon_path: Path) -> CompileResult:
    """Compile a CC-CEDICT file (UTF-8)."""
    with open(lexicon_path, 'r', encoding='utf-8') as f:
        return compile_lexicon(f)


# ============================================================================
# Main
# ============================================================================

def _file_size_kb(path: Path) -> int:
    return round(path.stat().st_size / 1024)


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    parser = argparse.ArgumentParser(
        prog="mandopop-build",
        description="Build the mandopop English -> Chinese index from CC-CEDICT",
    )
    parser.add_argument(
        '--lexicon', '-l',
        type=Path,
        default=DEFAULT_LEXICON_PATH,
        help=f"Path to CC-CEDICT text file (default: {DEFAULT_LEXICON_PATH})"
    )
    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=DEFAULT_INDEX_PATH,
        help=f"Output JSON index path (default: {DEFAULT_INDEX_PATH})"
    )
    parser.add_argument(
        '--trie', '-t',
        type=Path,
        default=DEFAULT_TRIE_PATH,
        help=f"Output binary trie path (default: {DEFAULT_TRIE_PATH})"
    )
    parser.add_argument(
        '--no-trie',
        action='store_true',
        help="Only write the JSON index",
    )

    args = parser.parse_args(argv)

    if not args.lexicon.exists():
        logger.error(f"Lexicon file not found: {args.lexicon}")
        sys.exit(1)

    start_time = time.time()

    logger.info(f"Compiling {args.lexicon}...")
    result = compile_file(args.lexicon)

    logger.info(f"Processed {result.entries:,} dictionary entries ({result.skipped:,} lines skipped)")
    logger.info(f"Created index with {result.keys:,} keys ({result.phrase_keys:,} phrase keys)")

    result.index.save_json(args.output)
    logger.info(f"Saved JSON index to {args.output} ({_file_size_kb(args.output):,} KB)")

    if not args.no_trie:
        result.index.save(args.trie)
        logger.info(f"Saved binary index to {args.trie} ({_file_size_kb(args.trie):,} KB)")

    elapsed = time.time() - start_time
    logger.info(f"Build completed in {elapsed:.1f} seconds")


if __name__ == '__main__':
    main()
