"""
English-keyed Chinese dictionary for mandopop.

This module defines the compiled dictionary data model:
- LexiconEntry: one Chinese word (characters, pinyin, definitions)
- DictionaryIndex: lowercase English key -> ranked entries

The index is stored as a marisa_trie.BytesTrie, one JSON-encoded entry
list per key. It can be written in two forms:
- JSON ({"cat": [{"s": "猫", "p": "māo", "d": ["cat"]}], ...}), the
  artifact produced by the build script
- binary trie, compact and memory-mappable, used for the local cache
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import marisa_trie

# Maximum entries stored per key
MAX_ENTRIES_PER_KEY = 10

# Every serialized marisa trie starts with this header
MARISA_HEADER = b"We love Marisa.\x00"


# ============================================================================
# Entry Data Structure
# ============================================================================

@dataclass(frozen=True, slots=True)
class LexiconEntry:
    """
    A dictionary entry.

    Attributes:
        characters: Simplified Chinese characters
        pronunciation: Diacritic pinyin, space-separated syllables
        definitions: English definitions in lexicon order
    """
    characters: str
    pronunciation: str
    definitions: Tuple[str, ...]

    @property
    def identity(self) -> Tuple[str, str]:
        """Entries with the same characters and pinyin are duplicates."""
        return (self.characters, self.pronunciation)

    @property
    def gloss_length(self) -> int:
        """Total length of all definitions."""
        return sum(len(d) for d in self.definitions)

    def to_dict(self) -> dict:
        return {
            's': self.characters,
            'p': self.pronunciation,
            'd': list(self.definitions),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> 'LexiconEntry':
        return cls(
            characters=data['s'],
            pronunciation=data['p'],
            definitions=tuple(data['d']),
        )

    def __repr__(self) -> str:
        return f"LexiconEntry({self.characters!r}, {self.pronunciation!r})"


def _encode_entries(entries: Sequence[LexiconEntry]) -> bytes:
    return json.dumps(
        [e.to_dict() for e in entries],
        ensure_ascii=False,
        separators=(',', ':'),
    ).encode('utf-8')


def _decode_entries(data: bytes) -> Tuple[LexiconEntry, ...]:
    return tuple(LexiconEntry.from_dict(d) for d in json.loads(data.decode('utf-8')))


# ============================================================================
# Dictionary Index
# ============================================================================

class DictionaryIndex:
    """
    Read-only mapping from English key to ranked LexiconEntry tuples.

    Every stored list is non-empty and holds at most MAX_ENTRIES_PER_KEY
    entries. Instances are never mutated after construction, so they can
    be shared between threads without locking.
    """

    __slots__ = ('_trie',)

    def __init__(self, trie: Optional[marisa_trie.BytesTrie] = None):
        self._trie = trie if trie is not None else marisa_trie.BytesTrie()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[str, Sequence[LexiconEntry]]
    ) -> 'DictionaryIndex':
        """
        Build an index from key -> entries.

        Keys are lowercased (the first spelling wins on collision), empty
        lists dropped and long lists truncated.
        """
        items: Dict[str, bytes] = {}
        for key, entries in mapping.items():
            key = key.lower()
            if not entries or key in items:
                continue
            items[key] = _encode_entries(list(entries)[:MAX_ENTRIES_PER_KEY])

        return cls(marisa_trie.BytesTrie(items.items()))

    @classmethod
    def from_json_data(cls, data: Mapping[str, List[dict]]) -> 'DictionaryIndex':
        """Build an index from the decoded JSON artifact."""
        if not isinstance(data, Mapping):
            raise ValueError("Dictionary JSON must be an object keyed by English word")

        return cls.from_mapping({
            key: [LexiconEntry.from_dict(item) for item in items]
            for key, items in data.items()
        })

    @classmethod
    def load_json(cls, path: Path) -> 'DictionaryIndex':
        """
        Load the JSON artifact written by the build script.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not a valid dictionary
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        try:
            return cls.from_json_data(data)
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed dictionary entry in {path}: {e}") from e

    @classmethod
    def from_bytes(cls, data: bytes) -> 'DictionaryIndex':
        """
        Restore an index from to_bytes() output.

        Raises:
            ValueError: If data is not a serialized trie
        """
        if not data.startswith(MARISA_HEADER):
            raise ValueError("Not a serialized dictionary trie")

        trie = marisa_trie.BytesTrie()
        try:
            trie.frombytes(data)
        except RuntimeError as e:
            raise ValueError(f"Corrupt dictionary data: {e}") from e
        return cls(trie)

    @classmethod
    def load(cls, path: Path) -> 'DictionaryIndex':
        """
        Memory-map a binary trie file written by save().

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        if not path.exists():
            raise FileNotFoundError(f"Dictionary not found at {path}")

        trie = marisa_trie.BytesTrie()
        trie.mmap(str(path))
        return cls(trie)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        return self._trie.tobytes()

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._trie.save(str(path))

    def to_mapping(self) -> Dict[str, Tuple[LexiconEntry, ...]]:
        return {key: _decode_entries(value) for key, value in self._trie.items()}

    def to_json_data(self) -> Dict[str, List[dict]]:
        return {
            key: [e.to_dict() for e in entries]
            for key, entries in self.to_mapping().items()
        }

    def save_json(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_json_data(), f, ensure_ascii=False, separators=(',', ':'))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[Tuple[LexiconEntry, ...]]:
        """
        Look up the entries stored under a key.

        Args:
            key: Lowercase English word or phrase

        Returns:
            Ranked entries, or None if the key is not indexed
        """
        values = self._trie.get(key)
        if not values:
            return None
        return _decode_entries(values[0])

    def keys(self, prefix: str = "") -> List[str]:
        """All keys starting with prefix."""
        return [key for key, _ in self._trie.items(prefix)]

    def __contains__(self, key: str) -> bool:
        return self._trie.get(key) is not None

    def __len__(self) -> int:
        return len(self._trie)

    def __repr__(self) -> str:
        return f"DictionaryIndex({len(self):,} keys)"
