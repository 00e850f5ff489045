#!/usr/bin/env python3
"""
Dictionary Builder for mandopop.

This script builds the English-keyed index from a CC-CEDICT text file.
It writes the JSON index artifact and a compact marisa_trie.BytesTrie
copy of it.

Usage:
    python scripts/build_dictionary.py [--lexicon PATH] [--output PATH] [--trie PATH]

CC-CEDICT can be downloaded from
https://www.mdbg.net/chinese/dictionary?page=cc-cedict
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from mandopop.compiler import main


if __name__ == '__main__':
    main()
