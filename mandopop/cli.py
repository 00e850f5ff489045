"""
CLI interface for mandopop.

Usage:
    mandopop "cats"
    mandopop -d "ice cream"
    mandopop --json "running"
    mandopop --prefix "ice"
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from mandopop import __version__
from mandopop.cache import IndexCacheStore
from mandopop.config import get_cache_dir, get_index_path, load_settings
from mandopop.loader import IndexLoader
from mandopop.service import DISABLED, FOUND, UNAVAILABLE, LookupResponse, LookupService


# ============================================================================
# Output Formatting
# ============================================================================

def format_default(response: LookupResponse) -> str:
    """One line per entry: characters, pinyin, definitions."""
    lines = []
    for entry in response.entries:
        lines.append(f"{entry.characters}\t{entry.pronunciation}\t{'; '.join(entry.definitions)}")
    return "\n".join(lines)


def format_detailed(response: LookupResponse) -> str:
    """Matched key, then each entry with numbered definitions."""
    lines = [f"{response.text} → {response.key}", "─" * 40]

    for entry in response.entries:
        lines.append(f"{entry.characters}【{entry.pronunciation}】")
        for i, definition in enumerate(entry.definitions, 1):
            lines.append(f"  {i}. {definition}")

    return "\n".join(lines)


def format_json(response: LookupResponse) -> str:
    return json.dumps(response.to_dict(), ensure_ascii=False, indent=2)


# ============================================================================
# Main
# ============================================================================

def build_service(index_path: Optional[Path] = None, use_cache: bool = True) -> LookupService:
    store = IndexCacheStore(get_cache_dir()) if use_cache else None
    loader = IndexLoader(source_path=index_path or get_index_path(), store=store)
    return LookupService(loader, load_settings())


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="mandopop",
        description="Translate English words and phrases to Mandarin Chinese",
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="English word or 2-3 word phrase",
    )
    parser.add_argument(
        "--detail", "-d",
        action="store_true",
        help="Show matched key and numbered definitions",
    )
    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--max", "-m",
        type=int,
        default=None,
        help="Show at most N entries",
    )
    parser.add_argument(
        "--index", "-i",
        type=Path,
        default=None,
        help=f"Index artifact, JSON or .dic (default: {get_index_path()})",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Don't read or write the local index cache",
    )
    parser.add_argument(
        "--prefix", "-p",
        action="store_true",
        help="List indexed keys starting with TEXT instead of translating",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"mandopop {__version__}",
    )

    args = parser.parse_args(argv)

    if args.text is None:
        # Read from stdin
        text = sys.stdin.read().strip()
    else:
        text = args.text

    if not text and not args.prefix:
        parser.print_help()
        sys.exit(1)

    service = build_service(args.index, use_cache=not args.no_cache)

    try:
        if args.prefix:
            index = service.loader.load()
            for key in index.keys(text.lower()):
                print(key)
            return

        response = service.lookup(text, max_entries=args.max)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    finally:
        service.loader.shutdown()

    if response.status == UNAVAILABLE:
        print(f"Error: {response.message}", file=sys.stderr)
        sys.exit(2)

    if args.json:
        print(format_json(response))
    elif response.status == DISABLED:
        print("Lookups are disabled in settings")
    elif response.status != FOUND:
        print(f"No translation found for '{text}'")
    elif args.detail:
        print(format_detailed(response))
    else:
        print(format_default(response))

    if response.status != FOUND:
        sys.exit(1)


if __name__ == "__main__":
    main()
