"""
mandopop: English to Mandarin offline dictionary

Looks up English words and short phrases in an index compiled from
CC-CEDICT and returns simplified Chinese with tone-marked pinyin.
Inflected forms ("cats", "running", "bigger") resolve to their base
words.

Basic Usage:
    import mandopop

    for entry in mandopop.lookup("cats"):
        print(f"{entry.characters} {entry.pronunciation} {'; '.join(entry.definitions)}")
"""

import threading
import time
from typing import List, Optional, Tuple

__version__ = "1.0.0"


# =============================================================================
# Exceptions
# =============================================================================

class MandopopError(Exception):
    """Base class for mandopop errors."""
    pass


class IndexUnavailableError(MandopopError):
    """Raised when the dictionary index cannot be loaded."""
    pass


class LoadTimeoutError(MandopopError):
    """Raised when waiting for the dictionary load times out."""
    pass


# =============================================================================
# Default Service
# =============================================================================

_service = None
_service_lock = threading.Lock()


def get_service():
    """
    Get the process-wide LookupService, creating it on first use.

    The service loads the index from the configured artifact and keeps
    a binary copy in the local cache directory.
    """
    global _service
    from mandopop.cache import IndexCacheStore
    from mandopop.config import get_cache_dir, get_index_path, load_settings
    from mandopop.loader import IndexLoader
    from mandopop.service import LookupService

    with _service_lock:
        if _service is None:
            loader = IndexLoader(
                source_path=get_index_path(),
                store=IndexCacheStore(get_cache_dir()),
            )
            _service = LookupService(loader, load_settings())

    return _service


def _entries_or_raise(response) -> list:
    from mandopop.service import NOT_READY, UNAVAILABLE

    if response.status == UNAVAILABLE:
        raise IndexUnavailableError(response.message)
    if response.status == NOT_READY:
        raise LoadTimeoutError("Dictionary is not loaded yet")
    return list(response.entries)


# =============================================================================
# Main API
# =============================================================================

def lookup(text: str, timeout: Optional[float] = None) -> list:
    """
    Translate an English word or 2-3 word phrase.

    Args:
        text: Selected English text
        timeout: Maximum seconds to wait for the first dictionary load

    Returns:
        List of LexiconEntry objects, best first (empty if nothing
        matches or lookups are disabled)

    Raises:
        IndexUnavailableError: If the dictionary cannot be loaded
        LoadTimeoutError: If the dictionary load exceeds timeout

    Example:
        >>> entries = mandopop.lookup("cats")
        >>> entries[0].characters
        '猫'
    """
    return _entries_or_raise(get_service().lookup(text, timeout=timeout))


def normalize(text: str) -> Optional[List[str]]:
    """
    Get the candidate dictionary keys for a selection.

    Example:
        >>> mandopop.normalize("Running")
        ['running', 'runn', 'runne', 'run']
    """
    from mandopop.inflection import normalize as _normalize
    return _normalize(text)


def render_pinyin(pinyin: str) -> str:
    """
    Convert numbered pinyin to tone marks.

    Example:
        >>> mandopop.render_pinyin("ni3 hao3")
        'nǐ hǎo'
    """
    from mandopop.pinyin import render_pinyin as _render
    return _render(pinyin)


def warm_up(verbose: bool = False) -> Tuple[float, dict]:
    """
    Pre-load the dictionary.

    Args:
        verbose: If True, print timing information

    Returns:
        Tuple of (total_time_seconds, timing_details_dict)
    """
    timings = {}
    total_start = time.perf_counter()

    if verbose:
        print("Loading mandopop dictionary...")

    t0 = time.perf_counter()
    index = get_service().loader.load()
    timings['dictionary'] = (time.perf_counter() - t0) * 1000

    if verbose:
        print(f"  Dictionary:     {timings['dictionary']:>7.1f}ms ({len(index):,} keys)")

    total_time = time.perf_counter() - total_start
    timings['total'] = total_time * 1000

    if verbose:
        print(f"Total warm-up:    {timings['total']:>7.1f}ms")

    return total_time, timings


def get_version() -> str:
    """Get the library version."""
    return __version__


# =============================================================================
# Async API
# =============================================================================

async def lookup_async(text: str, timeout: float = 30.0) -> list:
    """
    Translate text without blocking the event loop.

    Concurrent calls share a single dictionary load.

    Args:
        text: Selected English text
        timeout: Maximum seconds to wait for the dictionary load

    Raises:
        IndexUnavailableError: If the dictionary cannot be loaded
        LoadTimeoutError: If the load exceeds timeout

    Example:
        >>> import asyncio
        >>> entries = asyncio.run(mandopop.lookup_async("ice cream"))
    """
    response = await get_service().lookup_async(text, timeout=timeout)
    return _entries_or_raise(response)


def shutdown():
    """
    Release the default service and its loader thread.

    Call this when your application is shutting down.
    """
    global _service
    with _service_lock:
        if _service is not None:
            _service.loader.shutdown()
            _service = None


# =============================================================================
# Module-level exports
# =============================================================================

__all__ = [
    # Sync API
    "lookup",
    "normalize",
    "render_pinyin",
    "warm_up",
    "get_version",
    "get_service",
    # Async API
    "lookup_async",
    "shutdown",
    # Exceptions
    "MandopopError",
    "IndexUnavailableError",
    "LoadTimeoutError",
    # Version
    "__version__",
]
