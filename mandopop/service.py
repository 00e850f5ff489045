"""
Lookup service: the request/response boundary consumed by front ends.

A request is one selected string. The response says whether entries
were found, and otherwise why not:

    found        entries for the selection
    no_match     the index is loaded and nothing matches
    not_ready    the index is still loading (caller didn't wait)
    unavailable  the index failed to load
    disabled     lookups are turned off in settings
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from mandopop import IndexUnavailableError, LoadTimeoutError
from mandopop.config import Settings
from mandopop.dictionary import DictionaryIndex, LexiconEntry
from mandopop.loader import IndexLoader
from mandopop.resolver import resolve_with_key

FOUND = "found"
NO_MATCH = "no_match"
NOT_READY = "not_ready"
UNAVAILABLE = "unavailable"
DISABLED = "disabled"


@dataclass(slots=True)
class LookupResponse:
    """
    Result of one lookup.

    Attributes:
        status: One of FOUND, NO_MATCH, NOT_READY, UNAVAILABLE, DISABLED
        text: The selection as received
        entries: Ranked entries (empty unless status is FOUND)
        key: The candidate key that matched
        message: Error detail for UNAVAILABLE
    """
    status: str
    text: str
    entries: Tuple[LexiconEntry, ...] = field(default_factory=tuple)
    key: Optional[str] = None
    message: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status == FOUND

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "text": self.text,
            "key": self.key,
            "entries": [e.to_dict() for e in self.entries],
            "message": self.message,
        }


class LookupService:
    """
    Resolves selections against the loader's shared index.

    Args:
        loader: Owner of the process-wide index
        settings: User settings (only `enabled` is consulted here)
    """

    def __init__(self, loader: IndexLoader, settings: Optional[Settings] = None):
        self.loader = loader
        self.settings = settings if settings is not None else Settings()

    @property
    def is_ready(self) -> bool:
        return self.loader.is_ready

    def lookup(
        self,
        text: str,
        wait: bool = True,
        timeout: Optional[float] = None,
        max_entries: Optional[int] = None,
    ) -> LookupResponse:
        """
        Look up a selection.

        Args:
            text: Selected text
            wait: Block until the index is loaded. If False and the index
                isn't ready, a load is started and NOT_READY returned.
            timeout: Maximum seconds to wait for the load
            max_entries: Truncate the returned entries
        """
        if not self.settings.enabled:
            return LookupResponse(DISABLED, text)

        index = self.loader.index
        if index is None:
            if not wait:
                self.loader.get_or_load()
                return LookupResponse(NOT_READY, text)
            try:
                index = self.loader.load(timeout=timeout)
            except LoadTimeoutError:
                return LookupResponse(NOT_READY, text)
            except IndexUnavailableError as e:
                return LookupResponse(UNAVAILABLE, text, message=str(e))

        return self._resolve(text, index, max_entries)

    async def lookup_async(
        self,
        text: str,
        timeout: Optional[float] = None,
        max_entries: Optional[int] = None,
    ) -> LookupResponse:
        """Look up a selection, awaiting the index load without blocking the loop."""
        if not self.settings.enabled:
            return LookupResponse(DISABLED, text)

        try:
            index = await self.loader.load_async(timeout=timeout)
        except LoadTimeoutError:
            return LookupResponse(NOT_READY, text)
        except IndexUnavailableError as e:
            return LookupResponse(UNAVAILABLE, text, message=str(e))

        return self._resolve(text, index, max_entries)

    @staticmethod
    def _resolve(
        text: str,
        index: DictionaryIndex,
        max_entries: Optional[int],
    ) -> LookupResponse:
        key, entries = resolve_with_key(text, index)
        if entries is None:
            return LookupResponse(NO_MATCH, text)

        if max_entries is not None:
            entries = entries[:max_entries]

        return LookupResponse(FOUND, text, entries=entries, key=key)
