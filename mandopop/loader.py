"""
Index loading for mandopop.

The dictionary index is loaded once per process and then shared by all
lookups. IndexLoader makes that load single-flight: the first caller
starts it on a worker thread and every caller, concurrent or later,
receives the same Future. A failed load clears the pending Future so
the next caller starts a fresh attempt.

Load order:
    1. the local cache, if its version tag matches the running version
    2. the index artifact (JSON, or a binary .dic trie), after which
       the cache is refreshed
"""

import asyncio
import concurrent.futures
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from mandopop import IndexUnavailableError, LoadTimeoutError, __version__
from mandopop.cache import IndexCacheStore
from mandopop.config import get_index_path
from mandopop.dictionary import DictionaryIndex

logger = logging.getLogger(__name__)

BINARY_SUFFIX = ".dic"


class IndexLoader:
    """
    Owns the process-wide DictionaryIndex.

    Args:
        source_path: Index artifact to load on a cache miss
        store: Persistent cache, or None to always load the artifact
        version: Cache version tag (defaults to the package version)
        executor: Executor to run loads on (a private single worker
            thread by default)
    """

    def __init__(
        self,
        source_path: Optional[Path] = None,
        store: Optional[IndexCacheStore] = None,
        version: Optional[str] = None,
        executor: Optional[concurrent.futures.Executor] = None,
    ):
        self.source_path = Path(source_path) if source_path is not None else get_index_path()
        self.store = store
        self.version = version or __version__
        self.load_count = 0

        self._executor = executor
        self._owns_executor = executor is None
        self._lock = threading.Lock()
        self._index: Optional[DictionaryIndex] = None
        self._pending: Optional[Future] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def index(self) -> Optional[DictionaryIndex]:
        """The loaded index, or None."""
        return self._index

    @property
    def is_ready(self) -> bool:
        return self._index is not None

    @property
    def is_loading(self) -> bool:
        return self._pending is not None

    def reset(self) -> None:
        """Forget the loaded index. An in-flight load is left alone."""
        with self._lock:
            self._index = None

    def shutdown(self) -> None:
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def get_or_load(self) -> Future:
        """
        Get a Future for the index, starting a load if none is running.

        Returns:
            A Future resolving to the DictionaryIndex, or failing with
            IndexUnavailableError. The Future is shared, and callers
            cannot cancel it.
        """
        with self._lock:
            if self._index is not None:
                done: Future = Future()
                done.set_result(self._index)
                return done

            if self._pending is not None:
                return self._pending

            future: Future = Future()
            future.set_running_or_notify_cancel()
            self._pending = future

            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mandopop-load")
            executor = self._executor

        try:
            executor.submit(self._run_load, future)
        except RuntimeError as e:
            logger.error(f"Failed to start dictionary load: {e}")
            error = IndexUnavailableError(f"Cannot start dictionary load: {e}")
            error.__cause__ = e
            with self._lock:
                self._pending = None
            future.set_exception(error)
        return future

    def load(self, timeout: Optional[float] = None) -> DictionaryIndex:
        """
        Load the index, blocking until it is available.

        Giving up on a timeout does not affect the load itself or other
        waiters.

        Raises:
            IndexUnavailableError: If the load failed
            LoadTimeoutError: If timeout elapsed first
        """
        future = self.get_or_load()
        try:
            return future.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            raise LoadTimeoutError(f"Dictionary load did not finish within {timeout}s")

    async def load_async(self, timeout: Optional[float] = None) -> DictionaryIndex:
        """Await the shared load from asyncio code."""
        wrapped = asyncio.wrap_future(self.get_or_load())
        try:
            return await asyncio.wait_for(asyncio.shield(wrapped), timeout=timeout)
        except asyncio.TimeoutError:
            raise LoadTimeoutError(f"Dictionary load did not finish within {timeout}s")

    def _run_load(self, future: Future) -> None:
        try:
            index = self._load_index()
        except Exception as e:
            logger.error(f"Failed to load dictionary: {e}")
            if isinstance(e, IndexUnavailableError):
                error = e
            else:
                error = IndexUnavailableError(str(e))
                error.__cause__ = e
            with self._lock:
                self._pending = None
            future.set_exception(error)
            return

        with self._lock:
            self._index = index
            self._pending = None
        future.set_result(index)

    def _load_index(self) -> DictionaryIndex:
        self.load_count += 1
        start = time.perf_counter()

        index = self._read_cache()
        if index is not None:
            logger.info(f"Dictionary loaded from cache ({len(index):,} keys, "
                        f"{(time.perf_counter() - start) * 1000:.1f}ms)")
            return index

        index = self._read_source()
        logger.info(f"Dictionary loaded from {self.source_path} ({len(index):,} keys, "
                    f"{(time.perf_counter() - start) * 1000:.1f}ms)")

        if self.store is not None:
            self.store.write(self.version, index.to_bytes())

        return index

    def _read_cache(self) -> Optional[DictionaryIndex]:
        if self.store is None:
            return None

        data = self.store.read(self.version)
        if data is None:
            return None

        try:
            return DictionaryIndex.from_bytes(data)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable index cache: {e}")
            return None

    def _read_source(self) -> DictionaryIndex:
        path = self.source_path
        if not path.exists():
            raise IndexUnavailableError(
                f"Dictionary not found at {path}. "
                "Run 'mandopop-build' to build it."
            )

        if path.suffix == BINARY_SUFFIX:
            return DictionaryIndex.load(path)
        return DictionaryIndex.load_json(path)
