"""
Persistent index cache for mandopop.

Compiling the index from the JSON artifact on every cold start is slow,
so the loaded index is kept on disk as a binary trie. The cache has two
slots in one directory:

    version     the version tag the blob was written under
    index.dic   the serialized DictionaryIndex

A blob is only valid under the exact tag it was written with, which
invalidates the cache whenever the package version changes.
"""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

VERSION_FILENAME = "version"
DATA_FILENAME = "index.dic"


class IndexCacheStore:
    """Version-tagged two-slot store. Failures are logged, never raised."""

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)

    @property
    def version_path(self) -> Path:
        return self.cache_dir / VERSION_FILENAME

    @property
    def data_path(self) -> Path:
        return self.cache_dir / DATA_FILENAME

    def read_version(self) -> Optional[str]:
        """Get the stored version tag, or None if there is none."""
        try:
            return self.version_path.read_text(encoding='utf-8').strip()
        except FileNotFoundError:
            return None

    def read(self, version: str) -> Optional[bytes]:
        """
        Read the cached blob.

        Args:
            version: Version tag of the running package

        Returns:
            The blob if it was written under this version and is
            non-empty, otherwise None
        """
        try:
            stored = self.read_version()
            if stored != version:
                if stored is not None:
                    logger.info(f"Index cache is stale (cached {stored}, running {version})")
                return None

            data = self.data_path.read_bytes()
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read index cache at {self.cache_dir}: {e}")
            return None

        return data or None

    def write(self, version: str, data: bytes) -> bool:
        """
        Store a blob under a version tag.

        The tag is written last, so an interrupted write leaves no valid
        entry behind.

        Returns:
            True if both slots were written
        """
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            if self.version_path.exists():
                self.version_path.unlink()

            tmp_path = self.data_path.with_suffix('.tmp')
            tmp_path.write_bytes(data)
            tmp_path.replace(self.data_path)

            self.version_path.write_text(version, encoding='utf-8')
        except OSError as e:
            logger.warning(f"Failed to write index cache to {self.cache_dir}: {e}")
            return False

        return True

    def clear(self) -> None:
        for path in (self.version_path, self.data_path):
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Failed to remove {path}: {e}")
