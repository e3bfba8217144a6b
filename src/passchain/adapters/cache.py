"""Disk-based cache for raw provider payloads.

Stores one pickle per ``(kind, match_id)`` pair, e.g. the raw event
columns and the raw lineup dictionary of a match. Writes are atomic
(write to a temporary file, then rename) so an interrupted download
never leaves a truncated payload behind.
"""

from __future__ import annotations

import logging
import pickle
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PAYLOAD_KINDS: tuple[str, ...] = ("events", "lineups")


class PayloadCache:
    """Pickle-backed cache keyed by payload kind and match ID.

    Attributes:
        _cache_dir: Root directory where cache files are stored.
    """

    __slots__ = ("_cache_dir",)

    def __init__(self, cache_dir: Path) -> None:
        """Initialize the cache and ensure the directory exists.

        Args:
            cache_dir: Directory for storing cached pickle files.
        """
        self._cache_dir = cache_dir
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    @property
    def cache_dir(self) -> Path:
        """Root directory of the cache."""
        return self._cache_dir

    def cache_path(self, match_id: str, kind: str) -> Path:
        """Return the file path for a payload.

        Args:
            match_id: Unique identifier of the match.
            kind: Payload kind, one of :data:`PAYLOAD_KINDS`.

        Raises:
            ValueError: If *kind* is not a known payload kind.
        """
        if kind not in PAYLOAD_KINDS:
            msg = f"kind must be one of {PAYLOAD_KINDS}, got {kind!r}"
            raise ValueError(msg)
        return self._cache_dir / f"{kind}_{match_id}.pkl"

    def exists(self, match_id: str, kind: str) -> bool:
        """Check whether a payload is cached."""
        return self.cache_path(match_id, kind).is_file()

    def get(self, match_id: str, kind: str) -> dict[str, Any] | None:
        """Load a cached payload, or ``None`` on a cache miss.

        ``Any`` is used because raw provider payloads have no fixed
        schema.
        """
        path = self.cache_path(match_id, kind)
        if not path.is_file():
            logger.debug("Cache miss for %s of match %s", kind, match_id)
            return None

        logger.debug("Cache hit for %s of match %s", kind, match_id)
        with path.open("rb") as f:
            result: dict[str, Any] = pickle.load(f)  # noqa: S301
        return result

    def put(self, match_id: str, kind: str, data: dict[str, Any]) -> None:
        """Save a payload using an atomic write.

        Args:
            match_id: Unique identifier of the match.
            kind: Payload kind, one of :data:`PAYLOAD_KINDS`.
            data: Raw provider payload to cache.
        """
        path = self.cache_path(match_id, kind)
        fd, tmp_path_str = tempfile.mkstemp(dir=self._cache_dir, suffix=".tmp")
        tmp_path = Path(tmp_path_str)
        try:
            with open(fd, "wb") as f:
                pickle.dump(data, f, protocol=pickle.HIGHEST_PROTOCOL)
            tmp_path.replace(path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Cached %s of match %s at %s", kind, match_id, path)
