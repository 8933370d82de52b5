"""Disk-backed TTL cache for Financial Datasets API payloads.

Keys are canonical ``fds://`` URIs (see :func:`munger_mcp.utils.validators.cache_uri`).
Only raw upstream JSON is kept here; analyses and memos are always recomputed.
"""

import hashlib
import json
import logging
import os
from datetime import datetime
from typing import Any

import diskcache
import pytz

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = ".cache/financial_datasets"
DEFAULT_TTL_SECONDS = 3600


class ResponseCache:
    """Payload store keyed by request URI, with a fingerprint per entry."""

    def __init__(self, cache_dir: str | None = None, ttl: int | None = None):
        directory = cache_dir or os.environ.get("CACHE_DIR", DEFAULT_CACHE_DIR)
        self.cache: diskcache.Cache = diskcache.Cache(directory)
        self.ttl = ttl if ttl is not None else int(os.environ.get("CACHE_TTL", str(DEFAULT_TTL_SECONDS)))

    def store(self, uri: str, payload: dict[str, Any], ttl: int | None = None) -> str:
        """
        Keep a decoded response body until its TTL runs out.

        Args:
            uri: Canonical request URI
            payload: Decoded JSON body
            ttl: Seconds to keep the entry (default: the cache's TTL)

        Returns:
            The URI, for chaining into log lines
        """
        body = json.dumps(payload, sort_keys=True).encode("utf-8")
        self.cache.set(
            uri,
            {
                "payload": payload,
                "size_bytes": len(body),
                "hash": hashlib.sha256(body).hexdigest()[:16],
                "stored_at": datetime.now(pytz.UTC).isoformat(),
            },
            expire=self.ttl if ttl is None else ttl,
        )
        logger.debug(f"cached {uri} ({len(body)} bytes)")
        return uri

    def get(self, uri: str) -> dict[str, Any] | None:
        """Cached body for a URI, or None when absent or expired."""
        entry = self.cache.get(uri)
        return entry["payload"] if entry else None

    def get_metadata(self, uri: str) -> dict[str, Any] | None:
        """Size, fingerprint and store time of an entry, without the body."""
        entry = self.cache.get(uri)
        if not entry:
            return None
        return {key: entry[key] for key in ("size_bytes", "hash", "stored_at")}

    def exists(self, uri: str) -> bool:
        return uri in self.cache

    def clear(self) -> None:
        self.cache.clear()


def _build_default_cache() -> ResponseCache | None:
    if os.environ.get("CACHE_ENABLED", "1").strip().lower() in ("0", "false", "no"):
        return None
    return ResponseCache()


# Process-wide cache; None when CACHE_ENABLED is off. Read at call time by the client.
response_cache = _build_default_cache()
