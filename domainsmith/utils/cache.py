"""Caching utilities for domain availability results."""

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..models import Availability

logger = logging.getLogger(__name__)


class ResultCache:
    """Simple file-based cache for availability statuses."""

    def __init__(self, cache_file: str = "data/results/checked_cache.json", ttl_hours: int = 24):
        self.cache_file = Path(cache_file)
        self.ttl = timedelta(hours=ttl_hours)
        self._cache: Dict[str, Any] = {}
        self._load()

    def _load(self):
        """Load cache from file."""
        if self.cache_file.exists():
            try:
                with open(self.cache_file, 'r') as f:
                    self._cache = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Ignoring unreadable cache {self.cache_file}: {e}")
                self._cache = {}

    def _save(self):
        """Save cache to file."""
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.cache_file, 'w') as f:
            json.dump(self._cache, f, indent=2)

    def _expired(self, entry: Dict[str, Any], now: datetime) -> bool:
        try:
            cached_time = datetime.fromisoformat(entry['checked_at'])
        except (KeyError, TypeError, ValueError):
            return True
        return now - cached_time > self.ttl

    def get(self, domain: str) -> Optional[Dict[str, Any]]:
        """Get cached entry if not expired."""
        entry = self._cache.get(domain)
        if entry is None:
            return None

        if self._expired(entry, datetime.now()):
            del self._cache[domain]
            return None

        return entry

    def get_status(self, domain: str) -> Optional[Availability]:
        entry = self.get(domain)
        if entry is None:
            return None
        try:
            return Availability(entry.get('status'))
        except ValueError:
            return None

    def set(self, domain: str, status: Availability, method: str = "dns"):
        """Cache a domain check result."""
        self._cache[domain] = {
            'status': status.value,
            'method': method,
            'checked_at': datetime.now().isoformat()
        }
        self._save()

    def set_batch(self, results: Mapping[str, Availability], method: str = "dns"):
        """Cache multiple results at once."""
        if not results:
            return
        now = datetime.now().isoformat()
        for domain, status in results.items():
            self._cache[domain] = {
                'status': status.value,
                'method': method,
                'checked_at': now
            }
        self._save()

    def clear_expired(self) -> int:
        """Remove expired entries."""
        now = datetime.now()
        expired = [domain for domain, entry in self._cache.items() if self._expired(entry, now)]

        for domain in expired:
            del self._cache[domain]

        if expired:
            self._save()

        return len(expired)

    def stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        available = sum(1 for e in self._cache.values() if e.get('status') == Availability.UNREGISTERED.value)
        return {
            'total_entries': len(self._cache),
            'available_domains': available,
            'unavailable_domains': len(self._cache) - available
        }
