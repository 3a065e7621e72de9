"""WHOIS-based domain availability checker."""

import logging
import re
import threading
import time

import whois
from whois.exceptions import WhoisDomainNotFoundError

from ..models import Availability

logger = logging.getLogger(__name__)


class WhoisChecker:
    """WHOIS-based domain availability verification.

    Lookups are serialized: one request at a time, spaced by the rate limit,
    no matter how many threads call ``check_single``.
    """

    # Regexes matched against the lowercased python-whois error, in this order
    RATE_LIMIT_PATTERNS = [r'rate limit', r'too many requests', r'quota exceeded', r'try again later', r'\bblocked\b']
    UNSUPPORTED_PATTERNS = [r'unknown tld', r'no whois server', r'not supported']
    NOT_FOUND_PATTERNS = [
        r'no match', r'not found', r'no entries', r'no data found', r'not registered',
        r'(?<!not )\bavailable\b',
    ]
    REGISTERED_PATTERNS = [r'\bregistered\b', r'\bexists\b', r'\bunavailable\b', r'not available']

    def __init__(self, timeout: float = 10.0, rate_limit_delay: float = 1.5, backoff_delay: float = 5.0):
        self.timeout = timeout
        self.rate_limit_delay = rate_limit_delay
        self.backoff_delay = backoff_delay
        self._last_request_time = 0.0
        self._consecutive_errors = 0
        self._lock = threading.Lock()

    @staticmethod
    def _matches(patterns, message: str) -> bool:
        return any(re.search(p, message) for p in patterns)

    def _wait_for_rate_limit(self):
        """Ensure we don't exceed rate limits."""
        # Add extra delay if we've been hitting errors
        extra_delay = min(self._consecutive_errors * 2, 30)
        total_delay = self.rate_limit_delay + extra_delay

        elapsed = time.time() - self._last_request_time
        if elapsed < total_delay:
            time.sleep(total_delay - elapsed)
        self._last_request_time = time.time()

    def check_single(self, domain: str, retry: bool = True) -> Availability:
        """Look the domain up in WHOIS.

        Returns ``unregistered``, ``registered``, ``unsupported`` (no WHOIS
        service for the TLD) or ``unknown``.
        """
        with self._lock:
            return self._lookup(domain, retry)

    def _lookup(self, domain: str, retry: bool) -> Availability:
        self._wait_for_rate_limit()

        try:
            w = whois.whois(domain)
            self._consecutive_errors = 0
            # No domain_name in the record means nobody holds it
            if w.domain_name is None:
                return Availability.UNREGISTERED
            return Availability.REGISTERED

        except WhoisDomainNotFoundError:
            self._consecutive_errors = 0
            return Availability.UNREGISTERED
        except Exception as e:  # python-whois reports most outcomes as errors
            error_msg = str(e).lower()

            if self._matches(self.RATE_LIMIT_PATTERNS, error_msg):
                self._consecutive_errors += 1
                if retry:
                    time.sleep(self.backoff_delay)
                    return self._lookup(domain, retry=False)
                return Availability.UNKNOWN

            if self._matches(self.UNSUPPORTED_PATTERNS, error_msg):
                return Availability.UNSUPPORTED

            if self._matches(self.NOT_FOUND_PATTERNS, error_msg):
                self._consecutive_errors = 0
                return Availability.UNREGISTERED

            if self._matches(self.REGISTERED_PATTERNS, error_msg):
                self._consecutive_errors = 0
                return Availability.REGISTERED

            logger.debug(f"WHOIS error for {domain}: {e}")
            self._consecutive_errors += 1
            return Availability.UNKNOWN
