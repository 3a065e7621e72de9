"""Combined availability checking service."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from ..models import Availability, Candidate
from ..utils.cache import ResultCache
from .dns_checker import DNSChecker
from .whois_checker import WhoisChecker

logger = logging.getLogger(__name__)

# Statuses worth remembering between runs
DEFINITIVE = {Availability.UNREGISTERED, Availability.REGISTERED, Availability.INVALID}


@dataclass
class AvailabilityResult:
    """Candidates split by availability status."""
    available: List[Candidate] = field(default_factory=list)
    unavailable: List[Candidate] = field(default_factory=list)


class AvailabilityService:
    """Unified service for checking domain availability.

    Every lookup is time-bounded: a domain whose check does not finish in
    time is reported as ``unknown`` instead of holding up the search.
    """

    def __init__(
        self,
        dns_timeout: float = 1.5,
        whois_timeout: float = 10.0,
        max_concurrent: int = 20,
        rate_limit_delay: float = 1.5,
        verify_with_whois: bool = False,
        use_cache: bool = True,
        cache_file: str = "data/results/checked_cache.json",
        dns_checker: Optional[DNSChecker] = None,
        whois_checker: Optional[WhoisChecker] = None
    ):
        self.dns_checker = dns_checker or DNSChecker(timeout=dns_timeout, max_concurrent=max_concurrent)
        self.whois_checker = whois_checker or WhoisChecker(timeout=whois_timeout, rate_limit_delay=rate_limit_delay)
        self.whois_timeout = whois_timeout
        self.verify_with_whois = verify_with_whois
        self.cache = ResultCache(cache_file=cache_file) if use_cache else None

    async def _verify(self, domain: str) -> Availability:
        """Confirm a DNS-unregistered domain with WHOIS.

        An inconclusive WHOIS answer keeps the DNS verdict; a lookup that
        runs out of time makes the domain ``unknown``. The rate-limit pause
        before each request is not counted against ``whois_timeout``.
        """
        budget = self.whois_timeout + getattr(self.whois_checker, 'rate_limit_delay', 0.0)
        try:
            status = await asyncio.wait_for(
                asyncio.to_thread(self.whois_checker.check_single, domain),
                timeout=budget
            )
        except asyncio.TimeoutError:
            return Availability.UNKNOWN
        if status is Availability.UNKNOWN:
            return Availability.UNREGISTERED
        return status

    async def check_batch_async(self, domains: List[str]) -> Dict[str, Availability]:
        """Resolve a status for every domain (``unknown`` when undetermined)."""
        normalized = [d.lower() for d in domains]
        results: Dict[str, Availability] = {}
        to_check = []

        # Check cache first
        for domain in normalized:
            cached = self.cache.get_status(domain) if self.cache else None
            if cached is not None:
                results[domain] = cached
            else:
                to_check.append(domain)

        if to_check:
            try:
                dns_results = await self.dns_checker.check_batch_async(to_check)
            except Exception as e:  # provider failure: whole batch unknown
                logger.warning(f"Availability batch failed: {e}")
                dns_results = {}

            fresh: Dict[str, Availability] = {}
            for domain in to_check:
                fresh[domain] = dns_results.get(domain, Availability.UNKNOWN)

            if self.verify_with_whois:
                # One at a time: WHOIS servers rate-limit per client
                for domain in [d for d, s in fresh.items() if s is Availability.UNREGISTERED]:
                    fresh[domain] = await self._verify(domain)

            if self.cache:
                await asyncio.to_thread(
                    self.cache.set_batch,
                    {d: s for d, s in fresh.items() if s in DEFINITIVE},
                    'whois' if self.verify_with_whois else 'dns'
                )
            results.update(fresh)

        return {domain: results.get(domain, Availability.UNKNOWN) for domain in normalized}

    def check_batch(self, domains: List[str]) -> Dict[str, Availability]:
        """Synchronous wrapper for batch checking."""
        return asyncio.run(self.check_batch_async(domains))


async def annotate_availability(candidates: List[Candidate], service: AvailabilityService) -> AvailabilityResult:
    """Annotate copies of ``candidates`` and split them by availability."""
    if not candidates:
        return AvailabilityResult()

    try:
        statuses = await service.check_batch_async([c.domain for c in candidates])
    except Exception as e:  # provider failure leaves everything unknown
        logger.warning(f"Availability check failed: {e}")
        statuses = {}

    result = AvailabilityResult()
    for cand in candidates:
        status = statuses.get(cand.domain.lower(), Availability.UNKNOWN)
        annotated = replace(cand, availability=status)
        if annotated.availability.is_available is False:
            result.unavailable.append(annotated)
        else:
            result.available.append(annotated)
    return result
