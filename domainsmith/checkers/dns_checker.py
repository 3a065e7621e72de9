"""DNS-based domain availability checker."""

import asyncio
import logging
from typing import Dict, List, Optional

import dns.asyncresolver
import dns.exception
import dns.name
import dns.resolver

from ..models import Availability

logger = logging.getLogger(__name__)


class DNSChecker:
    """Fast DNS-based availability pre-filter.

    A name without DNS records is only *likely* unregistered; WHOIS can
    confirm it (see ``WhoisChecker``).
    """

    def __init__(self, timeout: float = 1.5, max_concurrent: int = 20):
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self._semaphore: Optional[asyncio.Semaphore] = None

    def _resolver(self) -> dns.asyncresolver.Resolver:
        resolver = dns.asyncresolver.Resolver()
        resolver.timeout = self.timeout
        resolver.lifetime = self.timeout
        return resolver

    async def _resolve(self, domain: str) -> Availability:
        try:
            await self._resolver().resolve(domain, 'A')
            return Availability.REGISTERED  # Has records
        except dns.resolver.NXDOMAIN:
            return Availability.UNREGISTERED
        except dns.resolver.NoAnswer:
            return Availability.REGISTERED  # Exists without an A record
        except (dns.name.EmptyLabel, dns.name.LabelTooLong, dns.name.NameTooLong):
            return Availability.INVALID
        except dns.resolver.NoNameservers:
            return Availability.UNKNOWN
        except dns.exception.Timeout:
            return Availability.UNKNOWN
        except dns.exception.DNSException as e:
            logger.debug(f"DNS error for {domain}: {e}")
            return Availability.UNKNOWN

    async def check_async(self, domain: str) -> Availability:
        """Check one domain; a slow lookup resolves to ``unknown``."""
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)
        async with self._semaphore:
            try:
                return await asyncio.wait_for(self._resolve(domain), timeout=self.timeout)
            except asyncio.TimeoutError:
                return Availability.UNKNOWN

    async def check_batch_async(self, domains: List[str]) -> Dict[str, Availability]:
        """Check multiple domains concurrently."""
        self._semaphore = asyncio.Semaphore(self.max_concurrent)
        results = await asyncio.gather(*(self.check_async(d) for d in domains))
        return dict(zip(domains, results))

    def check_single(self, domain: str) -> Availability:
        return asyncio.run(self.check_async(domain))

    def check_batch(self, domains: List[str]) -> Dict[str, Availability]:
        """Synchronous wrapper for batch checking."""
        return asyncio.run(self.check_batch_async(domains))
