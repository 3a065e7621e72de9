"""Runs the generation strategies and merges their output."""

import asyncio
import logging
from typing import Iterable, List, Optional, Sequence

from ..models import Candidate, ProcessedQuery
from .affix_generator import AffixStrategy
from .alphabetical_generator import AlphabeticalStrategy
from .base import GenerationStrategy
from .permutation_generator import PermutationStrategy
from .tld_hack_generator import TldHackStrategy

logger = logging.getLogger(__name__)


def default_strategies() -> List[GenerationStrategy]:
    """Strategies in priority order; earlier wins on duplicate domains."""
    return [
        PermutationStrategy(),
        AlphabeticalStrategy(),
        AffixStrategy(),
        TldHackStrategy(),
    ]


class CandidateMerger:
    """Fans a query out to every strategy and merges the results.

    Strategies share nothing but the immutable query, so they run
    concurrently in worker threads. Merging always follows the strategy
    listing order, never completion order, which keeps the first-occurrence
    dedup deterministic.
    """

    def __init__(self, strategies: Optional[Sequence[GenerationStrategy]] = None, concurrent: bool = True):
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.concurrent = concurrent

    def _run_one(self, strategy: GenerationStrategy, query: ProcessedQuery) -> List[Candidate]:
        try:
            return strategy.generate(query)
        except Exception as e:  # a broken strategy must not sink the search
            logger.warning(f"Strategy {strategy.name.value} failed: {e}")
            return []

    async def _gather(self, query: ProcessedQuery) -> List[List[Candidate]]:
        if not self.concurrent:
            return [self._run_one(s, query) for s in self.strategies]
        tasks = [asyncio.to_thread(self._run_one, s, query) for s in self.strategies]
        return list(await asyncio.gather(*tasks))

    async def merge_async(self, query: ProcessedQuery, extra: Iterable[Candidate] = ()) -> List[Candidate]:
        """Generate, tag and deduplicate candidates (first occurrence wins)."""
        outputs = await self._gather(query)

        tagged: List[Candidate] = []
        for strategy, candidates in zip(self.strategies, outputs):
            tagged.extend(c.with_strategy(strategy.name) for c in candidates)
            logger.debug(f"{strategy.name.value}: {len(candidates)} candidates")
        tagged.extend(extra)

        return dedupe(tagged)

    def merge(self, query: ProcessedQuery, extra: Iterable[Candidate] = ()) -> List[Candidate]:
        """Synchronous wrapper for merging."""
        return asyncio.run(self.merge_async(query, extra))


def dedupe(candidates: Iterable[Candidate]) -> List[Candidate]:
    seen = set()
    results = []
    for candidate in candidates:
        if candidate.domain in seen:
            continue
        seen.add(candidate.domain)
        results.append(candidate)
    return results


def generate_candidates(query: ProcessedQuery) -> List[Candidate]:
    """Run the default strategies over ``query``."""
    return CandidateMerger().merge(query)
