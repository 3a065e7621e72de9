"""Domain hacks where the TLD completes the word (brandly -> brand.ly)."""

from typing import List

from ..models import Candidate, ProcessedQuery, Strategy
from .base import GenerationStrategy, iter_base_labels


class TldHackStrategy(GenerationStrategy):
    """Splices a dot into base labels whose ending matches a TLD."""

    name = Strategy.TLD_HACK

    def generate(self, query: ProcessedQuery) -> List[Candidate]:
        tlds = [t.lower() for t in query.ordered_tlds]
        if not tlds:
            return []

        results: List[Candidate] = []
        seen = set()

        for label in iter_base_labels(query):
            if '.' in label:
                continue
            lower = label.lower()
            for tld in tlds:
                if not lower.endswith(tld):
                    continue
                head = lower[:-len(tld)]
                # Must leave a usable label before the dot
                if not head or head.endswith('-'):
                    continue
                domain = f"{head}.{tld}"
                if domain in seen:
                    continue
                seen.add(domain)
                results.append(Candidate(domain=domain, suffix=tld))

        return results
