"""Prefix and suffix attachment to base labels."""

from typing import List

from ..models import Candidate, ProcessedQuery, Strategy
from .base import GenerationStrategy, iter_base_labels


class AffixStrategy(GenerationStrategy):
    """Generates ``prefix+label`` and ``label+suffix`` variations."""

    name = Strategy.AFFIX

    def generate(self, query: ProcessedQuery) -> List[Candidate]:
        prefixes = [p.lower() for p in query.prefixes if isinstance(p, str) and p]
        suffixes = [s.lower() for s in query.suffixes if isinstance(s, str) and s]
        tlds = list(query.ordered_tlds)
        if (not prefixes and not suffixes) or not tlds:
            return []

        results: List[Candidate] = []
        for base in iter_base_labels(query):
            labels = [pre + base for pre in prefixes] + [base + suf for suf in suffixes]
            for label in labels:
                for tld in tlds:
                    results.append(Candidate(domain=f"{label}.{tld}", suffix=tld))

        return results
