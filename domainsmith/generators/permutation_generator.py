"""Permutations of query tokens and their synonyms."""

import random
from itertools import combinations
from typing import Iterator, List

from ..models import Candidate, ProcessedQuery, Strategy
from .base import GenerationStrategy, token_variants


class PermutationStrategy(GenerationStrategy):
    """Generates standalone and pairwise-joined labels in both orders.

    Multi-token queries never take the full cross product of every token;
    instead each pair of token positions is joined (plain and, optionally,
    hyphenated) so the label count grows quadratically rather than
    exponentially. Generation stops as soon as ``query.limit`` distinct
    domains exist.
    """

    name = Strategy.PERMUTATION

    def _iter_labels(self, query: ProcessedQuery, variants: List[List[str]]) -> Iterator[str]:
        for words in variants:
            yield from words

        if len(variants) < 2:
            return

        pairs = list(combinations(range(len(variants)), 2))
        # Shuffle pair order to avoid favouring the first tokens, seeded by
        # the query so output stays reproducible
        random.Random('|'.join(query.tokens)).shuffle(pairs)

        for i, j in pairs:
            for first in variants[i]:
                for second in variants[j]:
                    yield first + second
                    yield second + first
                    if query.include_hyphenated:
                        yield f"{first}-{second}"
                        yield f"{second}-{first}"

    def generate(self, query: ProcessedQuery) -> List[Candidate]:
        tlds = list(query.ordered_tlds)
        if not tlds or not query.tokens:
            return []

        variants = token_variants(query)
        results: List[Candidate] = []
        seen = set()

        for label in self._iter_labels(query, variants):
            for tld in tlds:
                if len(results) >= query.limit:
                    return results
                domain = f"{label}.{tld}"
                if domain in seen:
                    continue
                seen.add(domain)
                results.append(Candidate(domain=domain, suffix=tld))

        return results
