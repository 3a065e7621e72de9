"""Shared pieces of the generation strategies."""

from itertools import chain, combinations, islice, product
from typing import Iterable, Iterator, List

from ..models import Candidate, ProcessedQuery, Strategy
from ..utils.text import unique

MAX_BASE_LABELS = 500


class GenerationStrategy:
    """Turns a processed query into candidate domains.

    Implementations must be pure functions of the query so that several
    strategies can run at the same time.
    """

    name: Strategy

    def generate(self, query: ProcessedQuery) -> List[Candidate]:
        raise NotImplementedError


def token_variants(query: ProcessedQuery) -> List[List[str]]:
    """For each token, the token followed by its synonyms."""
    variants = []
    for token in query.tokens:
        words = [token]
        for word in query.synonyms.get(token, ()) or ():
            # Skip malformed entries
            if isinstance(word, str) and word:
                words.append(word.lower())
        variants.append(unique(words))
    return variants


def iter_joined(lists: List[List[str]], sep: str = '') -> Iterator[str]:
    """Lazy cross product of word lists, joined with ``sep``."""
    for parts in product(*lists):
        yield sep.join(parts)


def iter_pairs(variants: List[List[str]]) -> Iterator[str]:
    """Concatenations of every token-position pair i < j, in position order."""
    for i, j in combinations(range(len(variants)), 2):
        yield from iter_joined([variants[i], variants[j]])


def iter_base_labels(query: ProcessedQuery, cap: int = MAX_BASE_LABELS) -> Iterator[str]:
    """Distinct base labels shared by the affix and TLD-hack strategies.

    Up to two tokens this is the plain cross product in token order. Longer
    queries would explode combinatorially, so they contribute every single
    variant plus pairwise joins instead.
    """
    variants = token_variants(query)
    if not variants:
        return iter(())

    if len(variants) <= 2:
        source: Iterable[str] = iter_joined(variants)
    else:
        singles = (word for words in variants for word in words)
        source = chain(singles, iter_pairs(variants))

    return islice(_distinct(source), cap)


def pair_with_tlds(labels: Iterable[str], tlds: Iterable[str]) -> List[Candidate]:
    tlds = list(tlds)
    return [Candidate(domain=f"{label}.{tld}", suffix=tld) for label in labels for tld in tlds]


def _distinct(items: Iterable[str]) -> Iterator[str]:
    seen = set()
    for item in items:
        if item and item not in seen:
            seen.add(item)
            yield item
