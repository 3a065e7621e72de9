"""Alphabetically ordered token combinations."""

from itertools import islice
from typing import List

from ..models import Candidate, ProcessedQuery, Strategy
from ..utils.text import unique
from .base import MAX_BASE_LABELS, GenerationStrategy, iter_joined, pair_with_tlds, token_variants


class AlphabeticalStrategy(GenerationStrategy):
    """Joins every token (with synonyms) after sorting the tokens."""

    name = Strategy.ALPHABETICAL

    def generate(self, query: ProcessedQuery) -> List[Candidate]:
        if len(query.tokens) < 2 or not query.ordered_tlds:
            return []

        variants = token_variants(query)
        ordered = [words for _, words in sorted(zip(query.tokens, variants), key=lambda p: p[0])]
        labels = unique(islice(iter_joined(ordered), MAX_BASE_LABELS))
        return pair_with_tlds(labels, query.ordered_tlds)
