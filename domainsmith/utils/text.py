"""Tokenization and label phonotactics helpers."""

import re
from typing import Iterable, List, TypeVar

T = TypeVar('T')

TOKEN_RE = re.compile(r'[a-z0-9]+')
CONSONANT_CLUSTER_RE = re.compile(r'[bcdfghjklmnpqrstvwxyz]{4,}', re.IGNORECASE)
REPEATED_LETTERS_RE = re.compile(r'([a-z])\1{2,}', re.IGNORECASE)

# Words that add nothing to a domain name
STOP_WORDS = frozenset({
    'a', 'an', 'and', 'are', 'as', 'at', 'be', 'by', 'for', 'from', 'in',
    'into', 'is', 'it', 'of', 'on', 'or', 'that', 'the', 'this', 'to',
    'with', 'was', 'were', 'will', 'your', 'our', 'its',
})

VOWELS = set('aeiou')
LETTERS = set('abcdefghijklmnopqrstuvwxyz')


def tokenize(query: str, drop_stop_words: bool = True) -> List[str]:
    """Split a raw query into lowercase alphanumeric tokens."""
    tokens = TOKEN_RE.findall((query or '').lower())
    if drop_stop_words:
        # A query made only of stop words keeps them
        filtered = [t for t in tokens if t not in STOP_WORDS]
        if filtered:
            return filtered
    return tokens


def unique(items: Iterable[T]) -> List[T]:
    """Deduplicate while preserving first-seen order."""
    return list(dict.fromkeys(items))


def vowel_ratio(text: str) -> float:
    letters = [c for c in text.lower() if c in LETTERS]
    if not letters:
        return 0.0
    return sum(1 for c in letters if c in VOWELS) / len(letters)


def has_consonant_cluster(text: str) -> bool:
    """Four or more consecutive consonants (y counts as a consonant)."""
    return bool(CONSONANT_CLUSTER_RE.search(text))


def has_repeated_letters(text: str) -> bool:
    """Same letter three or more times in a row."""
    return bool(REPEATED_LETTERS_RE.search(text))


def count_hyphens(text: str) -> int:
    return text.count('-')


def count_digits(text: str) -> int:
    return sum(1 for c in text if c.isdigit())


def is_plain_word(text: str) -> bool:
    return bool(text) and all(c in LETTERS for c in text)
