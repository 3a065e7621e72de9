"""Domain scoring system - explainable brandability heuristic."""

from dataclasses import dataclass, field, fields, replace
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..models import Candidate, DomainScore, ProcessedQuery
from ..utils.dictionary import WordDictionary, default_dictionary
from ..utils.text import (
    count_digits,
    count_hyphens,
    has_consonant_cluster,
    has_repeated_letters,
    is_plain_word,
    vowel_ratio,
)

DEFAULT_TLD_WEIGHTS = {
    'com': 20,
    'net': 10,
    'org': 10,
}

# Split positions probed from each end of a label when looking for two
# dictionary words. Mid-label splits of long labels are not probed.
DECOMPOSITION_WINDOW = 6


@dataclass(frozen=True)
class ScoringConfig:
    """Weights for every score component."""
    base_score: float = 100
    length_penalty_per_char: float = 1
    length_severity: float = 2
    hyphen_penalty: float = 5
    number_penalty: float = 5
    vowel_ratio_weight: float = 10
    low_vowel_ratio_threshold: float = 0.3
    low_vowel_penalty: float = 5
    consonant_cluster_penalty: float = 5
    repeated_letters_penalty: float = 5
    tld_weights: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_TLD_WEIGHTS))
    location_tld_bonus: float = 20
    dictionary_word: float = 15
    dictionary_substr: float = 5

    @classmethod
    def from_mapping(cls, overrides: Optional[Mapping[str, Any]] = None) -> "ScoringConfig":
        """Defaults with any subset of fields overridden."""
        return cls().override(overrides)

    def override(self, overrides: Optional[Mapping[str, Any]] = None) -> "ScoringConfig":
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"unknown scoring options: {', '.join(sorted(unknown))}")
        values = dict(overrides)
        if 'tld_weights' in values:
            values['tld_weights'] = {k.lower(): v for k, v in (values['tld_weights'] or {}).items()}
        return replace(self, **values)


class DomainScorer:
    """Scores domain labels against a config and a word dictionary."""

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        dictionary: Optional[WordDictionary] = None
    ):
        self.config = config or ScoringConfig()
        self._dictionary = dictionary
        self._is_word = lru_cache(maxsize=65536)(self._lookup_word)

    @property
    def dictionary(self) -> WordDictionary:
        if self._dictionary is None:
            self._dictionary = default_dictionary()
        return self._dictionary

    def _lookup_word(self, word: str) -> bool:
        return is_plain_word(word) and word in self.dictionary

    def is_dictionary_word(self, word: str) -> bool:
        return self._is_word(word.lower())

    def is_compound(self, label: str) -> bool:
        """Whether the label splits into two (or, hyphenated, more) dictionary words."""
        s = label.lower()

        parts = [p for p in s.split('-') if p]
        if len(parts) > 1 and all(self.is_dictionary_word(p) for p in parts):
            return True

        if '-' in s or not is_plain_word(s):
            return False

        n = len(s)
        early = range(2, min(DECOMPOSITION_WINDOW, n - 2) + 1)
        late = range(max(2, n - DECOMPOSITION_WINDOW), n - 1)
        for i in list(early) + list(late):
            if self.is_dictionary_word(s[:i]) and self.is_dictionary_word(s[i:]):
                return True
        return False

    def score(self, label: str, suffix: str, location_tld: Optional[str] = None) -> DomainScore:
        """Calculate the score and its component breakdown for ``label.suffix``."""
        cfg = self.config
        components: Dict[str, float] = {}
        total = 0.0

        def add(key: str, value: float):
            nonlocal total
            if value != 0:
                components[key] = value
            total += value

        add('base', cfg.base_score)

        length = len(label) + len(suffix or '')
        add('length_penalty', -(cfg.length_severity * length * cfg.length_penalty_per_char))
        add('hyphen_penalty', -count_hyphens(label) * cfg.hyphen_penalty)
        add('number_penalty', -count_digits(label) * cfg.number_penalty)

        ratio = vowel_ratio(label)
        add('vowel_ratio', ratio * cfg.vowel_ratio_weight)
        if ratio < cfg.low_vowel_ratio_threshold:
            add('low_vowel_penalty', -cfg.low_vowel_penalty)
        if has_consonant_cluster(label):
            add('consonant_cluster_penalty', -cfg.consonant_cluster_penalty)
        if has_repeated_letters(label):
            add('repeated_letters_penalty', -cfg.repeated_letters_penalty)

        tld = (suffix or '').lower()
        add('tld_weight', cfg.tld_weights.get(tld, 0))
        if location_tld and tld == location_tld.lower():
            add('location_bonus', cfg.location_tld_bonus)

        if self.is_dictionary_word(label):
            add('dict_word', cfg.dictionary_word)
        elif self.is_compound(label):
            add('dict_substr', cfg.dictionary_substr)

        return DomainScore(total=total, components=components)

    def score_domain_name(self, domain: str, location_tld: Optional[str] = None) -> DomainScore:
        """Score a full domain, treating everything after the first dot as the suffix."""
        label, suffix = split_domain(domain)
        return self.score(label, suffix, location_tld)

    def score_candidates(
        self,
        candidates: Iterable[Candidate],
        query: Optional[ProcessedQuery] = None,
        location_tld: Optional[str] = None
    ) -> List[Candidate]:
        """Score copies of ``candidates``, dropping unsupported suffixes."""
        supported = {t.lower() for t in query.ordered_tlds} if query else set()
        results = []
        for cand in candidates:
            if not cand.domain or not cand.suffix:
                continue
            suffix = cand.suffix.lower()
            if supported and suffix not in supported:
                continue
            label = cand.domain[:-(len(suffix) + 1)]
            if not label:
                continue
            results.append(replace(cand, suffix=suffix, score=self.score(label, suffix, location_tld)))
        return results


def split_domain(domain: str) -> Tuple[str, str]:
    """Split ``label.suffix`` on the first dot."""
    parts = domain.lower().split('.', 1)
    if len(parts) == 2:
        return parts[0], parts[1]
    return domain.lower(), ''


def score_domain(
    label: str,
    suffix: str,
    location_tld: Optional[str] = None,
    config: Optional[ScoringConfig] = None,
    dictionary: Optional[WordDictionary] = None
) -> DomainScore:
    """Score a single label/suffix pair."""
    return DomainScorer(config=config, dictionary=dictionary).score(label, suffix, location_tld)
