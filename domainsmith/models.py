"""Core data types shared by the generation, scoring and ranking stages."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple, Mapping


class Strategy(str, Enum):
    """Originating generation strategy of a candidate."""
    PERMUTATION = "permutation"
    ALPHABETICAL = "alphabetical"
    AFFIX = "affix"
    TLD_HACK = "tld_hack"
    ALTERNATE = "alternate"  # external/AI candidate sources


class Availability(str, Enum):
    """Registration status reported by an availability provider."""
    UNREGISTERED = "unregistered"
    REGISTERED = "registered"
    UNSUPPORTED = "unsupported"
    INVALID = "invalid"
    UNKNOWN = "unknown"

    @property
    def is_available(self) -> Optional[bool]:
        if self is Availability.UNREGISTERED:
            return True
        if self in (Availability.REGISTERED, Availability.INVALID):
            return False
        return None


# Closed set of score components, in computation order
SCORE_COMPONENTS = (
    'base',
    'length_penalty',
    'hyphen_penalty',
    'number_penalty',
    'vowel_ratio',
    'low_vowel_penalty',
    'consonant_cluster_penalty',
    'repeated_letters_penalty',
    'tld_weight',
    'location_bonus',
    'dict_word',
    'dict_substr',
    'availability_demand',
)


@dataclass(frozen=True)
class DomainScore:
    """Total score plus the named adjustments that produced it."""
    total: float = 0.0
    components: Mapping[str, float] = field(default_factory=dict)

    def with_component(self, name: str, value: float) -> "DomainScore":
        """Return a new score with ``value`` added to ``name`` and the total."""
        if name not in SCORE_COMPONENTS:
            raise ValueError(f"unknown score component: {name}")
        components = dict(self.components)
        if value != 0:
            components[name] = components.get(name, 0) + value
        return DomainScore(total=self.total + value, components=components)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': round(self.total, 2),
            'components': {k: round(v, 2) for k, v in self.components.items()},
        }


@dataclass(frozen=True)
class Candidate:
    """A generated domain, optionally tagged, scored and annotated."""
    domain: str
    suffix: str
    strategy: Optional[Strategy] = None
    score: Optional[DomainScore] = None
    availability: Availability = Availability.UNKNOWN

    @property
    def label(self) -> str:
        if self.suffix and self.domain.endswith('.' + self.suffix):
            return self.domain[:-(len(self.suffix) + 1)]
        return self.domain

    @property
    def total(self) -> float:
        return self.score.total if self.score else 0.0

    def with_strategy(self, strategy: Strategy) -> "Candidate":
        return replace(self, strategy=strategy)

    def to_dict(self, debug: bool = False) -> Dict[str, Any]:
        result = {
            'domain': self.domain,
            'suffix': self.suffix,
            'score': self.score.to_dict() if self.score else None,
            'strategy': self.strategy.value if self.strategy else None,
            'availability': self.availability.value,
        }
        if debug:
            result['label'] = self.label
            result['is_available'] = self.availability.is_available
        return result


@dataclass(frozen=True)
class ProcessedQuery:
    """Normalized, read-only unit of work handed to every strategy."""
    query: str
    tokens: Tuple[str, ...]
    synonyms: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    ordered_tlds: Tuple[str, ...] = ()
    include_hyphenated: bool = False
    limit: int = 50
    prefixes: Tuple[str, ...] = ()
    suffixes: Tuple[str, ...] = ()
    check_availability: bool = False

    @classmethod
    def build(
        cls,
        tokens: List[str],
        synonyms: Optional[Mapping[str, List[str]]] = None,
        ordered_tlds: Optional[List[str]] = None,
        query: Optional[str] = None,
        **kwargs
    ) -> "ProcessedQuery":
        """Convenience constructor accepting plain lists."""
        synonyms = synonyms or {}
        for key in ('prefixes', 'suffixes'):
            if key in kwargs:
                kwargs[key] = tuple(kwargs[key])
        return cls(
            query=query if query is not None else ' '.join(tokens),
            tokens=tuple(tokens),
            synonyms={t: tuple(words or ()) for t, words in synonyms.items()},
            ordered_tlds=tuple(ordered_tlds or ()),
            **kwargs
        )

    @property
    def final_query(self) -> str:
        return ''.join(self.tokens)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'query': self.query,
            'tokens': list(self.tokens),
            'final_query': self.final_query,
            'synonyms': {t: list(w) for t, w in self.synonyms.items()},
            'ordered_tlds': list(self.ordered_tlds),
            'include_hyphenated': self.include_hyphenated,
            'limit': self.limit,
        }


@dataclass
class SearchMetadata:
    search_time: int = 0
    total_generated: int = 0
    filter_applied: bool = False
    latency: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'search_time': self.search_time,
            'total_generated': self.total_generated,
            'filter_applied': self.filter_applied,
            'latency': {k: round(v, 2) for k, v in self.latency.items()},
        }


@dataclass
class SearchResponse:
    """Result of a single search request."""
    results: List[Candidate]
    success: bool
    metadata: SearchMetadata
    message: Optional[str] = None
    invalid_candidates: List[Candidate] = field(default_factory=list)
    includes_ai_generations: bool = False
    processed: Optional[ProcessedQuery] = None

    def to_dict(self, debug: bool = False) -> Dict[str, Any]:
        result = {
            'results': [c.to_dict(debug) for c in self.results],
            'invalid_candidates': [c.to_dict(debug) for c in self.invalid_candidates],
            'success': self.success,
            'includes_ai_generations': self.includes_ai_generations,
            'metadata': self.metadata.to_dict(),
        }
        if self.message:
            result['message'] = self.message
        if self.processed is not None:
            result['processed'] = self.processed.to_dict()
        return result
