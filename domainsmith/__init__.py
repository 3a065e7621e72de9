"""domainsmith - brandable domain name suggestions."""

from .config import ClientConfig, load_config
from .errors import InvalidRequestError
from .models import (
    Availability,
    Candidate,
    DomainScore,
    ProcessedQuery,
    SearchMetadata,
    SearchResponse,
    Strategy,
)
from .search import SearchService
from .scoring import DomainScorer, ScoringConfig, score_domain

__version__ = "0.1.0"

__all__ = [
    'ClientConfig', 'load_config', 'InvalidRequestError', 'Availability', 'Candidate',
    'DomainScore', 'ProcessedQuery', 'SearchMetadata', 'SearchResponse', 'Strategy',
    'SearchService', 'DomainScorer', 'ScoringConfig', 'score_domain',
]
