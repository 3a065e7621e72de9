"""Search pipeline: request processing, generation, scoring, ranking, availability."""

import asyncio
import inspect
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .checkers import AvailabilityService, annotate_availability
from .config import ClientConfig
from .errors import InvalidRequestError
from .generators import CandidateMerger
from .generators.merger import dedupe
from .models import Candidate, ProcessedQuery, SearchMetadata, SearchResponse, Strategy
from .ranking import RankingConfig, rank_candidates, rerank_with_unavailable
from .scoring import DomainScorer, ScoringConfig
from .utils.dictionary import WordDictionary
from .utils.synonyms import SynonymExpander
from .utils.text import TOKEN_RE, tokenize, unique
from .utils.tlds import get_cc_tld, is_valid_tld, normalize_tld

logger = logging.getLogger(__name__)

MIN_GENERATION_LIMIT = 50
MAX_SYNONYMS = 10
# Candidates checked beyond the requested page, so re-ranking has material
AVAILABILITY_EXTRA_WINDOW = 10

# Optional external candidate source (e.g. an AI model): query -> domains
AlternateGenerator = Callable[[ProcessedQuery], Union[Iterable[str], Awaitable[Iterable[str]]]]


@dataclass
class PreparedRequest:
    processed: ProcessedQuery
    limit: int
    offset: int
    location_tld: Optional[str] = None
    tld_weights: Dict[str, float] = field(default_factory=dict)
    filter_applied: bool = False


@contextmanager
def _timed(latency: Dict[str, float], stage: str) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        latency[stage] = (time.perf_counter() - start) * 1000


def _check_int(value: Any, name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        qualifier = 'positive' if minimum > 0 else f'>= {minimum}'
        raise InvalidRequestError(f"{name} must be {qualifier}")
    return value


def _tld_list(value: Optional[Sequence[str]], name: str) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise InvalidRequestError(f"{name} must be a list")
    tlds = [normalize_tld(t) for t in value if isinstance(t, str) and t.strip()]
    for tld in tlds:
        if not is_valid_tld(tld):
            raise InvalidRequestError(f"invalid tld: {tld}")
    return tlds


class SearchService:
    """Suggests brandable domains for a short query.

    One service owns the long-lived collaborators (synonym cache, word
    dictionary, availability cache) and can serve many searches.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        expander: Optional[SynonymExpander] = None,
        dictionary: Optional[WordDictionary] = None,
        availability: Optional[AvailabilityService] = None,
        merger: Optional[CandidateMerger] = None,
        alternate_generators: Sequence[AlternateGenerator] = ()
    ):
        self.config = config or ClientConfig()
        self.expander = expander or SynonymExpander()
        self.dictionary = dictionary
        self.merger = merger or CandidateMerger()
        self.alternate_generators = list(alternate_generators)
        self.scoring_config = ScoringConfig.from_mapping(self.config.scoring)
        self.ranking_config = RankingConfig.from_mapping(self.config.ranking)
        self._availability = availability

    @property
    def availability(self) -> AvailabilityService:
        if self._availability is None:
            self._availability = AvailabilityService(**self.config.availability)
        return self._availability

    # -- request processing -------------------------------------------------

    def process_request(
        self,
        query: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        default_tlds: Optional[Sequence[str]] = None,
        supported_tlds: Optional[Sequence[str]] = None,
        location: Optional[str] = None,
        prefixes: Optional[Sequence[str]] = None,
        suffixes: Optional[Sequence[str]] = None,
        max_synonyms: Optional[int] = None,
        tld_weights: Optional[Dict[str, float]] = None,
        include_hyphenated: Optional[bool] = None,
        check_availability: Optional[bool] = None
    ) -> PreparedRequest:
        """Validate and normalize a search request."""
        cfg = self.config
        if not isinstance(query, str) or not query.strip():
            raise InvalidRequestError("query is required")

        limit = _check_int(cfg.limit if limit is None else limit, 'limit', 1)
        offset = _check_int(cfg.offset if offset is None else offset, 'offset', 0)

        tokens = unique(tokenize(query))
        if not tokens:
            raise InvalidRequestError("query must contain letters or digits")

        synonym_limit = max(0, min(cfg.max_synonyms if max_synonyms is None else max_synonyms, MAX_SYNONYMS))
        synonyms = {t: tuple(self.expander.related(t, synonym_limit)) for t in tokens}

        supported_override = _tld_list(supported_tlds, 'supported_tlds')
        has_override = bool(supported_override)
        explicit_defaults = _tld_list(default_tlds, 'default_tlds')
        if explicit_defaults is not None:
            default_source = explicit_defaults
        elif has_override:
            default_source = []
        else:
            default_source = _tld_list(cfg.default_tlds, 'default_tlds') or []
        supported_source = supported_override if has_override else (_tld_list(cfg.supported_tlds, 'supported_tlds') or [])

        location_tld = get_cc_tld(location)
        if location_tld:
            location_tld = normalize_tld(location_tld)
            if not is_valid_tld(location_tld):
                raise InvalidRequestError(f"invalid tld: {location_tld}")

        if has_override:
            supported = supported_source
        else:
            # Without an explicit filter only TLDs the query itself spells out join in
            words = set(tokens) | {w for related in synonyms.values() for w in related}
            supported = [t for t in supported_source if t in words]

        ordered_tlds = unique(default_source + ([location_tld] if location_tld else []) + supported)

        generation_limit = max(limit + offset, max(cfg.limit, MIN_GENERATION_LIMIT))

        weights = dict(self.scoring_config.tld_weights)
        weights.update(cfg.tld_weights or {})
        weights.update(tld_weights or {})

        processed = ProcessedQuery(
            query=query,
            tokens=tuple(tokens),
            synonyms=synonyms,
            ordered_tlds=tuple(ordered_tlds),
            include_hyphenated=bool(cfg.include_hyphenated if include_hyphenated is None else include_hyphenated),
            limit=generation_limit,
            prefixes=tuple(cfg.prefixes if prefixes is None else prefixes),
            suffixes=tuple(cfg.suffixes if suffixes is None else suffixes),
            check_availability=bool(cfg.check_availability if check_availability is None else check_availability),
        )

        return PreparedRequest(
            processed=processed,
            limit=limit,
            offset=offset,
            location_tld=location_tld,
            tld_weights={k.lower(): v for k, v in weights.items()},
            filter_applied=has_override,
        )

    # -- pipeline stages ----------------------------------------------------

    async def _run_alternate(self, generator: AlternateGenerator, processed: ProcessedQuery) -> List[str]:
        """Call one generator under ``ai_timeout``; sync generators run in a worker thread."""
        if inspect.iscoroutinefunction(generator):
            pending = generator(processed)
        else:
            pending = asyncio.to_thread(generator, processed)
        result = await asyncio.wait_for(pending, timeout=self.config.ai_timeout)
        return [d for d in result if isinstance(d, str)]

    async def alternate_candidates(self, processed: ProcessedQuery) -> List[Candidate]:
        """Candidates from external generators; failures are skipped."""
        candidates: List[Candidate] = []
        tlds = sorted(processed.ordered_tlds, key=len, reverse=True)
        outcomes = await asyncio.gather(
            *(self._run_alternate(g, processed) for g in self.alternate_generators),
            return_exceptions=True
        )
        for domains in outcomes:
            if isinstance(domains, asyncio.TimeoutError):
                logger.warning("Alternate generator timed out; continuing without it")
                continue
            if isinstance(domains, Exception):  # external source, never fatal
                logger.warning(f"Alternate generator failed: {domains}")
                continue

            for raw in domains:
                domain = raw.strip().lower()
                suffix = next((t for t in tlds if domain.endswith('.' + t)), None)
                if not suffix:
                    continue
                label = domain[:-(len(suffix) + 1)]
                if not label or not all(TOKEN_RE.fullmatch(p) for p in label.split('-')):
                    continue
                candidates.append(Candidate(domain=domain, suffix=suffix, strategy=Strategy.ALTERNATE))
        return candidates

    async def _availability_stage(
        self,
        ranked: List[Candidate],
        prepared: PreparedRequest,
        latency: Dict[str, float]
    ) -> Tuple[List[Candidate], List[Candidate]]:
        base_window = prepared.limit + prepared.offset
        extra = min(AVAILABILITY_EXTRA_WINDOW, max(0, len(ranked) - base_window))
        window = min(len(ranked), base_window + extra)
        to_check, remaining = ranked[:window], ranked[window:]

        with _timed(latency, 'availability_check'):
            result = await annotate_availability(to_check, self.availability)

        with _timed(latency, 'availability_rerank'):
            reranked = rerank_with_unavailable(
                result.available + remaining,
                result.unavailable,
                config=self.ranking_config
            )
        return reranked, result.unavailable

    # -- entry points -------------------------------------------------------

    async def search_async(self, query: str, debug: bool = False, **options) -> SearchResponse:
        """Run the full pipeline for one query."""
        latency: Dict[str, float] = {}
        start = time.perf_counter()

        try:
            with _timed(latency, 'request_processing'):
                prepared = self.process_request(query, **options)
        except InvalidRequestError as e:
            latency['total'] = (time.perf_counter() - start) * 1000
            return SearchResponse(
                results=[],
                success=False,
                message=str(e),
                metadata=SearchMetadata(search_time=round(latency['total']), latency=latency),
            )

        processed = prepared.processed
        logger.debug(f"search request: {processed.to_dict()}")

        with _timed(latency, 'domain_generation'):
            alternates, generated = await asyncio.gather(
                self.alternate_candidates(processed),
                self.merger.merge_async(processed)
            )
            generated = dedupe(generated + alternates)

        with _timed(latency, 'scoring'):
            scorer = DomainScorer(
                config=self.scoring_config.override({'tld_weights': prepared.tld_weights}),
                dictionary=self.dictionary
            )
            scored = scorer.score_candidates(generated, processed, prepared.location_tld)

        with _timed(latency, 'ranking'):
            ranked = rank_candidates(scored, limit=processed.limit, config=self.ranking_config)

        invalid: List[Candidate] = []
        if processed.check_availability and ranked:
            ranked, invalid = await self._availability_stage(ranked, prepared, latency)

        page = ranked[prepared.offset:prepared.offset + prepared.limit]

        latency['total'] = (time.perf_counter() - start) * 1000
        logger.debug(f"search latency: {latency}")

        return SearchResponse(
            results=page,
            success=True,
            invalid_candidates=invalid,
            includes_ai_generations=any(c.strategy is Strategy.ALTERNATE for c in page),
            metadata=SearchMetadata(
                search_time=round(latency['total']),
                total_generated=len(generated),
                filter_applied=prepared.filter_applied,
                latency=latency,
            ),
            processed=processed if debug else None,
        )

    def search(self, query: str, debug: bool = False, **options) -> SearchResponse:
        """Synchronous wrapper for ``search_async``.

        A timed-out synchronous alternate generator cannot be interrupted;
        its results are discarded, but ``asyncio.run`` still joins its
        worker thread before returning.
        """
        return asyncio.run(self.search_async(query, debug=debug, **options))
