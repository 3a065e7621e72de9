import asyncio
import time

import pytest

from domainsmith import ClientConfig, InvalidRequestError, SearchService, Strategy
from domainsmith.checkers import AvailabilityService
from domainsmith.models import Availability

from .test_availability import FakeDNSChecker


class ComTakenDNSChecker(FakeDNSChecker):
    async def check_batch_async(self, domains):
        self.calls.append(list(domains))
        return {
            d: Availability.REGISTERED if d.endswith('.com') else Availability.UNREGISTERED
            for d in domains
        }


@pytest.fixture
def config():
    return ClientConfig(
        default_tlds=['com', 'net'],
        supported_tlds=['com', 'net', 'io', 'ly', 'ng'],
        limit=10,
        prefixes=['get', 'my'],
        suffixes=['ly', 'hub'],
    )


@pytest.fixture
def service(config, expander, dictionary):
    return SearchService(
        config=config,
        expander=expander,
        dictionary=dictionary,
        availability=AvailabilityService(use_cache=False, dns_checker=ComTakenDNSChecker()),
    )


@pytest.mark.parametrize("query,options,message", [
    ("", {}, "query is required"),
    ("   ", {}, "query is required"),
    ("!!!", {}, "query must contain letters or digits"),
    ("fast", {'limit': 0}, "limit must be positive"),
    ("fast", {'offset': -1}, "offset must be >= 0"),
    ("fast", {'supported_tlds': 'com'}, "supported_tlds must be a list"),
    ("fast", {'default_tlds': ['c0m']}, "invalid tld: c0m"),
])
def test_invalid_requests_fail_cleanly(service, query, options, message):
    response = service.search(query, **options)
    assert response.success is False
    assert response.message == message
    assert response.results == []


def test_process_request_raises(service):
    with pytest.raises(InvalidRequestError):
        service.process_request("fast", limit=True)


def test_tlds_spelled_by_the_query_join_the_defaults(service):
    prepared = service.process_request("fast io")
    assert prepared.processed.tokens == ('fast', 'io')
    assert prepared.processed.ordered_tlds == ('com', 'net', 'io')
    assert prepared.filter_applied is False


def test_supported_override_replaces_defaults(service):
    prepared = service.process_request("fast tech", supported_tlds=['.LY', 'io'])
    assert prepared.processed.ordered_tlds == ('ly', 'io')
    assert prepared.filter_applied is True


def test_location_tld_follows_defaults(service):
    prepared = service.process_request("fast", location='Nigeria')
    assert prepared.processed.ordered_tlds == ('com', 'net', 'ng')
    assert prepared.location_tld == 'ng'


def test_synonyms_are_clamped(service):
    assert service.process_request("fast", max_synonyms=-3).processed.synonyms == {'fast': ()}
    assert service.process_request("fast", max_synonyms=1).processed.synonyms == {'fast': ('quick',)}
    assert len(service.process_request("fast", max_synonyms=50).processed.synonyms['fast']) <= 10


def test_generation_limit(service):
    assert service.process_request("fast", limit=5).processed.limit == 50
    assert service.process_request("fast", limit=40, offset=30).processed.limit == 70


def test_search_returns_unique_scored_results(service):
    response = service.search("fast tech")
    assert response.success is True
    assert len(response.results) == 10

    names = [c.domain for c in response.results]
    assert len(names) == len(set(names))
    assert all(c.score is not None and c.strategy is not None for c in response.results)
    assert response.metadata.total_generated >= len(names)
    assert 'total' in response.metadata.latency


def test_search_is_deterministic(service):
    first = service.search("fast tech")
    second = service.search("fast tech")
    assert [c.domain for c in first.results] == [c.domain for c in second.results]


def test_first_results_use_distinct_labels(service):
    results = service.search("fast tech", limit=4).results
    assert len({c.label for c in results[:2]}) == 2


def test_pages_concatenate(service):
    full = service.search("fast tech", limit=10).results
    page1 = service.search("fast tech", limit=5, offset=0).results
    page2 = service.search("fast tech", limit=5, offset=5).results
    assert [c.domain for c in page1 + page2] == [c.domain for c in full]


def test_debug_includes_processed_query(service):
    response = service.search("fast tech", debug=True)
    assert response.processed is not None
    assert response.to_dict(debug=True)['processed']['tokens'] == ['fast', 'tech']
    assert service.search("fast tech").processed is None


def test_availability_stage_moves_taken_domains_aside(service):
    response = service.search("fast tech", check_availability=True)
    assert response.success is True
    assert response.invalid_candidates
    assert all(c.domain.endswith('.com') for c in response.invalid_candidates)
    assert all(c.availability is not Availability.REGISTERED for c in response.results)
    assert 'availability_check' in response.metadata.latency


def test_alternate_generator_candidates(config, expander, dictionary):
    async def generator(query):
        return ['zoomly.com', 'bad domain.com', 'nowhere.unknowntld', 'ZIPPY.NET']

    service = SearchService(config=config, expander=expander, dictionary=dictionary,
                            alternate_generators=[generator])
    query = service.process_request("fast tech").processed
    candidates = asyncio.run(service.alternate_candidates(query))

    assert [c.domain for c in candidates] == ['zoomly.com', 'zippy.net']
    assert all(c.strategy is Strategy.ALTERNATE for c in candidates)


def test_failing_alternate_generator_falls_back(config, expander, dictionary, service):
    def broken(query):
        raise RuntimeError("model unavailable")

    async def slow(query):
        await asyncio.sleep(1)
        return ['late.com']

    config.ai_timeout = 0.01
    fallback = SearchService(config=config, expander=expander, dictionary=dictionary,
                             alternate_generators=[broken, slow])
    response = fallback.search("fast tech")

    assert response.success is True
    assert response.includes_ai_generations is False
    assert [c.domain for c in response.results] == [c.domain for c in service.search("fast tech").results]


def test_sync_alternate_generators_run_off_the_event_loop(config, expander, dictionary):
    def sleepy(query):
        time.sleep(0.5)
        return ['late.com']

    def quick(query):
        return ['zoomly.com']

    config.ai_timeout = 0.1
    service = SearchService(config=config, expander=expander, dictionary=dictionary,
                            alternate_generators=[sleepy, quick])
    query = service.process_request("fast tech").processed

    async def timed():
        start = time.perf_counter()
        candidates = await service.alternate_candidates(query)
        return candidates, time.perf_counter() - start

    candidates, elapsed = asyncio.run(timed())

    assert elapsed < 0.4
    assert [c.domain for c in candidates] == ['zoomly.com']


def test_alternates_are_generated_alongside_the_strategies(config, expander, dictionary):
    def quick(query):
        return ['zoomly.com', 'fasttech.com']

    plain = SearchService(config=config, expander=expander, dictionary=dictionary)
    service = SearchService(config=config, expander=expander, dictionary=dictionary,
                            alternate_generators=[quick])
    response = service.search("fast tech")

    # fasttech.com is already a permutation, so only zoomly.com is new
    assert response.metadata.total_generated == plain.search("fast tech").metadata.total_generated + 1
    found = [c.domain for c in response.results]
    assert len(found) == len(set(found))


def test_unknown_nested_config_options_are_ignored(expander, dictionary):
    config = ClientConfig.from_mapping({
        'scoring': {'hyphen_penalty': 3, 'bogus': 1},
        'ranking': {'nope': 1},
        'availability': {'use_cache': False, 'whatever': 2},
    })

    assert config.scoring == {'hyphen_penalty': 3}
    assert config.ranking == {}
    assert config.availability == {'use_cache': False}

    service = SearchService(config=config, expander=expander, dictionary=dictionary)
    assert service.scoring_config.hyphen_penalty == 3
    assert service.availability.cache is None


def test_non_mapping_config_section_is_ignored():
    config = ClientConfig.from_mapping({'scoring': [1, 2], 'limit': 7})
    assert config.scoring == {}
    assert config.limit == 7
