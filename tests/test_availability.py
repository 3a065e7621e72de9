import asyncio
import json
import threading
import time
from datetime import datetime, timedelta

import dns.exception
import dns.name
import dns.resolver
import pytest

from domainsmith.checkers import AvailabilityService, DNSChecker, WhoisChecker, annotate_availability
from domainsmith.models import Availability, Candidate
from domainsmith.utils.cache import ResultCache


class FakeDNSChecker:
    def __init__(self, statuses=None, error=None):
        self.statuses = statuses or {}
        self.error = error
        self.calls = []

    async def check_batch_async(self, domains):
        self.calls.append(list(domains))
        if self.error:
            raise self.error
        return {d: self.statuses[d] for d in domains if d in self.statuses}


class FakeWhoisChecker:
    def __init__(self, status):
        self.status = status
        self.calls = []

    def check_single(self, domain):
        self.calls.append(domain)
        return self.status


STATUSES = {
    'free.com': Availability.UNREGISTERED,
    'taken.com': Availability.REGISTERED,
    'bad.com': Availability.INVALID,
}


def test_statuses_are_reported_per_domain():
    service = AvailabilityService(use_cache=False, dns_checker=FakeDNSChecker(STATUSES))
    result = service.check_batch(['FREE.com', 'taken.com', 'mystery.com'])
    assert result == {
        'free.com': Availability.UNREGISTERED,
        'taken.com': Availability.REGISTERED,
        'mystery.com': Availability.UNKNOWN,
    }


def test_annotate_splits_by_availability():
    service = AvailabilityService(use_cache=False, dns_checker=FakeDNSChecker(STATUSES))
    candidates = [Candidate(d, 'com') for d in ['free.com', 'taken.com', 'bad.com', 'mystery.com']]

    result = asyncio.run(annotate_availability(candidates, service))

    assert [c.domain for c in result.available] == ['free.com', 'mystery.com']
    assert [c.domain for c in result.unavailable] == ['taken.com', 'bad.com']
    assert result.available[0].availability is Availability.UNREGISTERED
    assert result.available[1].availability is Availability.UNKNOWN
    assert candidates[0].availability is Availability.UNKNOWN


def test_provider_failure_leaves_everything_unknown():
    service = AvailabilityService(use_cache=False, dns_checker=FakeDNSChecker(error=RuntimeError("no network")))
    candidates = [Candidate('free.com', 'com'), Candidate('taken.com', 'com')]

    result = asyncio.run(annotate_availability(candidates, service))

    assert result.unavailable == []
    assert all(c.availability is Availability.UNKNOWN for c in result.available)


def test_whois_verification_overrides_dns():
    service = AvailabilityService(
        use_cache=False,
        verify_with_whois=True,
        dns_checker=FakeDNSChecker(STATUSES),
        whois_checker=FakeWhoisChecker(Availability.REGISTERED),
    )
    result = service.check_batch(['free.com', 'taken.com'])
    assert result['free.com'] is Availability.REGISTERED
    assert service.whois_checker.calls == ['free.com']


def test_inconclusive_whois_keeps_dns_verdict():
    service = AvailabilityService(
        use_cache=False,
        verify_with_whois=True,
        dns_checker=FakeDNSChecker(STATUSES),
        whois_checker=FakeWhoisChecker(Availability.UNKNOWN),
    )
    assert service.check_batch(['free.com'])['free.com'] is Availability.UNREGISTERED


def test_definitive_results_are_cached(tmp_path):
    cache_file = tmp_path / "cache.json"
    dns_checker = FakeDNSChecker(STATUSES)
    service = AvailabilityService(cache_file=str(cache_file), dns_checker=dns_checker)

    service.check_batch(['free.com', 'mystery.com'])
    second = service.check_batch(['free.com', 'mystery.com'])

    assert second['free.com'] is Availability.UNREGISTERED
    assert dns_checker.calls == [['free.com', 'mystery.com'], ['mystery.com']]

    stored = json.loads(cache_file.read_text())
    assert stored['free.com']['status'] == 'unregistered'
    assert 'mystery.com' not in stored


def test_cache_expiry(tmp_path):
    cache = ResultCache(cache_file=str(tmp_path / "cache.json"), ttl_hours=24)
    cache.set('fresh.com', Availability.REGISTERED)
    cache._cache['stale.com'] = {
        'status': 'registered',
        'method': 'dns',
        'checked_at': (datetime.now() - timedelta(hours=48)).isoformat(),
    }

    assert cache.get_status('fresh.com') is Availability.REGISTERED
    assert cache.clear_expired() == 1
    assert cache.get_status('stale.com') is None
    assert cache.stats()['total_entries'] == 1


def test_unreadable_cache_starts_empty(tmp_path):
    cache_file = tmp_path / "cache.json"
    cache_file.write_text("{not json")
    assert ResultCache(cache_file=str(cache_file)).stats()['total_entries'] == 0


class FakeResolver:
    def __init__(self, error=None):
        self.error = error

    async def resolve(self, domain, rdtype):
        if self.error:
            raise self.error
        return ['1.2.3.4']


@pytest.mark.parametrize("error,expected", [
    (None, Availability.REGISTERED),
    (dns.resolver.NXDOMAIN(), Availability.UNREGISTERED),
    (dns.resolver.NoAnswer(), Availability.REGISTERED),
    (dns.name.LabelTooLong(), Availability.INVALID),
    (dns.resolver.NoNameservers(), Availability.UNKNOWN),
    (dns.exception.Timeout(), Availability.UNKNOWN),
])
def test_dns_status_mapping(monkeypatch, error, expected):
    checker = DNSChecker()
    monkeypatch.setattr(checker, '_resolver', lambda: FakeResolver(error))
    assert checker.check_single('example.com') is expected


def test_slow_dns_lookup_is_unknown(monkeypatch):
    class SlowResolver:
        async def resolve(self, domain, rdtype):
            await asyncio.sleep(1)

    checker = DNSChecker(timeout=0.01)
    monkeypatch.setattr(checker, '_resolver', lambda: SlowResolver())
    assert checker.check_batch(['slow.com']) == {'slow.com': Availability.UNKNOWN}


def test_cache_is_written_off_the_event_loop(tmp_path):
    service = AvailabilityService(cache_file=str(tmp_path / "cache.json"), dns_checker=FakeDNSChecker(STATUSES))
    writers = []
    original = service.cache.set_batch

    def set_batch(results, method):
        writers.append(threading.current_thread())
        original(results, method)

    service.cache.set_batch = set_batch
    service.check_batch(['free.com'])

    assert len(writers) == 1
    assert writers[0] is not threading.main_thread()
    assert service.cache.get_status('free.com') is Availability.UNREGISTERED


class FakeRecord:
    def __init__(self, domain_name=None):
        self.domain_name = domain_name


def test_whois_lookups_are_spaced_by_rate_limit(monkeypatch):
    started = []

    def fake_whois(domain):
        started.append(time.monotonic())
        return FakeRecord()

    monkeypatch.setattr('domainsmith.checkers.whois_checker.whois.whois', fake_whois)
    names = [f'free{i}.com' for i in range(4)]
    service = AvailabilityService(
        use_cache=False,
        verify_with_whois=True,
        dns_checker=FakeDNSChecker({d: Availability.UNREGISTERED for d in names}),
        whois_checker=WhoisChecker(rate_limit_delay=0.2),
    )

    result = service.check_batch(names)

    assert all(status is Availability.UNREGISTERED for status in result.values())
    assert len(started) == 4
    gaps = [b - a for a, b in zip(started, started[1:])]
    assert min(gaps) >= 0.15


def test_whois_checker_serializes_threads(monkeypatch):
    active = []
    overlaps = []

    def fake_whois(domain):
        active.append(domain)
        if len(active) > 1:
            overlaps.append(domain)
        time.sleep(0.02)
        active.remove(domain)
        return FakeRecord('example.com')

    monkeypatch.setattr('domainsmith.checkers.whois_checker.whois.whois', fake_whois)
    checker = WhoisChecker(rate_limit_delay=0.05)
    threads = [threading.Thread(target=checker.check_single, args=(f'site{i}.com',)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert overlaps == []


def test_whois_rate_limit_pause_does_not_count_against_timeout(monkeypatch):
    monkeypatch.setattr('domainsmith.checkers.whois_checker.whois.whois', lambda domain: FakeRecord())
    checker = WhoisChecker(rate_limit_delay=0.3)
    checker._last_request_time = time.time()
    service = AvailabilityService(
        use_cache=False,
        verify_with_whois=True,
        whois_timeout=0.1,
        dns_checker=FakeDNSChecker(STATUSES),
        whois_checker=checker,
    )
    assert service.check_batch(['free.com'])['free.com'] is Availability.UNREGISTERED


def raising(error):
    def fake_whois(domain):
        raise error
    return fake_whois


@pytest.mark.parametrize("message,expected", [
    ("rate limit exceeded", Availability.UNKNOWN),
    ("Too many requests, try again later", Availability.UNKNOWN),
    ("Unknown TLD", Availability.UNSUPPORTED),
    ("No whois server is known for this kind of object", Availability.UNSUPPORTED),
    ("No match for domain \"FREE.COM\"", Availability.UNREGISTERED),
    ("Domain not found", Availability.UNREGISTERED),
    ("Domain is available", Availability.UNREGISTERED),
    ("Domain not registered", Availability.UNREGISTERED),
    ("Domain unavailable", Availability.REGISTERED),
    ("Domain not available", Availability.REGISTERED),
    ("Domain already registered", Availability.REGISTERED),
    ("Object exists", Availability.REGISTERED),
    ("connection reset by peer", Availability.UNKNOWN),
])
def test_whois_error_mapping(monkeypatch, message, expected):
    monkeypatch.setattr('domainsmith.checkers.whois_checker.whois.whois', raising(Exception(message)))
    checker = WhoisChecker(rate_limit_delay=0, backoff_delay=0)
    monkeypatch.setattr(checker, '_wait_for_rate_limit', lambda: None)
    assert checker.check_single('free.com') is expected


def test_whois_rate_limit_retries_once(monkeypatch):
    calls = []

    def fake_whois(domain):
        calls.append(domain)
        if len(calls) == 1:
            raise Exception("Rate limit exceeded")
        return FakeRecord('free.com')

    monkeypatch.setattr('domainsmith.checkers.whois_checker.whois.whois', fake_whois)
    checker = WhoisChecker(rate_limit_delay=0, backoff_delay=0)
    monkeypatch.setattr(checker, '_wait_for_rate_limit', lambda: None)

    assert checker.check_single('free.com') is Availability.REGISTERED
    assert calls == ['free.com', 'free.com']


@pytest.mark.parametrize("outcome,expected", [
    (FakeRecord(), Availability.UNREGISTERED),
    (FakeRecord('example.com'), Availability.REGISTERED),
])
def test_whois_record_mapping(monkeypatch, outcome, expected):
    monkeypatch.setattr('domainsmith.checkers.whois_checker.whois.whois', lambda domain: outcome)
    checker = WhoisChecker(rate_limit_delay=0)
    assert checker.check_single('example.com') is expected


def test_whois_domain_not_found_error(monkeypatch):
    from whois.exceptions import WhoisDomainNotFoundError

    monkeypatch.setattr('domainsmith.checkers.whois_checker.whois.whois',
                        raising(WhoisDomainNotFoundError("free.com")))
    checker = WhoisChecker(rate_limit_delay=0)
    assert checker.check_single('free.com') is Availability.UNREGISTERED
