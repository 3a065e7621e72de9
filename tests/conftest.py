import pytest

from domainsmith.models import Candidate, DomainScore, ProcessedQuery, Strategy
from domainsmith.utils.dictionary import WordDictionary
from domainsmith.utils.synonyms import SynonymExpander


class FakeProvider:
    """Synonym provider backed by a fixed table; counts lookups."""

    def __init__(self, table=None):
        self.table = table or {}
        self.calls = []

    def __call__(self, word):
        self.calls.append(word)
        return self.table.get(word, {})


SYNONYMS = {
    'fast': {'synonyms': ['quick', 'rapid'], 'similar': ['swift']},
    'tech': {'synonyms': ['tek']},
    'run': {'synonyms': ['sprint', 'dash']},
}


@pytest.fixture
def provider():
    return FakeProvider(SYNONYMS)


@pytest.fixture
def expander(provider):
    return SynonymExpander(provider=provider, stemmer=lambda w: w)


@pytest.fixture
def dictionary():
    return WordDictionary(['fast', 'quick', 'rapid', 'tech', 'brand', 'hello', 'world', 'run'])


def make_query(tokens, tlds=('com',), synonyms=None, **kwargs):
    return ProcessedQuery.build(list(tokens), synonyms=synonyms, ordered_tlds=list(tlds), **kwargs)


def make_candidate(domain, total, strategy=Strategy.PERMUTATION):
    suffix = domain.split('.', 1)[1]
    return Candidate(
        domain=domain,
        suffix=suffix,
        strategy=strategy,
        score=DomainScore(total=total, components={'base': total}),
    )


def domains(candidates):
    return [c.domain for c in candidates]
