import pytest

from domainsmith.models import Candidate
from domainsmith.scoring import DomainScorer, ScoringConfig, score_domain, split_domain
from domainsmith.utils.dictionary import WordDictionary

from .conftest import make_query


@pytest.fixture
def scorer(dictionary):
    return DomainScorer(dictionary=dictionary)


def test_full_breakdown(scorer):
    result = scorer.score('brand', 'com')
    assert result.components == {
        'base': 100,
        'length_penalty': -16,
        'vowel_ratio': pytest.approx(2.0),
        'low_vowel_penalty': -5,
        'tld_weight': 20,
        'dict_word': 15,
    }
    assert result.total == pytest.approx(116)


def test_components_sum_to_total(scorer):
    for label, suffix in [('fast-tech', 'io'), ('qu1ck', 'com'), ('bcdfg', 'net')]:
        result = scorer.score(label, suffix)
        assert sum(result.components.values()) == pytest.approx(result.total)


def test_one_hyphen_costs_the_hyphen_weight(scorer):
    assert scorer.score('fast-tech', 'com').components['hyphen_penalty'] == -5


def test_digits_are_penalized(scorer):
    assert scorer.score('web3app', 'com').components['number_penalty'] == -5


def test_tld_weights(scorer):
    com = scorer.score('brand', 'com')
    net = scorer.score('brand', 'net')
    assert com.components['tld_weight'] == 20
    assert net.components['tld_weight'] == 10
    assert com.total - net.total == pytest.approx(10)
    assert 'tld_weight' not in scorer.score('brand', 'xyz').components


def test_consonant_heavy_label(scorer):
    components = scorer.score('bcdfg', 'com').components
    assert components['low_vowel_penalty'] == -5
    assert components['consonant_cluster_penalty'] == -5
    assert 'vowel_ratio' not in components


def test_repeated_letters(scorer):
    assert scorer.score('boook', 'com').components['repeated_letters_penalty'] == -5
    assert 'repeated_letters_penalty' not in scorer.score('book', 'com').components


def test_location_bonus_only_on_matching_tld(scorer):
    assert scorer.score('brand', 'ng', location_tld='ng').components['location_bonus'] == 20
    assert 'location_bonus' not in scorer.score('brand', 'com', location_tld='ng').components


def test_dictionary_bonuses(scorer):
    assert scorer.score('brand', 'com').components.get('dict_word') == 15
    assert 'dict_substr' not in scorer.score('brand', 'com').components

    assert scorer.score('fasttech', 'com').components.get('dict_substr') == 5
    assert scorer.score('fast-tech', 'com').components.get('dict_substr') == 5

    components = scorer.score('zzqx', 'com').components
    assert 'dict_word' not in components
    assert 'dict_substr' not in components


def test_shorter_label_scores_higher(scorer):
    assert scorer.score('brand', 'com').total > scorer.score('brandbrand', 'com').total


def test_config_override():
    config = ScoringConfig.from_mapping({'hyphen_penalty': 10, 'tld_weights': {'IO': 30}})
    scorer = DomainScorer(config=config, dictionary=WordDictionary())
    assert scorer.score('a-b', 'com').components['hyphen_penalty'] == -10
    assert scorer.score('ab', 'io').components['tld_weight'] == 30


def test_unknown_config_key_is_rejected():
    with pytest.raises(ValueError):
        ScoringConfig.from_mapping({'hyphen_weight': 3})


def test_score_domain_name(scorer):
    assert split_domain('Fast-Tech.co.uk') == ('fast-tech', 'co.uk')
    assert scorer.score_domain_name('fast.com') == scorer.score('fast', 'com')


def test_score_domain_function(dictionary):
    assert score_domain('brand', 'com', dictionary=dictionary).total == pytest.approx(116)


def test_score_candidates_drops_unsupported_suffixes(scorer):
    candidates = [Candidate('fast.com', 'com'), Candidate('fast.xyz', 'xyz'), Candidate('.com', 'com')]
    scored = scorer.score_candidates(candidates, make_query(['fast'], tlds=['com']))
    assert [c.domain for c in scored] == ['fast.com']
    assert scored[0].score is not None
    assert candidates[0].score is None
