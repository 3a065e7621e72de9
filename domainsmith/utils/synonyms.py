"""Synonym expansion for query tokens."""

import logging
from typing import Callable, Dict, List, Mapping, Optional, Sequence

import nltk
from nltk.corpus import wordnet
from nltk.stem import PorterStemmer

from .text import TOKEN_RE

logger = logging.getLogger(__name__)

# word -> {category: [related words]}
SynonymProvider = Callable[[str], Mapping[str, Sequence[str]]]

CORPORA = ('wordnet', 'omw-1.4', 'words')


def ensure_corpora(quiet: bool = True) -> bool:
    """Download the NLTK corpora used for synonyms and dictionary lookups."""
    ok = True
    for name in CORPORA:
        try:
            ok = nltk.download(name, quiet=quiet) and ok
        except Exception as e:  # network/filesystem errors from the downloader
            logger.warning(f"NLTK download error for '{name}': {e}")
            ok = False
    return ok


class WordNetProvider:
    """Synonyms and hypernyms from WordNet."""

    def __init__(self, max_synsets: int = 3):
        self.max_synsets = max_synsets
        self._warned = False

    def __call__(self, word: str) -> Dict[str, List[str]]:
        try:
            synsets = wordnet.synsets(word)
        except LookupError:
            if not self._warned:
                logger.warning("WordNet corpus not installed; synonym expansion disabled "
                               "(run `domainsmith setup`)")
                self._warned = True
            return {}

        synonyms: List[str] = []
        similar: List[str] = []
        for synset in synsets[:self.max_synsets]:
            synonyms.extend(lemma.name() for lemma in synset.lemmas())
            for hypernym in synset.hypernyms()[:2]:
                similar.extend(lemma.name() for lemma in hypernym.lemmas()[:2])

        return {'synonyms': synonyms, 'similar': similar}


class SynonymExpander:
    """Maps tokens to a bounded, deterministic list of related words.

    Results are memoized per token for the lifetime of the expander, so the
    same expander can be shared by every strategy and request. Two threads
    racing on an uncached token both compute the same value; the cache is
    only ever written with complete lists.
    """

    def __init__(
        self,
        provider: Optional[SynonymProvider] = None,
        stemmer: Optional[Callable[[str], str]] = None,
        max_word_length: int = 15
    ):
        self.provider = provider if provider is not None else WordNetProvider()
        self.stemmer = stemmer if stemmer is not None else PorterStemmer().stem
        self.max_word_length = max_word_length
        self._cache: Dict[str, List[str]] = {}

    def _lookup(self, word: str) -> List[str]:
        """Query the provider, returning usable words in deterministic order."""
        try:
            result = self.provider(word) or {}
            raw = [w for words in result.values() for w in (words or ())]
        except Exception as e:  # provider failures degrade to "no synonyms"
            logger.debug(f"Synonym lookup failed for '{word}': {e}")
            return []

        words = set()
        for entry in raw:
            if not isinstance(entry, str):
                continue
            w = entry.strip().lower()
            if len(w) < 2 or len(w) > self.max_word_length:
                continue
            if not TOKEN_RE.fullmatch(w):
                continue
            words.add(w)

        return sorted(words, key=lambda w: (len(w), w))

    def _related_all(self, token: str) -> List[str]:
        cached = self._cache.get(token)
        if cached is not None:
            return cached

        related = [w for w in self._lookup(token) if w != token]
        if not related:
            # Retry once with the stemmed form
            try:
                stem = self.stemmer(token)
            except Exception as e:
                logger.debug(f"Stemming failed for '{token}': {e}")
                stem = token
            if stem and stem != token:
                stemmed = [w for w in self._lookup(stem) if w not in (token, stem)]
                # The stem only counts as a word when the provider knows it
                if stemmed:
                    related = [stem] + stemmed if len(stem) >= 2 else stemmed

        self._cache[token] = related
        return related

    def expand(self, token: str, max_count: int = 5) -> List[str]:
        """Return ``[token] + related words``, at most ``max_count`` entries."""
        base = token.strip().lower()
        if not base:
            return []
        related = self._related_all(base)
        return [base] + related[:max(0, max_count - 1)]

    def related(self, token: str, max_count: int = 5) -> List[str]:
        """Related words without the token itself."""
        return self.expand(token, max_count + 1)[1:]

    def cache_size(self) -> int:
        return len(self._cache)
