"""English word membership for brandability bonuses."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Set

from .text import is_plain_word

logger = logging.getLogger(__name__)

WORDLIST_PATH = Path("data/wordlists/english_words.txt")


class WordDictionary:
    """Precomputed set of lowercase [a-z]+ words with O(1) membership."""

    def __init__(self, words: Optional[Iterable[str]] = None):
        self._words: Set[str] = set()
        if words is not None:
            self.update(words)

    def update(self, words: Iterable[str]):
        for entry in words:
            if not isinstance(entry, str):
                continue
            word = entry.strip().lower()
            if is_plain_word(word):
                self._words.add(word)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._words

    def __len__(self) -> int:
        return len(self._words)

    @classmethod
    def from_file(cls, path: Path) -> "WordDictionary":
        """Load a one-word-per-line wordlist."""
        with open(path, 'r') as f:
            return cls(line for line in f if line.strip())

    @classmethod
    def from_nltk(cls) -> "WordDictionary":
        """Load the NLTK ``words`` corpus; empty if the corpus is not installed."""
        try:
            from nltk.corpus import words
            return cls(words.words())
        except LookupError:
            logger.warning("NLTK 'words' corpus not installed; dictionary bonuses disabled "
                           "(run `domainsmith setup`)")
            return cls()

    @classmethod
    def load(cls, wordlist_path: Optional[Path] = None) -> "WordDictionary":
        """Load from a wordlist file if present, else from NLTK."""
        path = Path(wordlist_path) if wordlist_path else WORDLIST_PATH
        if path.exists():
            try:
                return cls.from_file(path)
            except OSError as e:
                logger.warning(f"Could not read wordlist {path}: {e}")
        return cls.from_nltk()


@lru_cache(maxsize=1)
def default_dictionary() -> WordDictionary:
    """Process-wide dictionary, loaded on first use."""
    return WordDictionary.load()
