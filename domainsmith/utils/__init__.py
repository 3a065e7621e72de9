from .cache import ResultCache
from .dictionary import WordDictionary
from .synonyms import SynonymExpander
from .text import tokenize

__all__ = ['ResultCache', 'WordDictionary', 'SynonymExpander', 'tokenize']
