from .base import GenerationStrategy
from .permutation_generator import PermutationStrategy
from .alphabetical_generator import AlphabeticalStrategy
from .affix_generator import AffixStrategy
from .tld_hack_generator import TldHackStrategy
from .merger import CandidateMerger, generate_candidates

__all__ = [
    'GenerationStrategy', 'PermutationStrategy', 'AlphabeticalStrategy', 'AffixStrategy',
    'TldHackStrategy', 'CandidateMerger', 'generate_candidates',
]
