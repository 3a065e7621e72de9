from .scorer import DomainScorer, ScoringConfig, score_domain, split_domain

__all__ = ['DomainScorer', 'ScoringConfig', 'score_domain', 'split_domain']
