from .ranker import (
    RankingConfig,
    apply_demand_bonus,
    label_demand,
    rank_candidates,
    rerank_with_unavailable,
)

__all__ = [
    'RankingConfig', 'apply_demand_bonus', 'label_demand', 'rank_candidates',
    'rerank_with_unavailable',
]
