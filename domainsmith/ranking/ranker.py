"""Diversity-aware ranking of scored candidates."""

from collections import Counter, deque
from dataclasses import dataclass, fields, replace
from typing import Any, Deque, Dict, Iterable, List, Mapping, Optional, Set

from ..models import Candidate, Strategy


@dataclass(frozen=True)
class RankingConfig:
    lookahead: int = 6          # queued items scanned per group per pick
    max_strategy_run: int = 1   # consecutive picks allowed from one strategy
    demand_bonus: float = 5     # per unavailable domain sharing a label

    @classmethod
    def from_mapping(cls, overrides: Optional[Mapping[str, Any]] = None) -> "RankingConfig":
        if not overrides:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"unknown ranking options: {', '.join(sorted(unknown))}")
        return cls(**overrides)


class _Picker:
    """Running state of one ranking sweep."""

    def __init__(self, config: RankingConfig):
        self.config = config
        self.used_labels: Set[str] = set()
        self.last_strategy: Optional[Strategy] = None
        self.run_length = 0

    def _blocked(self, candidate: Candidate) -> bool:
        return (
            self.last_strategy is not None
            and self.run_length >= self.config.max_strategy_run
            and candidate.strategy == self.last_strategy
        )

    def choose(self, queue: Deque[Candidate]) -> int:
        """Index of the item to take from ``queue`` (never fails on a non-empty queue)."""
        window = [queue[i] for i in range(min(self.config.lookahead, len(queue)))]

        for i, cand in enumerate(window):
            if cand.label not in self.used_labels and not self._blocked(cand):
                return i
        for i, cand in enumerate(window):
            if cand.label not in self.used_labels:
                return i
        return 0

    def take(self, candidate: Candidate):
        self.used_labels.add(candidate.label)
        if candidate.strategy == self.last_strategy:
            self.run_length += 1
        else:
            self.last_strategy = candidate.strategy
            self.run_length = 1


def rank_candidates(
    candidates: Iterable[Candidate],
    limit: Optional[int] = None,
    offset: int = 0,
    config: Optional[RankingConfig] = None
) -> List[Candidate]:
    """Order candidates by score while spreading TLDs, labels and strategies.

    Candidates are grouped by suffix and picked round-robin across groups
    (best group first), one per group per pass. Within a group only the next
    ``lookahead`` items are considered, preferring an unused label whose
    strategy would not extend a run past ``max_strategy_run``.

    The selection is greedy, so ranking with a larger limit only appends to
    a smaller one; ``offset`` slices pages out of that single ordering.
    """
    config = config or RankingConfig()
    ordered = sorted(candidates, key=lambda c: c.total, reverse=True)

    # Insertion order of a stable score-descending list orders groups by top score
    groups: Dict[str, Deque[Candidate]] = {}
    for cand in ordered:
        groups.setdefault(cand.suffix, deque()).append(cand)

    stop_at = None if limit is None else offset + limit
    picker = _Picker(config)
    output: List[Candidate] = []

    while groups:
        picked = False
        for queue in groups.values():
            if stop_at is not None and len(output) >= stop_at:
                return output[offset:]
            if not queue:
                continue
            index = picker.choose(queue)
            cand = queue[index]
            del queue[index]
            output.append(cand)
            picker.take(cand)
            picked = True

        groups = {suffix: queue for suffix, queue in groups.items() if queue}
        if not picked:
            break

    if stop_at is not None:
        return output[offset:stop_at]
    return output[offset:]


def label_demand(unavailable: Iterable[Candidate]) -> Counter:
    """Number of unavailable domains per label."""
    return Counter(c.label for c in unavailable)


def apply_demand_bonus(
    candidates: Iterable[Candidate],
    demand: Mapping[str, int],
    config: Optional[RankingConfig] = None
) -> List[Candidate]:
    """Copies of ``candidates`` with an ``availability_demand`` score component."""
    config = config or RankingConfig()
    results = []
    for cand in candidates:
        count = demand.get(cand.label, 0)
        if count and cand.score is not None:
            score = cand.score.with_component('availability_demand', count * config.demand_bonus)
            cand = replace(cand, score=score)
        results.append(cand)
    return results


def rerank_with_unavailable(
    candidates: List[Candidate],
    unavailable: Iterable[Candidate],
    limit: Optional[int] = None,
    config: Optional[RankingConfig] = None
) -> List[Candidate]:
    """Boost labels that are taken on other TLDs, then rank again.

    A label registered elsewhere signals demand for the name, so its
    remaining variants move up. Without any demand the input is returned
    unchanged.
    """
    demand = label_demand(unavailable)
    if not demand or not any(c.label in demand for c in candidates):
        return list(candidates)
    adjusted = apply_demand_bonus(candidates, demand, config)
    return rank_candidates(adjusted, limit=limit, config=config)
