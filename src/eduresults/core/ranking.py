from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Hashable, Iterable, List, TypeVar


K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class RankInput(Generic[K]):
    id: K
    ordering_key: float


@dataclass(frozen=True)
class RankedEntry(Generic[K]):
    id: K
    ordering_key: float
    rank: int


def rank(rows: Iterable[RankInput[K]]) -> List[RankedEntry[K]]:
    """
    Dense ranking, highest key first: keys [90, 90, 80] rank as 1, 1, 2.
    Ties keep their input order.
    """
    ordered = sorted(rows, key=lambda row: row.ordering_key, reverse=True)

    ranked: List[RankedEntry[K]] = []
    current_rank = 0
    previous_key = None
    for row in ordered:
        if previous_key is None or row.ordering_key != previous_key:
            current_rank += 1
        ranked.append(RankedEntry(id=row.id, ordering_key=row.ordering_key, rank=current_rank))
        previous_key = row.ordering_key
    return ranked
