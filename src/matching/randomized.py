"""
Randomized Construction — случайные перестановки + repair

Tier 1 (randomized): равномерно случайная перестановка участников,
принимается первая без неподвижных точек и запрещённых рёбер.
Для графа без исключений вероятность успеха одной попытки ≈ 1/e.

Tier 2 (fallback/repair): допустимые рёбра ещё одной случайной перестановки
сохраняются как частичное паросочетание, остальное достраивается
увеличивающими путями (src.matching.bipartite.kuhn_repair).
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from src.matching.bipartite import UNMATCHED, kuhn_repair
from src.matching.deadline import Deadline
from src.matching.graph import EligibilityGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RandomizedOutcome:
    """Результат randomized tier."""

    match_left: Optional[list[int]]
    attempts: int


def draw_permutation(n: int, rng: random.Random) -> list[int]:
    permutation = list(range(n))
    rng.shuffle(permutation)
    return permutation


def is_valid_permutation(permutation: list[int], graph: EligibilityGraph) -> bool:
    """Нет неподвижных точек и запрещённых рёбер (allowed уже исключает i → i)."""
    return all(graph.can_give(i, j) for i, j in enumerate(permutation))


def randomized_search(
    graph: EligibilityGraph,
    rng: random.Random,
    max_attempts: int,
    deadline: Optional[Deadline] = None,
) -> RandomizedOutcome:
    """
    Поиск случайной допустимой перестановки.

    Args:
        graph: eligibility graph
        rng: источник случайности
        max_attempts: бюджет попыток
        deadline: лимит времени (опционально)

    Returns:
        RandomizedOutcome (match_left=None, если бюджет исчерпан)

    Raises:
        DeadlineExceeded: если лимит времени исчерпан
    """
    for attempt in range(1, max_attempts + 1):
        if deadline is not None:
            deadline.tick()

        permutation = draw_permutation(graph.size, rng)
        if is_valid_permutation(permutation, graph):
            logger.debug(f"Randomized tier succeeded on attempt {attempt}/{max_attempts}")
            return RandomizedOutcome(match_left=permutation, attempts=attempt)

    return RandomizedOutcome(match_left=None, attempts=max_attempts)


def repair_search(
    graph: EligibilityGraph,
    rng: random.Random,
    deadline: Optional[Deadline] = None,
) -> Optional[list[int]]:
    """
    Fallback tier: случайная перестановка → частичное паросочетание → repair.

    Returns:
        match_left совершенного паросочетания или None, если его нет

    Raises:
        DeadlineExceeded: если лимит времени исчерпан
    """
    seed_permutation = draw_permutation(graph.size, rng)
    partial = [
        j if graph.can_give(i, j) else UNMATCHED for i, j in enumerate(seed_permutation)
    ]
    kept = sum(1 for j in partial if j != UNMATCHED)
    logger.debug(f"Repair tier: kept {kept}/{graph.size} edges of the seed permutation")

    return kuhn_repair(graph.adjacency, rng, initial=partial, deadline=deadline)
