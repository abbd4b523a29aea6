"""
Matching Engine — назначение giver → recipient для gift exchange

Pure, stateless вычисление: по множеству accepted участников и exclusion
pairs строит полное валидное назначение (derangement без запрещённых рёбер)
или возвращает структурированную ошибку.

Порядок:
1. Preconditions: минимум min_participants участников (без построения графа)
2. Eligibility graph (невалидные исключения игнорируются)
3. Feasibility: Hopcroft–Karp; нет совершенного паросочетания →
   InfeasibleConstraints, randomized search не запускается
4. Randomized tier: до random_attempts случайных перестановок
5. Fallback tier: repair случайной перестановки увеличивающими путями
   (гарантированно завершается, т.к. выполнимость доказана)
6. Postcondition: verify_assignment

Контракт: "валидное назначение, не обязательно равномерно распределённое
среди всех валидных назначений".

Engine не идемпотентен: повторный вызов на тех же данных даёт новое
независимое назначение. Источник случайности передаётся в каждый вызов;
общего RNG между вызовами нет, поэтому engine re-entrant и thread-safe.
"""

import logging
import random
import time
from typing import Any, Iterable, Optional

from src.core.domain import Assignment, ParticipantId
from src.matching.bipartite import is_perfect, hopcroft_karp, matching_size
from src.matching.config import MatchingConfig
from src.matching.deadline import Clock, Deadline, DeadlineExceeded
from src.matching.graph import build_graph, collect_exclusions
from src.matching.randomized import randomized_search, repair_search
from src.matching.result import (
    ConstructionTier,
    MatchingResult,
    computation_timeout,
    infeasible_constraints,
    insufficient_participants,
)
from src.matching.verification import verify_assignment

logger = logging.getLogger(__name__)


class MatchingEngine:
    """Matching engine: feasibility check + randomized construction + fallback.

    Экземпляр хранит только неизменяемую конфигурацию и часы, поэтому один
    экземпляр можно безопасно использовать из нескольких потоков.
    """

    def __init__(self, config: Optional[MatchingConfig] = None, clock: Clock = time.monotonic):
        """
        Args:
            config: конфигурация (default MatchingConfig())
            clock: монотонные часы для wall-clock лимита
        """
        self.config = config or MatchingConfig()
        self._clock = clock

    def assign(
        self,
        participants: Iterable[ParticipantId],
        exclusions: Iterable[Any] = (),
        rng: Optional[random.Random] = None,
    ) -> MatchingResult:
        """Построение назначения.

        Args:
            participants: id accepted участников
            exclusions: ExclusionPair или неупорядоченные пары id
            rng: источник случайности (default: новый random.Random() на вызов)

        Returns:
            MatchingResult: success с Assignment или failure с MatchingFailure
        """
        rng = rng if rng is not None else random.Random()
        deadline = Deadline(
            self.config.timeout_sec,
            clock=self._clock,
            check_interval=self.config.clock_check_interval,
        )

        # 1. Preconditions
        ids = set(participants)
        count = len(ids)
        if count < self.config.min_participants:
            failure = insufficient_participants(count, self.config.min_participants)
            logger.info(f"Matching rejected: {count} accepted participant(s)")
            return MatchingResult(
                success=False,
                assignment=None,
                failure=failure,
                participant_count=count,
                elapsed_sec=deadline.elapsed(),
                details=f"BLOCK: {failure.kind.value}, participants={count}",
            )

        # 2. Eligibility graph
        excluded_keys, ignored = collect_exclusions(ids, exclusions)
        try:
            deadline.stage = "graph"
            graph = build_graph(ids, excluded_keys, deadline)

            # 3. Feasibility
            deadline.stage = "feasibility"
            feasible_match = hopcroft_karp(graph.adjacency, deadline=deadline)
            if not is_perfect(feasible_match):
                size = matching_size(feasible_match)
                failure = infeasible_constraints(count, graph.isolated_givers(), size)
                logger.info(
                    f"Matching infeasible: max matching {size}/{count}, "
                    f"exclusions={len(graph.excluded_keys)}"
                )
                return MatchingResult(
                    success=False,
                    assignment=None,
                    failure=failure,
                    participant_count=count,
                    ignored_exclusions=ignored,
                    elapsed_sec=deadline.elapsed(),
                    details=f"BLOCK: {failure.kind.value}, max_matching={size}/{count}",
                )

            # 4. Randomized tier
            deadline.stage = "randomized"
            outcome = randomized_search(graph, rng, self.config.random_attempts, deadline)
            match_left = outcome.match_left
            tier = ConstructionTier.RANDOMIZED

            # 5. Fallback tier
            if match_left is None:
                deadline.stage = "fallback"
                tier = ConstructionTier.FALLBACK
                logger.warning(
                    f"Randomized tier exhausted {outcome.attempts} attempts "
                    f"for {count} participants, using fallback"
                )
                match_left = repair_search(graph, rng, deadline)
                if match_left is None:
                    raise RuntimeError(
                        "repair failed on a graph with a proven perfect matching"
                    )

        except DeadlineExceeded as e:
            failure = computation_timeout(count, self.config.timeout_sec, e.stage)
            logger.warning(f"Matching timed out at stage '{e.stage}' after {e.elapsed_sec:.3f}s")
            return MatchingResult(
                success=False,
                assignment=None,
                failure=failure,
                participant_count=count,
                ignored_exclusions=ignored,
                elapsed_sec=e.elapsed_sec,
                details=f"BLOCK: {failure.kind.value}, stage={e.stage}",
            )

        # 6. Postcondition
        mapping = graph.to_mapping(match_left)
        report = verify_assignment(mapping, ids, graph.excluded_keys)
        if not report.valid:
            raise RuntimeError(report.summary())

        elapsed = deadline.elapsed()
        logger.info(
            f"Matched {count} participants via {tier.value} tier "
            f"(attempts={outcome.attempts}, elapsed={elapsed:.3f}s)"
        )
        return MatchingResult(
            success=True,
            assignment=Assignment(mapping=mapping),
            failure=None,
            tier=tier,
            random_attempts=outcome.attempts,
            participant_count=count,
            ignored_exclusions=ignored,
            elapsed_sec=elapsed,
            details=f"PASS: tier={tier.value}, attempts={outcome.attempts}, participants={count}",
        )


def assign(
    participants: Iterable[ParticipantId],
    exclusions: Iterable[Any] = (),
    rng: Optional[random.Random] = None,
    config: Optional[MatchingConfig] = None,
) -> MatchingResult:
    """Построение назначения с конфигурацией по умолчанию (см. MatchingEngine.assign)."""
    return MatchingEngine(config).assign(participants, exclusions, rng)
