"""
Matching Result — типизированный результат matching engine

Ошибки engine не бросаются, а возвращаются в MatchingResult.failure:
- InsufficientParticipants: меньше min_participants accepted участников
  (детерминированно, retry бессмыслен без изменения данных)
- InfeasibleConstraints: совершенного паросочетания не существует
  (детерминированно, нужно убрать исключения или добавить участников)
- ComputationTimeout: превышен wall-clock лимит (transient, можно повторить:
  engine stateless и re-entrant)

Ни одна ошибка не оставляет частично построенного назначения: либо
полностью валидный Assignment, либо None.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from src.core.domain import Assignment, ParticipantId


# =============================================================================
# ENUMS
# =============================================================================


class MatchingErrorKind(str, Enum):
    """Тип ошибки matching engine."""

    INSUFFICIENT_PARTICIPANTS = "InsufficientParticipants"
    INFEASIBLE_CONSTRAINTS = "InfeasibleConstraints"
    COMPUTATION_TIMEOUT = "ComputationTimeout"


class ConstructionTier(str, Enum):
    """Tier, построивший назначение."""

    RANDOMIZED = "randomized"
    FALLBACK = "fallback"


# =============================================================================
# FAILURE
# =============================================================================


@dataclass(frozen=True)
class MatchingFailure:
    """Структурированная ошибка engine (сообщение пригодно для владельца exchange)."""

    kind: MatchingErrorKind
    message: str
    retryable: bool

    # Диагностика
    participant_count: int = 0
    isolated_participants: tuple[ParticipantId, ...] = field(default_factory=tuple)
    max_matching_size: Optional[int] = None
    stage: Optional[str] = None


class MatchingFailed(Exception):
    """Исключение для caller'ов, предпочитающих raise (MatchingResult.unwrap)."""

    def __init__(self, failure: MatchingFailure):
        self.failure = failure
        super().__init__(f"{failure.kind.value}: {failure.message}")


def insufficient_participants(count: int, minimum: int) -> MatchingFailure:
    return MatchingFailure(
        kind=MatchingErrorKind.INSUFFICIENT_PARTICIPANTS,
        message=(
            f"At least {minimum} accepted participants are needed to draw names, "
            f"got {count}. Invite more people or wait for them to accept."
        ),
        retryable=False,
        participant_count=count,
    )


def infeasible_constraints(
    count: int,
    isolated: list[ParticipantId],
    max_matching_size: int,
) -> MatchingFailure:
    message = (
        "No valid arrangement possible: remove some exclusions or add participants."
    )
    if isolated:
        message += f" Participants with no allowed recipient: {isolated}."
    return MatchingFailure(
        kind=MatchingErrorKind.INFEASIBLE_CONSTRAINTS,
        message=message,
        retryable=False,
        participant_count=count,
        isolated_participants=tuple(isolated),
        max_matching_size=max_matching_size,
    )


def computation_timeout(count: int, timeout_sec: float, stage: str) -> MatchingFailure:
    return MatchingFailure(
        kind=MatchingErrorKind.COMPUTATION_TIMEOUT,
        message=(
            f"Matching did not finish within {timeout_sec:.2f}s. "
            "Nothing was assigned; it is safe to try again."
        ),
        retryable=True,
        participant_count=count,
        stage=stage,
    )


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class MatchingResult:
    """Результат вызова matching engine."""

    success: bool
    assignment: Optional[Assignment]
    failure: Optional[MatchingFailure]

    # Как было построено назначение
    tier: Optional[ConstructionTier] = None
    random_attempts: int = 0

    # Диагностика входа
    participant_count: int = 0
    ignored_exclusions: int = 0
    elapsed_sec: float = 0.0

    # Детали
    details: str = ""

    @property
    def error_kind(self) -> Optional[MatchingErrorKind]:
        return self.failure.kind if self.failure is not None else None

    def unwrap(self) -> Assignment:
        """
        Назначение или исключение.

        Raises:
            MatchingFailed: если engine вернул ошибку
        """
        if self.failure is not None:
            raise MatchingFailed(self.failure)
        assert self.assignment is not None
        return self.assignment
