"""Exchange Start — старт exchange (inviting → active | failed_to_start)

Порядок проверок:
1. Статус exchange: старт только из inviting (или повторно из failed_to_start)
2. Все участники приняли приглашение (declined допускаются только при
   allow_declined=True; invited блокируют всегда)
3. Matching engine на accepted участниках и исключениях exchange

Сервис ничего не сохраняет: ExchangeStartResult содержит полный change set
(все участники с записанным matched_participant_id + новый статус), который
caller пишет одной транзакцией. Notification dispatcher не должен видеть
частично записанное назначение.

Повторный старт уже active exchange блокируется проверкой статуса; engine
сам по себе не идемпотентен и всегда строит новое назначение.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from src.core.domain import (
    ExchangeStatus,
    ExclusionPair,
    GiftExchange,
    Participant,
    ParticipantId,
    ParticipantStatus,
    accepted_ids,
)
from src.matching import MatchingConfig, MatchingEngine, MatchingResult

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ExchangeStartConfig:
    """Конфигурация старта exchange."""

    # Разрешить старт, если часть участников отказалась (declined исключаются)
    allow_declined: bool = False

    matching: MatchingConfig = field(default_factory=MatchingConfig)


class StartBlockReason(str, Enum):
    """Причина отказа в старте."""

    EXCHANGE_NOT_STARTABLE = "exchange_not_startable"
    PARTICIPANTS_PENDING = "participants_pending"
    MATCHING_FAILED = "matching_failed"


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class ExchangeStartResult:
    """Результат старта exchange (change set для одной транзакции)."""

    started: bool
    block_reason: Optional[StartBlockReason]

    # Exchange после перехода (или без изменений, если переход не выполнялся)
    exchange: GiftExchange
    previous_status: ExchangeStatus
    transition_occurred: bool

    # Участники с записанным matched_participant_id (пусто, если не started)
    updated_participants: tuple[Participant, ...]

    # Результат engine (None, если engine не запускался)
    matching_result: Optional[MatchingResult]

    # Участники, блокирующие старт (participants_pending)
    pending_participants: tuple[ParticipantId, ...] = ()

    # Детали
    details: str = ""


# =============================================================================
# SERVICE
# =============================================================================


class ExchangeStartService:
    """Старт exchange: проверки lifecycle + matching engine + change set."""

    def __init__(
        self,
        config: Optional[ExchangeStartConfig] = None,
        engine: Optional[MatchingEngine] = None,
    ):
        """
        Args:
            config: конфигурация старта
            engine: matching engine (default: MatchingEngine(config.matching))
        """
        self.config = config or ExchangeStartConfig()
        self.engine = engine or MatchingEngine(self.config.matching)

    def start(
        self,
        exchange: GiftExchange,
        participants: Iterable[Participant],
        exclusions: Iterable[ExclusionPair] = (),
        rng: Optional[random.Random] = None,
    ) -> ExchangeStartResult:
        """Старт exchange.

        Args:
            exchange: снапшот exchange
            participants: все зарегистрированные участники exchange
            exclusions: исключения exchange
            rng: источник случайности для engine

        Returns:
            ExchangeStartResult с change set
        """
        participants = list(participants)

        # 1. Статус exchange
        if not exchange.can_start:
            return self._blocked(
                exchange,
                StartBlockReason.EXCHANGE_NOT_STARTABLE,
                details=f"Exchange is not in inviting status (status={exchange.status.value})",
            )

        # 2. Все участники приняли приглашение
        blocking_statuses = {ParticipantStatus.INVITED}
        if not self.config.allow_declined:
            blocking_statuses.add(ParticipantStatus.DECLINED)
        pending = tuple(p.id for p in participants if p.status in blocking_statuses)
        if pending:
            return self._blocked(
                exchange,
                StartBlockReason.PARTICIPANTS_PENDING,
                pending_participants=pending,
                details=f"Not all participants have accepted: {list(pending)}",
            )

        # 3. Matching engine
        matching_result = self.engine.assign(accepted_ids(participants), exclusions, rng)

        if not matching_result.success:
            failure = matching_result.failure
            logger.info(
                f"Exchange {exchange.id!r} failed to start: {failure.kind.value}"
            )
            return ExchangeStartResult(
                started=False,
                block_reason=StartBlockReason.MATCHING_FAILED,
                exchange=exchange.with_status(ExchangeStatus.FAILED_TO_START),
                previous_status=exchange.status,
                transition_occurred=exchange.status != ExchangeStatus.FAILED_TO_START,
                updated_participants=(),
                matching_result=matching_result,
                details=failure.message,
            )

        assignment = matching_result.assignment
        updated = tuple(
            p.with_match(assignment.recipient_of(p.id) if p.id in assignment else None)
            for p in participants
        )

        logger.info(
            f"Exchange {exchange.id!r} started: {len(assignment)} participants matched"
        )
        return ExchangeStartResult(
            started=True,
            block_reason=None,
            exchange=exchange.with_status(ExchangeStatus.ACTIVE),
            previous_status=exchange.status,
            transition_occurred=True,
            updated_participants=updated,
            matching_result=matching_result,
            details=f"PASS: {exchange.status.value} → active, {matching_result.details}",
        )

    def _blocked(
        self,
        exchange: GiftExchange,
        reason: StartBlockReason,
        details: str,
        pending_participants: tuple[ParticipantId, ...] = (),
    ) -> ExchangeStartResult:
        """Отказ до запуска engine: статус exchange не меняется."""
        logger.info(f"Exchange {exchange.id!r} start blocked: {reason.value}")
        return ExchangeStartResult(
            started=False,
            block_reason=reason,
            exchange=exchange,
            previous_status=exchange.status,
            transition_occurred=False,
            updated_participants=(),
            matching_result=None,
            pending_participants=pending_participants,
            details=details,
        )
