"""
Match Notices — payload'ы для notification dispatcher

Строятся только из успешного ExchangeStartResult, поэтому dispatcher никогда
не видит частичного назначения. Доставка (email и др.) — вне этого модуля.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field

from src.core.contracts import dump_assignment
from src.core.domain import ParticipantId
from src.lifecycle.exchange_start import ExchangeStartResult


class MatchNotice(BaseModel):
    """Уведомление одному giver: кому он дарит подарок."""

    exchange_id: int | str = Field(..., description="Идентификатор exchange")
    giver_id: ParticipantId = Field(..., description="Кто дарит")
    giver_name: str = Field(..., description="Имя дарителя")
    giver_email: str | None = Field(None, description="Куда отправлять (nullable)")
    recipient_id: ParticipantId = Field(..., description="Кому дарит")
    recipient_name: str = Field(..., description="Имя получателя")

    model_config = {"frozen": True}


def _require_started(result: ExchangeStartResult) -> None:
    if not result.started or result.matching_result is None:
        raise ValueError(
            f"exchange {result.exchange.id!r} has not started: {result.details}"
        )


def build_match_notices(result: ExchangeStartResult) -> list[MatchNotice]:
    """
    Уведомления для всех givers стартовавшего exchange.

    Args:
        result: успешный ExchangeStartResult

    Returns:
        По одному MatchNotice на каждого сопоставленного участника

    Raises:
        ValueError: если exchange не стартовал
    """
    _require_started(result)

    by_id = {p.id: p for p in result.updated_participants}
    notices = []
    for participant in result.updated_participants:
        if participant.matched_participant_id is None:
            continue
        recipient = by_id[participant.matched_participant_id]
        notices.append(
            MatchNotice(
                exchange_id=result.exchange.id,
                giver_id=participant.id,
                giver_name=participant.name,
                giver_email=participant.email,
                recipient_id=recipient.id,
                recipient_name=recipient.name,
            )
        )
    return notices


def build_assignment_payload(result: ExchangeStartResult) -> Dict[str, Any]:
    """
    assignment.json payload стартовавшего exchange.

    Raises:
        ValueError: если exchange не стартовал
        jsonschema.ValidationError: если payload не соответствует схеме
    """
    _require_started(result)
    return dump_assignment(result.exchange.id, result.matching_result.assignment)
