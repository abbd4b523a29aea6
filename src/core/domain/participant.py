"""
Participant — Модель участника обмена подарками

Immutable Pydantic модель участника одного exchange.
Участник создаётся при приглашении, статус меняется внешним invite-flow
(invited → accepted | declined). Matching engine читает только accepted.
"""

from enum import Enum
from typing import Iterable, Union

from pydantic import BaseModel, Field, field_validator


# Идентификатор участника (уникален в пределах exchange)
ParticipantId = Union[int, str]


# =============================================================================
# ENUMS
# =============================================================================


class ParticipantStatus(str, Enum):
    """Статус участника в exchange."""

    INVITED = "invited"
    ACCEPTED = "accepted"
    DECLINED = "declined"


# =============================================================================
# PARTICIPANT MODEL
# =============================================================================


class Participant(BaseModel):
    """
    Модель участника exchange.

    Immutable модель (frozen=True). Изменения (accept/decline, запись
    результата матчинга) создают новую копию через model_copy().
    """

    id: ParticipantId = Field(..., description="Идентификатор участника в exchange")
    name: str = Field(..., min_length=1, description="Имя участника")
    email: str | None = Field(None, description="Email для уведомлений (nullable)")
    status: ParticipantStatus = Field(
        ParticipantStatus.INVITED, description="Статус приглашения"
    )
    matched_participant_id: ParticipantId | None = Field(
        None, description="Получатель подарка после старта exchange (nullable)"
    )

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Имя не может состоять из одних пробелов"""
        if not v.strip():
            raise ValueError("name must not be blank")
        return v

    @property
    def is_accepted(self) -> bool:
        return self.status == ParticipantStatus.ACCEPTED

    def with_match(self, recipient_id: ParticipantId | None) -> "Participant":
        """
        Копия участника с записанным получателем.

        Args:
            recipient_id: id получателя (None — сброс)

        Returns:
            Новый Participant
        """
        if recipient_id is not None and recipient_id == self.id:
            raise ValueError(f"participant {self.id!r} cannot be matched to itself")
        return self.model_copy(update={"matched_participant_id": recipient_id})


def accepted_ids(participants: Iterable[Participant]) -> set[ParticipantId]:
    """
    Множество id участников со статусом accepted.

    Returns:
        set id (вход для matching engine)
    """
    return {p.id for p in participants if p.is_accepted}
