"""
ExclusionPair — Запрещённая пара участников

Неупорядоченная пара участников, которые никогда не должны быть
сопоставлены друг с другом (например, супруги).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. participant_a_id != participant_b_id
2. Симметрия: (a, b) запрещает и a → b, и b → a
3. (a, b) и (b, a) — одна и та же пара (равенство через key())
"""

from typing import Iterable

from pydantic import BaseModel, Field, model_validator

from .participant import ParticipantId


class ExclusionPair(BaseModel):
    """
    Запрещённая пара участников exchange.

    Immutable модель (frozen=True). Создаётся/удаляется владельцем exchange
    (внешняя система), для matching engine — read-only вход.
    """

    participant_a_id: ParticipantId = Field(..., description="Первый участник пары")
    participant_b_id: ParticipantId = Field(..., description="Второй участник пары")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_distinct(self) -> "ExclusionPair":
        """Участник не может быть исключён сам с собой"""
        if self.participant_a_id == self.participant_b_id:
            raise ValueError(
                f"exclusion participants must be different, got {self.participant_a_id!r} twice"
            )
        return self

    @classmethod
    def of(cls, a: ParticipantId, b: ParticipantId) -> "ExclusionPair":
        return cls(participant_a_id=a, participant_b_id=b)

    def key(self) -> frozenset:
        """Ключ без учёта порядка: key(a, b) == key(b, a)."""
        return frozenset((self.participant_a_id, self.participant_b_id))

    def involves(self, participant_id: ParticipantId) -> bool:
        return participant_id in (self.participant_a_id, self.participant_b_id)

    def other(self, participant_id: ParticipantId) -> ParticipantId:
        """
        Второй участник пары.

        Raises:
            ValueError: если participant_id не входит в пару
        """
        if participant_id == self.participant_a_id:
            return self.participant_b_id
        if participant_id == self.participant_b_id:
            return self.participant_a_id
        raise ValueError(f"participant {participant_id!r} is not part of this exclusion")

    def forbids(self, giver_id: ParticipantId, recipient_id: ParticipantId) -> bool:
        """True если пара запрещает giver → recipient (в любом направлении)."""
        return self.key() == frozenset((giver_id, recipient_id))


def find_duplicate_exclusions(exclusions: Iterable[ExclusionPair]) -> list[ExclusionPair]:
    """
    Поиск дубликатов (включая зеркальные пары).

    Аналог проверки "This exclusion already exists" при создании исключения.

    Returns:
        Пары, повторяющие уже встреченную (в порядке появления)
    """
    seen: set[frozenset] = set()
    duplicates: list[ExclusionPair] = []
    for exclusion in exclusions:
        key = exclusion.key()
        if key in seen:
            duplicates.append(exclusion)
        else:
            seen.add(key)
    return duplicates
