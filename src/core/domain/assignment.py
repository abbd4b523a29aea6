"""
Assignment — Результат матчинга (giver → recipient)

Immutable Pydantic модель: тотальная биекция accepted-участников на себя
без неподвижных точек (derangement).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ (проверяются при создании):
1. Каждый участник ровно один раз giver и ровно один раз recipient
2. Нет self-assignment: mapping[p] != p
3. Минимум 2 участника

Соблюдение exclusions модель проверить не может (нет данных об
исключениях) — это делает src.matching.verification.
"""

from typing import Iterator

from pydantic import BaseModel, Field, field_validator

from .participant import ParticipantId


class Assignment(BaseModel):
    """
    Модель назначения giver → recipient.

    Не сохраняет сама себя: caller записывает matched_participant_id каждого
    участника в одной транзакции.
    """

    mapping: dict[ParticipantId, ParticipantId] = Field(
        ..., description="giver_id → recipient_id"
    )

    model_config = {"frozen": True}

    @field_validator("mapping")
    @classmethod
    def validate_derangement(
        cls, v: dict[ParticipantId, ParticipantId]
    ) -> dict[ParticipantId, ParticipantId]:
        """Проверка: биекция на множестве givers без неподвижных точек"""
        if len(v) < 2:
            raise ValueError(f"assignment needs at least 2 participants, got {len(v)}")

        fixed = [giver for giver, recipient in v.items() if giver == recipient]
        if fixed:
            raise ValueError(f"self-assignment for {fixed!r}")

        recipients = list(v.values())
        if len(set(recipients)) != len(recipients):
            raise ValueError("duplicate recipients in assignment")

        if set(recipients) != set(v.keys()):
            raise ValueError("recipients must be exactly the set of givers")

        return v

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.mapping)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self.mapping

    def givers(self) -> Iterator[ParticipantId]:
        return iter(self.mapping)

    def participants(self) -> set[ParticipantId]:
        return set(self.mapping)

    def recipient_of(self, giver_id: ParticipantId) -> ParticipantId:
        """
        Получатель подарка от giver.

        Raises:
            KeyError: если giver не участвует в назначении
        """
        return self.mapping[giver_id]

    def giver_of(self, recipient_id: ParticipantId) -> ParticipantId:
        """
        Даритель для recipient (обратное отображение).

        Raises:
            KeyError: если recipient не участвует в назначении
        """
        for giver, recipient in self.mapping.items():
            if recipient == recipient_id:
                return giver
        raise KeyError(recipient_id)

    def pairs(self) -> list[tuple[ParticipantId, ParticipantId]]:
        """Пары (giver, recipient) в порядке вставки."""
        return list(self.mapping.items())

    def cycles(self) -> list[list[ParticipantId]]:
        """
        Разложение перестановки на циклы.

        Пример: {A: B, B: A, C: D, D: E, E: C} → [[A, B], [C, D, E]]

        Returns:
            Список циклов, каждый начинается с первого встреченного giver
        """
        visited: set[ParticipantId] = set()
        result: list[list[ParticipantId]] = []
        for start in self.mapping:
            if start in visited:
                continue
            cycle = []
            current = start
            while current not in visited:
                visited.add(current)
                cycle.append(current)
                current = self.mapping[current]
            result.append(cycle)
        return result

    def is_single_cycle(self) -> bool:
        return len(self.cycles()) == 1

    def to_dict(self) -> dict[ParticipantId, ParticipantId]:
        return dict(self.mapping)

    def to_records(self) -> list[dict[str, ParticipantId]]:
        """Сериализация для assignment.json контракта."""
        return [
            {"giver_id": giver, "recipient_id": recipient}
            for giver, recipient in self.mapping.items()
        ]
