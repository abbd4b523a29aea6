"""
Payload Adapters — JSON контракты ↔ доменные модели

Связка между сырыми dict от внешних систем и Pydantic моделями:
1. Валидация JSON Schema (структура, типы, enum)
2. Построение доменных моделей (инварианты: a != b, budget range и др.)
3. Ссылочные проверки исключений: без дубликатов, только участники exchange
"""

from dataclasses import dataclass
from typing import Any, Dict

from src.core.contracts.validators import validate_assignment, validate_exchange_input
from src.core.domain import (
    Assignment,
    ExclusionPair,
    GiftExchange,
    Participant,
    ParticipantId,
    find_duplicate_exclusions,
)

SCHEMA_VERSION = "1"


@dataclass(frozen=True)
class ExchangeInput:
    """Разобранный exchange_input: снапшот exchange для старта."""

    exchange: GiftExchange
    participants: tuple[Participant, ...]
    exclusions: tuple[ExclusionPair, ...]


def parse_exchange_input(data: Dict[str, Any]) -> ExchangeInput:
    """
    Разбор exchange_input payload.

    Args:
        data: dict согласно contracts/schema/exchange_input.json

    Returns:
        ExchangeInput с доменными моделями

    Raises:
        jsonschema.ValidationError: нарушение схемы
        pydantic.ValidationError: нарушение доменных инвариантов
        ValueError: повторяющееся исключение (в т.ч. зеркальное) или
            исключение с участником не из этого exchange
    """
    validate_exchange_input(data)

    participants = tuple(Participant(**p) for p in data["participants"])
    exclusions = tuple(ExclusionPair(**e) for e in data["exclusions"])

    duplicates = find_duplicate_exclusions(exclusions)
    if duplicates:
        raise ValueError(
            f"This exclusion already exists: {[sorted(d.key(), key=str) for d in duplicates]}"
        )

    known_ids = {p.id for p in participants}
    foreign = [e for e in exclusions if not e.key() <= known_ids]
    if foreign:
        raise ValueError(
            f"Exclusion participants must belong to the exchange: "
            f"{[sorted(e.key(), key=str) for e in foreign]}"
        )

    return ExchangeInput(
        exchange=GiftExchange(**data["exchange"]),
        participants=participants,
        exclusions=exclusions,
    )


def dump_assignment(exchange_id: ParticipantId, assignment: Assignment) -> Dict[str, Any]:
    """
    Сериализация назначения в assignment payload.

    Returns:
        dict, прошедший валидацию assignment.json

    Raises:
        jsonschema.ValidationError: если результат не соответствует схеме
    """
    payload = {
        "schema_version": SCHEMA_VERSION,
        "exchange_id": exchange_id,
        "pairs": assignment.to_records(),
    }
    validate_assignment(payload)
    return payload
