"""
Assignment Verification — финальная проверка назначения

Используется engine как postcondition-gate перед возвратом результата и
внешними системами для аудита уже сохранённых назначений.

Проверки:
1. Каждый участник — giver (нет пропущенных / лишних)
2. Каждый участник — recipient ровно один раз (нет дубликатов)
3. Нет self-assignment
4. Нет рёбер из exclusion set (в любом направлении)
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from src.core.domain import ParticipantId
from src.matching.graph import participant_sort_key, normalize_exclusion


@dataclass(frozen=True)
class VerificationReport:
    """Результат проверки назначения."""

    valid: bool
    issues: tuple[str, ...] = field(default_factory=tuple)

    def summary(self) -> str:
        if self.valid:
            return "Verification passed"
        return "Assignment verification failed; " + "; ".join(self.issues)


def _sorted(ids: Iterable[ParticipantId]) -> list[ParticipantId]:
    return sorted(ids, key=participant_sort_key)


def verify_assignment(
    mapping: Mapping[ParticipantId, ParticipantId],
    participants: Iterable[ParticipantId],
    exclusions: Iterable[Any] = (),
) -> VerificationReport:
    """
    Проверка назначения giver → recipient.

    Args:
        mapping: giver_id → recipient_id
        participants: id accepted участников
        exclusions: ExclusionPair или пары id

    Returns:
        VerificationReport со списком всех нарушений
    """
    participant_set = set(participants)
    giver_set = set(mapping.keys())
    recipient_values = list(mapping.values())
    recipient_set = set(recipient_values)

    issues: list[str] = []

    missing_givers = participant_set - giver_set
    if missing_givers:
        issues.append(f"Missing givers: {_sorted(missing_givers)}")

    missing_recipients = participant_set - recipient_set
    if missing_recipients:
        issues.append(f"Missing recipients: {_sorted(missing_recipients)}")

    if len(recipient_values) != len(recipient_set):
        issues.append("Duplicate recipients detected")

    extra_givers = giver_set - participant_set
    if extra_givers:
        issues.append(f"Unexpected givers: {_sorted(extra_givers)}")

    extra_recipients = recipient_set - participant_set
    if extra_recipients:
        issues.append(f"Unexpected recipients: {_sorted(extra_recipients)}")

    self_assigned = [giver for giver, recipient in mapping.items() if giver == recipient]
    if self_assigned:
        issues.append(f"Self-assignment: {_sorted(self_assigned)}")

    excluded = {key for key in map(normalize_exclusion, exclusions) if key is not None}
    violations = [
        (giver, recipient)
        for giver, recipient in mapping.items()
        if frozenset((giver, recipient)) in excluded
    ]
    if violations:
        issues.append(f"Excluded pairs matched: {violations}")

    return VerificationReport(valid=not issues, issues=tuple(issues))
