"""
Eligibility Graph — двудольный граф "giver-копии × recipient-копии"

Ребро i → j существует тогда и только тогда, когда:
- i != j (нет self-assignment)
- {i, j} не входит в exclusion set

Участники индексируются 0..n-1 в детерминированном порядке, чтобы
результат при seeded RNG был воспроизводим. Граф симметричен: исключения
неупорядочены, поэтому i → j допустимо ⇔ j → i допустимо.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from src.core.domain import ExclusionPair, ParticipantId
from src.matching.deadline import Deadline

logger = logging.getLogger(__name__)


def participant_sort_key(participant_id: ParticipantId) -> tuple[str, str]:
    return (type(participant_id).__name__, str(participant_id))


def normalize_exclusion(item: Any) -> Optional[frozenset]:
    """
    Приведение исключения к неупорядоченному ключу.

    Принимает ExclusionPair, tuple/list/frozenset из двух id.

    Returns:
        frozenset из двух разных id или None, если элемент не является парой
    """
    if isinstance(item, ExclusionPair):
        return item.key()

    if isinstance(item, (str, bytes)):
        return None

    try:
        members = list(item)
    except TypeError:
        return None

    if len(members) != 2:
        return None

    try:
        key = frozenset(members)
    except TypeError:
        return None

    if len(key) != 2:
        return None
    return key


@dataclass(frozen=True)
class EligibilityGraph:
    """Граф допустимых рёбер giver → recipient."""

    ids: tuple[ParticipantId, ...]
    adjacency: tuple[tuple[int, ...], ...]
    allowed: tuple[frozenset, ...]
    excluded_keys: frozenset
    ignored_exclusions: int

    @property
    def size(self) -> int:
        return len(self.ids)

    @property
    def edge_count(self) -> int:
        return sum(len(row) for row in self.adjacency)

    def can_give(self, giver: int, recipient: int) -> bool:
        return recipient in self.allowed[giver]

    def isolated_givers(self) -> list[ParticipantId]:
        """Участники без единого допустимого получателя."""
        return [self.ids[i] for i, row in enumerate(self.adjacency) if not row]

    def to_mapping(self, match_left: list[int]) -> dict[ParticipantId, ParticipantId]:
        """Перевод совершенного паросочетания (индексы) в giver_id → recipient_id."""
        return {self.ids[i]: self.ids[j] for i, j in enumerate(match_left)}


def collect_exclusions(
    participant_ids: Iterable[ParticipantId],
    exclusions: Iterable[Any],
) -> tuple[frozenset, int]:
    """
    Отбор исключений, применимых к данному набору участников.

    Исключения, которые ссылаются на неизвестных (не accepted) участников,
    на одного и того же участника или не являются парой, игнорируются
    (не ошибка), их число возвращается вторым элементом.

    Returns:
        (frozenset неупорядоченных ключей, число проигнорированных)
    """
    known = set(participant_ids)

    excluded: set[frozenset] = set()
    ignored = 0
    for item in exclusions:
        key = normalize_exclusion(item)
        if key is None or not key <= known:
            ignored += 1
            continue
        excluded.add(key)

    if ignored:
        logger.warning(
            f"Ignored {ignored} exclusion(s) not referencing two distinct accepted participants"
        )
    return frozenset(excluded), ignored


def build_graph(
    participant_ids: Iterable[ParticipantId],
    exclusions: Iterable[Any],
    deadline: Optional[Deadline] = None,
) -> EligibilityGraph:
    """
    Построение eligibility graph.

    Args:
        participant_ids: id accepted участников
        exclusions: ExclusionPair или пары id (см. collect_exclusions)
        deadline: лимит времени (опционально, проверяется на каждой строке)

    Returns:
        EligibilityGraph

    Raises:
        DeadlineExceeded: если лимит времени исчерпан
    """
    ids = tuple(sorted(set(participant_ids), key=participant_sort_key))
    excluded, ignored = collect_exclusions(ids, exclusions)

    adjacency = []
    for i, giver in enumerate(ids):
        if deadline is not None:
            deadline.tick()
        row = tuple(
            j
            for j, recipient in enumerate(ids)
            if j != i and frozenset((giver, recipient)) not in excluded
        )
        adjacency.append(row)

    return EligibilityGraph(
        ids=ids,
        adjacency=tuple(adjacency),
        allowed=tuple(frozenset(row) for row in adjacency),
        excluded_keys=excluded,
        ignored_exclusions=ignored,
    )
