"""
Bipartite Matching — алгоритмы увеличивающих путей

Два алгоритма над двудольным графом (левая доля — givers, правая — recipients):

1. Hopcroft–Karp: максимальное паросочетание за O(E·√V).
   Используется как проверка выполнимости: совершенное паросочетание
   существует ⇔ существует derangement, уважающий exclusions.

2. Kuhn (repair): достраивание частичного паросочетания увеличивающими
   путями (BFS) в случайном порядке вершин и рёбер. Используется fallback
   tier'ом: выполнимость уже доказана, поэтому алгоритм гарантированно
   возвращает совершенное паросочетание.

Оба алгоритма итеративные (без рекурсии) и периодически сверяются с Deadline.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. match_left[u] == v ⇔ match_right[v] == u
2. Каждое ребро паросочетания — ребро графа
3. Если из свободной вершины нет увеличивающего пути, его не появится и
   после других увеличений (теорема Куна) — поэтому достаточно одного прохода
"""

import random
from collections import deque
from typing import Optional, Sequence

from src.matching.deadline import Deadline

UNMATCHED = -1

Adjacency = Sequence[Sequence[int]]


# =============================================================================
# HOPCROFT–KARP
# =============================================================================


def hopcroft_karp(
    adjacency: Adjacency,
    n_right: Optional[int] = None,
    deadline: Optional[Deadline] = None,
) -> list[int]:
    """
    Максимальное паросочетание (Hopcroft–Karp).

    Фазы:
    1. BFS от всех свободных левых вершин строит слои (dist)
    2. DFS по слоям находит максимальное множество вершинно-непересекающихся
       кратчайших увеличивающих путей
    Алгоритм завершается, когда BFS не находит ни одного свободного recipient.

    Args:
        adjacency: adjacency[u] — правые вершины, смежные с левой u
        n_right: размер правой доли (default: len(adjacency))
        deadline: лимит времени (опционально)

    Returns:
        match_left: match_left[u] = v или UNMATCHED

    Raises:
        DeadlineExceeded: если лимит времени исчерпан
    """
    n_left = len(adjacency)
    if n_right is None:
        n_right = n_left

    match_left = [UNMATCHED] * n_left
    match_right = [UNMATCHED] * n_right
    unreachable = n_left + 1

    while True:
        if deadline is not None:
            deadline.check()

        # 1. BFS: слои от свободных левых вершин
        dist = [unreachable] * n_left
        queue: deque[int] = deque()
        for u in range(n_left):
            if match_left[u] == UNMATCHED:
                dist[u] = 0
                queue.append(u)

        found_free = False
        while queue:
            u = queue.popleft()
            for v in adjacency[u]:
                if deadline is not None:
                    deadline.tick()
                w = match_right[v]
                if w == UNMATCHED:
                    found_free = True
                elif dist[w] == unreachable:
                    dist[w] = dist[u] + 1
                    queue.append(w)

        if not found_free:
            return match_left

        # 2. DFS по слоям (итеративно, с указателем на следующее ребро)
        next_edge = [0] * n_left
        for root in range(n_left):
            if match_left[root] != UNMATCHED:
                continue

            stack = [root]
            via: list[int] = []  # via[k]: recipient между stack[k] и stack[k + 1]
            while stack:
                u = stack[-1]
                if next_edge[u] < len(adjacency[u]):
                    v = adjacency[u][next_edge[u]]
                    next_edge[u] += 1
                    if deadline is not None:
                        deadline.tick()

                    w = match_right[v]
                    if w == UNMATCHED:
                        via.append(v)
                        for left, right in zip(stack, via):
                            match_left[left] = right
                            match_right[right] = left
                        break
                    if dist[w] == dist[u] + 1:
                        via.append(v)
                        stack.append(w)
                else:
                    # Тупик: вершина исключается из текущей фазы
                    dist[u] = unreachable
                    stack.pop()
                    if via:
                        via.pop()


def matching_size(match_left: Sequence[int]) -> int:
    return sum(1 for v in match_left if v != UNMATCHED)


def is_perfect(match_left: Sequence[int]) -> bool:
    return all(v != UNMATCHED for v in match_left)


# =============================================================================
# KUHN (RANDOMIZED REPAIR)
# =============================================================================


def _find_augmenting_path(
    root: int,
    adjacency: Adjacency,
    match_right: list[int],
    deadline: Optional[Deadline],
) -> Optional[tuple[int, dict[int, int]]]:
    """
    BFS поиск увеличивающего пути от свободной левой вершины root.

    Returns:
        (свободный recipient в конце пути, parent: recipient → left) или None
    """
    parent: dict[int, int] = {}
    visited_left = {root}
    queue = deque([root])

    while queue:
        u = queue.popleft()
        for v in adjacency[u]:
            if deadline is not None:
                deadline.tick()
            if v in parent:
                continue
            parent[v] = u
            w = match_right[v]
            if w == UNMATCHED:
                return v, parent
            if w not in visited_left:
                visited_left.add(w)
                queue.append(w)

    return None


def kuhn_repair(
    adjacency: Adjacency,
    rng: random.Random,
    initial: Optional[Sequence[int]] = None,
    deadline: Optional[Deadline] = None,
) -> Optional[list[int]]:
    """
    Достраивание паросочетания до совершенного (квадратный граф n × n).

    Порядок обхода вершин и рёбер перемешивается rng, поэтому повторные
    вызовы дают разные паросочетания.

    Args:
        adjacency: adjacency[u] — допустимые recipients для giver u
        rng: источник случайности (передаётся явно)
        initial: частичное паросочетание (initial[u] = v или UNMATCHED);
            рёбра, отсутствующие в графе, и конфликты по recipient отбрасываются
        deadline: лимит времени (опционально)

    Returns:
        match_left совершенного паросочетания или None, если его не существует

    Raises:
        DeadlineExceeded: если лимит времени исчерпан
    """
    n = len(adjacency)
    match_left = [UNMATCHED] * n
    match_right = [UNMATCHED] * n

    if initial is not None:
        for u, v in enumerate(initial):
            if v == UNMATCHED or match_right[v] != UNMATCHED or v not in adjacency[u]:
                continue
            match_left[u] = v
            match_right[v] = u

    rows = [list(row) for row in adjacency]
    for row in rows:
        rng.shuffle(row)
    order = list(range(n))
    rng.shuffle(order)

    for root in order:
        if match_left[root] != UNMATCHED:
            continue

        found = _find_augmenting_path(root, rows, match_right, deadline)
        if found is None:
            return None

        # Увеличение вдоль пути: каждый left на пути переключается на новый recipient
        v, parent = found
        while v != UNMATCHED:
            u = parent[v]
            previous = match_left[u]
            match_left[u] = v
            match_right[v] = u
            v = previous

    return match_left
