"""
Deadline — wall-clock лимит расчёта

Часы инъецируются (по умолчанию time.monotonic), что позволяет
детерминированно тестировать ComputationTimeout.
"""

import time
from typing import Callable

Clock = Callable[[], float]


class DeadlineExceeded(Exception):
    """Лимит времени исчерпан (внутреннее исключение engine).

    Наружу не выходит: engine конвертирует его в ComputationTimeout.
    """

    def __init__(self, stage: str, elapsed_sec: float, timeout_sec: float):
        self.stage = stage
        self.elapsed_sec = elapsed_sec
        self.timeout_sec = timeout_sec
        super().__init__(
            f"{stage}: deadline exceeded after {elapsed_sec:.3f}s (limit {timeout_sec:.3f}s)"
        )


class Deadline:
    """Дедлайн одного вызова engine.

    check() сверяется с часами всегда, tick() — раз в check_interval вызовов,
    чтобы не дёргать часы в горячих циклах.
    """

    def __init__(self, timeout_sec: float, clock: Clock = time.monotonic, check_interval: int = 1):
        self.timeout_sec = timeout_sec
        self.check_interval = check_interval
        self._clock = clock
        self._started = clock()
        self._ticks = 0
        self.stage = "init"

    def elapsed(self) -> float:
        return self._clock() - self._started

    def check(self) -> None:
        """
        Raises:
            DeadlineExceeded: если лимит времени исчерпан
        """
        elapsed = self.elapsed()
        if elapsed > self.timeout_sec:
            raise DeadlineExceeded(self.stage, elapsed, self.timeout_sec)

    def tick(self) -> None:
        self._ticks += 1
        if self._ticks % self.check_interval == 0:
            self.check()
