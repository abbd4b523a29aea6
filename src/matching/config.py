"""Конфигурация matching engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchingConfig:
    """Конфигурация matching engine.

    Бюджеты подобраны так, чтобы для групп до низких сотен участников
    расчёт укладывался в доли секунды.
    """

    # Минимум accepted участников для матчинга
    min_participants: int = 2

    # Randomized tier: число случайных перестановок до перехода к fallback
    random_attempts: int = 2000

    # Жёсткий wall-clock лимит на весь расчёт (секунды)
    timeout_sec: float = 2.0

    # Как часто (в итерациях) сверяться с часами внутри циклов
    clock_check_interval: int = 64

    def __post_init__(self):
        if self.min_participants < 2:
            raise ValueError(f"min_participants must be >= 2, got {self.min_participants}")
        if self.random_attempts < 0:
            raise ValueError(f"random_attempts must be non-negative, got {self.random_attempts}")
        if self.timeout_sec <= 0:
            raise ValueError(f"timeout_sec must be positive, got {self.timeout_sec}")
        if self.clock_check_interval < 1:
            raise ValueError(
                f"clock_check_interval must be >= 1, got {self.clock_check_interval}"
            )
