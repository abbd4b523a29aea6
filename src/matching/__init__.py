"""Matching — назначение giver → recipient для gift exchange.

- Eligibility graph: i → j допустимо, если i != j и {i, j} не исключена
- Feasibility: совершенное паросочетание (Hopcroft–Karp)
- Construction: randomized tier + fallback repair (Kuhn)
- Ошибки возвращаются как MatchingResult.failure, не бросаются
"""

from .config import MatchingConfig
from .engine import MatchingEngine, assign
from .result import (
    ConstructionTier,
    MatchingErrorKind,
    MatchingFailed,
    MatchingFailure,
    MatchingResult,
)
from .verification import VerificationReport, verify_assignment

__all__ = [
    "MatchingEngine",
    "MatchingConfig",
    "assign",
    "MatchingResult",
    "MatchingFailure",
    "MatchingFailed",
    "MatchingErrorKind",
    "ConstructionTier",
    "VerificationReport",
    "verify_assignment",
]
