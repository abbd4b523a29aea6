"""Lifecycle — старт exchange и подготовка уведомлений.

- ExchangeStartService: inviting → active | failed_to_start
- Match notices: payload'ы для notification dispatcher
"""

from .exchange_start import (
    ExchangeStartConfig,
    ExchangeStartResult,
    ExchangeStartService,
    StartBlockReason,
)
from .notices import MatchNotice, build_assignment_payload, build_match_notices

__all__ = [
    "ExchangeStartService",
    "ExchangeStartConfig",
    "ExchangeStartResult",
    "StartBlockReason",
    "MatchNotice",
    "build_match_notices",
    "build_assignment_payload",
]
