"""
Domain models and value objects.

Contains fundamental domain entities: Participant, ExclusionPair, Assignment, GiftExchange.
"""

from src.core.domain.assignment import Assignment
from src.core.domain.exchange import ExchangeStatus, GiftExchange
from src.core.domain.exclusion import ExclusionPair, find_duplicate_exclusions
from src.core.domain.participant import (
    Participant,
    ParticipantId,
    ParticipantStatus,
    accepted_ids,
)

__all__ = [
    # Participant model
    "Participant",
    "ParticipantId",
    "ParticipantStatus",
    "accepted_ids",
    # Exclusion model
    "ExclusionPair",
    "find_duplicate_exclusions",
    # Assignment model
    "Assignment",
    # Exchange model
    "GiftExchange",
    "ExchangeStatus",
]
