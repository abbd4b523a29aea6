"""
Тесты для доменных моделей: Participant, ExclusionPair, Assignment, GiftExchange

Проверяет:
1. Создание и валидацию моделей Pydantic
2. Инварианты (a != b, derangement, budget range)
3. Immutability (frozen=True)
4. Сериализацию/десериализацию JSON
"""

import json
from datetime import date

import pytest
from pydantic import ValidationError

from src.core.domain import (
    Assignment,
    ExchangeStatus,
    ExclusionPair,
    GiftExchange,
    Participant,
    ParticipantStatus,
    accepted_ids,
    find_duplicate_exclusions,
)


# =============================================================================
# PARTICIPANT TESTS
# =============================================================================


class TestParticipant:
    """Тесты для модели Participant"""

    @pytest.fixture
    def participant(self) -> Participant:
        return Participant(id=1, name="Ruthie", email="ruthie@example.com", status="accepted")

    def test_defaults(self):
        participant = Participant(id="p1", name="Tom")

        assert participant.status == ParticipantStatus.INVITED
        assert participant.email is None
        assert participant.matched_participant_id is None
        assert participant.is_accepted is False

    def test_status_parsed_from_string(self, participant):
        assert participant.status == ParticipantStatus.ACCEPTED
        assert participant.is_accepted is True

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Participant(id=1, name="   ")

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            Participant(id=1, name="Tom", status="maybe")

    def test_frozen(self, participant):
        with pytest.raises(ValidationError):
            participant.name = "Other"

    def test_with_match_returns_copy(self, participant):
        matched = participant.with_match(2)

        assert matched.matched_participant_id == 2
        assert participant.matched_participant_id is None
        assert matched.with_match(None).matched_participant_id is None

    def test_with_match_self_rejected(self, participant):
        with pytest.raises(ValueError):
            participant.with_match(1)

    def test_accepted_ids(self):
        participants = [
            Participant(id=1, name="A", status="accepted"),
            Participant(id=2, name="B", status="declined"),
            Participant(id=3, name="C", status="invited"),
            Participant(id=4, name="D", status="accepted"),
        ]
        assert accepted_ids(participants) == {1, 4}

    def test_json_roundtrip(self, participant):
        restored = Participant.model_validate_json(participant.model_dump_json())
        assert restored == participant


# =============================================================================
# EXCLUSION PAIR TESTS
# =============================================================================


class TestExclusionPair:
    """Тесты для модели ExclusionPair"""

    def test_same_participant_rejected(self):
        with pytest.raises(ValidationError, match="must be different"):
            ExclusionPair.of("matt", "matt")

    def test_key_is_unordered(self):
        assert ExclusionPair.of("matt", "stacy").key() == ExclusionPair.of("stacy", "matt").key()

    def test_forbids_both_directions(self):
        pair = ExclusionPair.of("matt", "stacy")

        assert pair.forbids("matt", "stacy")
        assert pair.forbids("stacy", "matt")
        assert not pair.forbids("matt", "tom")

    def test_involves_and_other(self):
        pair = ExclusionPair.of(1, 2)

        assert pair.involves(1)
        assert not pair.involves(3)
        assert pair.other(1) == 2
        assert pair.other(2) == 1
        with pytest.raises(ValueError):
            pair.other(3)

    def test_find_duplicates_including_mirrored(self):
        exclusions = [
            ExclusionPair.of("a", "b"),
            ExclusionPair.of("c", "d"),
            ExclusionPair.of("b", "a"),
            ExclusionPair.of("a", "b"),
        ]

        duplicates = find_duplicate_exclusions(exclusions)

        assert duplicates == [exclusions[2], exclusions[3]]

    def test_json_roundtrip(self):
        pair = ExclusionPair.of(10, 20)
        data = json.loads(pair.model_dump_json())

        assert data == {"participant_a_id": 10, "participant_b_id": 20}
        assert ExclusionPair(**data) == pair


# =============================================================================
# ASSIGNMENT TESTS
# =============================================================================


class TestAssignment:
    """Тесты для модели Assignment"""

    @pytest.fixture
    def assignment(self) -> Assignment:
        return Assignment(mapping={"A": "B", "B": "A", "C": "D", "D": "E", "E": "C"})

    def test_accessors(self, assignment):
        assert len(assignment) == 5
        assert "A" in assignment
        assert "Z" not in assignment
        assert assignment.recipient_of("C") == "D"
        assert assignment.giver_of("C") == "E"
        assert assignment.participants() == {"A", "B", "C", "D", "E"}
        assert list(assignment.givers()) == ["A", "B", "C", "D", "E"]

    def test_giver_of_unknown(self, assignment):
        with pytest.raises(KeyError):
            assignment.giver_of("Z")

    def test_cycles(self, assignment):
        assert assignment.cycles() == [["A", "B"], ["C", "D", "E"]]
        assert assignment.is_single_cycle() is False
        assert Assignment(mapping={1: 2, 2: 3, 3: 1}).is_single_cycle() is True

    def test_to_records(self, assignment):
        records = assignment.to_records()

        assert records[0] == {"giver_id": "A", "recipient_id": "B"}
        assert len(records) == 5

    def test_self_assignment_rejected(self):
        with pytest.raises(ValidationError, match="self-assignment"):
            Assignment(mapping={"A": "A", "B": "C", "C": "B"})

    def test_duplicate_recipient_rejected(self):
        with pytest.raises(ValidationError, match="duplicate recipients"):
            Assignment(mapping={"A": "B", "B": "A", "C": "A"})

    def test_recipient_outside_givers_rejected(self):
        with pytest.raises(ValidationError, match="exactly the set of givers"):
            Assignment(mapping={"A": "B", "B": "Z"})

    def test_too_small_rejected(self):
        with pytest.raises(ValidationError, match="at least 2"):
            Assignment(mapping={})

    def test_frozen(self, assignment):
        with pytest.raises(ValidationError):
            assignment.mapping = {"A": "B", "B": "A"}


# =============================================================================
# GIFT EXCHANGE TESTS
# =============================================================================


class TestGiftExchange:
    """Тесты для модели GiftExchange"""

    def test_defaults(self):
        exchange = GiftExchange(id=1, name="Family 2025")

        assert exchange.status == ExchangeStatus.DRAFT
        assert exchange.can_start is False

    @pytest.mark.parametrize(
        "status, expected",
        [
            ("draft", False),
            ("inviting", True),
            ("active", False),
            ("failed_to_start", True),
            ("completed", False),
        ],
    )
    def test_can_start(self, status, expected):
        assert GiftExchange(id=1, name="X", status=status).can_start is expected

    def test_budget_range(self):
        exchange = GiftExchange(id=1, name="X", budget_min=10, budget_max=50)
        assert exchange.budget_max == 50

        with pytest.raises(ValidationError, match="budget_max"):
            GiftExchange(id=1, name="X", budget_min=50, budget_max=10)

    def test_negative_budget_rejected(self):
        with pytest.raises(ValidationError):
            GiftExchange(id=1, name="X", budget_min=-1)

    def test_exchange_date_parsed(self):
        exchange = GiftExchange(id=1, name="X", exchange_date="2025-12-24")
        assert exchange.exchange_date == date(2025, 12, 24)

    def test_with_status(self):
        exchange = GiftExchange(id=1, name="X", status="inviting")
        active = exchange.with_status(ExchangeStatus.ACTIVE)

        assert active.status == ExchangeStatus.ACTIVE
        assert exchange.status == ExchangeStatus.INVITING
