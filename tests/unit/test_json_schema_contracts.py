"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений типов и enum
- Детекция лишних полей (additionalProperties)
- Интеграция с Pydantic моделями (parse_exchange_input / dump_assignment)
"""

import copy
import json

import pytest
from jsonschema import Draft202012Validator, ValidationError
from pydantic import ValidationError as PydanticValidationError

from src.core.contracts import (
    SCHEMA_VERSION,
    AssignmentValidator,
    ExchangeInputValidator,
    SchemaLoader,
    dump_assignment,
    parse_exchange_input,
    validate_assignment,
    validate_exchange_input,
)
from src.core.domain import Assignment, ExchangeStatus, ExclusionPair, ParticipantStatus


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_exchange_input():
    """Валидный exchange_input для тестирования."""
    return {
        "schema_version": "1",
        "exchange": {
            "id": 42,
            "name": "Office Secret Santa",
            "status": "inviting",
            "budget_min": 10,
            "budget_max": 25.5,
            "exchange_date": "2025-12-19",
        },
        "participants": [
            {"id": 1, "name": "Matt", "email": "matt@example.com", "status": "accepted"},
            {"id": 2, "name": "Stacy", "email": None, "status": "accepted"},
            {"id": 3, "name": "Tom", "status": "accepted"},
            {"id": 4, "name": "Ruthie", "status": "accepted", "matched_participant_id": None},
        ],
        "exclusions": [
            {"participant_a_id": 1, "participant_b_id": 2},
        ],
    }


@pytest.fixture
def valid_assignment():
    """Валидный assignment для тестирования."""
    return {
        "schema_version": "1",
        "exchange_id": 42,
        "pairs": [
            {"giver_id": 1, "recipient_id": 3},
            {"giver_id": 3, "recipient_id": 2},
            {"giver_id": 2, "recipient_id": 4},
            {"giver_id": 4, "recipient_id": 1},
        ],
    }


# =============================================================================
# SCHEMA LOADING
# =============================================================================


class TestSchemaLoader:
    """Тесты загрузки схем."""

    @pytest.mark.parametrize("schema_name", ["exchange_input", "assignment"])
    def test_schema_is_valid_draft_2020_12(self, schema_name):
        loader = SchemaLoader()
        schema = loader.load_schema(schema_name)

        Draft202012Validator.check_schema(schema)
        assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"

    def test_schema_files_are_json(self):
        loader = SchemaLoader()
        for path in loader.schema_dir.glob("*.json"):
            with open(path, "r", encoding="utf-8") as f:
                json.load(f)

    def test_schema_cached(self):
        loader = SchemaLoader()
        assert loader.load_schema("assignment") is loader.load_schema("assignment")

    def test_unknown_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("unknown_contract")


# =============================================================================
# EXCHANGE INPUT VALIDATION
# =============================================================================


class TestExchangeInputValidation:
    """Тесты валидации exchange_input."""

    def test_valid_data_passes(self, valid_exchange_input):
        validate_exchange_input(valid_exchange_input)
        ExchangeInputValidator().validate(valid_exchange_input)

    def test_string_ids_allowed(self, valid_exchange_input):
        data = copy.deepcopy(valid_exchange_input)
        data["participants"][0]["id"] = "matt"
        data["exclusions"][0]["participant_a_id"] = "matt"

        validate_exchange_input(data)

    @pytest.mark.parametrize("field", ["schema_version", "exchange", "participants", "exclusions"])
    def test_missing_top_level_field(self, valid_exchange_input, field):
        data = copy.deepcopy(valid_exchange_input)
        del data[field]

        with pytest.raises(ValidationError):
            validate_exchange_input(data)

    def test_missing_participant_status(self, valid_exchange_input):
        data = copy.deepcopy(valid_exchange_input)
        del data["participants"][0]["status"]

        with pytest.raises(ValidationError):
            validate_exchange_input(data)

    def test_wrong_schema_version(self, valid_exchange_input):
        data = copy.deepcopy(valid_exchange_input)
        data["schema_version"] = "2"

        with pytest.raises(ValidationError):
            validate_exchange_input(data)

    @pytest.mark.parametrize(
        "path, value",
        [
            (("exchange", "status"), "running"),
            (("participants", 0, "status"), "maybe"),
        ],
    )
    def test_enum_violation(self, valid_exchange_input, path, value):
        data = copy.deepcopy(valid_exchange_input)
        target = data
        for key in path[:-1]:
            target = target[key]
        target[path[-1]] = value

        with pytest.raises(ValidationError):
            validate_exchange_input(data)

    def test_negative_id_rejected(self, valid_exchange_input):
        data = copy.deepcopy(valid_exchange_input)
        data["participants"][0]["id"] = -1

        with pytest.raises(ValidationError):
            validate_exchange_input(data)

    def test_additional_properties_rejected(self, valid_exchange_input):
        data = copy.deepcopy(valid_exchange_input)
        data["exclusions"][0]["reason"] = "married"

        with pytest.raises(ValidationError):
            validate_exchange_input(data)

    def test_validator_shared_per_schema(self):
        assert ExchangeInputValidator().validator is ExchangeInputValidator().validator

    def test_custom_schema_dir(self, tmp_path):
        (tmp_path / "exchange_input.json").write_text(
            json.dumps({"$schema": "https://json-schema.org/draft/2020-12/schema", "type": "object"}),
            encoding="utf-8",
        )

        ExchangeInputValidator(SchemaLoader(tmp_path)).validate({"anything": 1})

    def test_invalid_schema_rejected(self, tmp_path):
        (tmp_path / "broken.json").write_text(json.dumps({"type": 12}), encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# ASSIGNMENT VALIDATION
# =============================================================================


class TestAssignmentValidation:
    """Тесты валидации assignment."""

    def test_valid_data_passes(self, valid_assignment):
        validate_assignment(valid_assignment)

    def test_too_few_pairs(self, valid_assignment):
        data = copy.deepcopy(valid_assignment)
        data["pairs"] = data["pairs"][:1]

        with pytest.raises(ValidationError):
            AssignmentValidator().validate(data)

    def test_duplicate_pairs(self, valid_assignment):
        data = copy.deepcopy(valid_assignment)
        data["pairs"].append(dict(data["pairs"][0]))

        with pytest.raises(ValidationError):
            validate_assignment(data)

    def test_missing_recipient(self, valid_assignment):
        data = copy.deepcopy(valid_assignment)
        del data["pairs"][0]["recipient_id"]

        with pytest.raises(ValidationError):
            validate_assignment(data)


# =============================================================================
# PYDANTIC INTEGRATION
# =============================================================================


class TestPayloadAdapters:
    """parse_exchange_input / dump_assignment."""

    def test_parse_exchange_input(self, valid_exchange_input):
        parsed = parse_exchange_input(valid_exchange_input)

        assert parsed.exchange.id == 42
        assert parsed.exchange.status == ExchangeStatus.INVITING
        assert parsed.exchange.can_start is True
        assert len(parsed.participants) == 4
        assert all(p.status == ParticipantStatus.ACCEPTED for p in parsed.participants)
        assert parsed.exclusions == (ExclusionPair.of(1, 2),)

    def test_parse_rejects_schema_violation(self, valid_exchange_input):
        data = copy.deepcopy(valid_exchange_input)
        data["participants"][0]["name"] = ""

        with pytest.raises(ValidationError):
            parse_exchange_input(data)

    def test_parse_rejects_self_exclusion(self, valid_exchange_input):
        """Схема пропускает a == b, доменная модель — нет."""
        data = copy.deepcopy(valid_exchange_input)
        data["exclusions"].append({"participant_a_id": 3, "participant_b_id": 3})

        validate_exchange_input(data)
        with pytest.raises(PydanticValidationError):
            parse_exchange_input(data)

    @pytest.mark.parametrize("a, b", [(1, 2), (2, 1)])
    def test_parse_rejects_duplicate_exclusion(self, valid_exchange_input, a, b):
        """Повтор пары в любом порядке: "This exclusion already exists"."""
        data = copy.deepcopy(valid_exchange_input)
        data["exclusions"].append({"participant_a_id": a, "participant_b_id": b})

        validate_exchange_input(data)
        with pytest.raises(ValueError, match="This exclusion already exists"):
            parse_exchange_input(data)

    def test_parse_rejects_exclusion_outside_exchange(self, valid_exchange_input):
        data = copy.deepcopy(valid_exchange_input)
        data["exclusions"].append({"participant_a_id": 1, "participant_b_id": 99})

        validate_exchange_input(data)
        with pytest.raises(ValueError, match=r"must belong to the exchange: \[\[1, 99\]\]"):
            parse_exchange_input(data)

    def test_parse_accepts_distinct_exclusions(self, valid_exchange_input):
        data = copy.deepcopy(valid_exchange_input)
        data["exclusions"].append({"participant_a_id": 3, "participant_b_id": 4})

        parsed = parse_exchange_input(data)

        assert parsed.exclusions == (ExclusionPair.of(1, 2), ExclusionPair.of(3, 4))

    def test_parse_rejects_inverted_budget(self, valid_exchange_input):
        data = copy.deepcopy(valid_exchange_input)
        data["exchange"]["budget_min"] = 100

        with pytest.raises(PydanticValidationError):
            parse_exchange_input(data)

    def test_dump_assignment(self, valid_assignment):
        assignment = Assignment(mapping={1: 3, 3: 2, 2: 4, 4: 1})

        payload = dump_assignment(42, assignment)

        assert payload == valid_assignment
        assert payload["schema_version"] == SCHEMA_VERSION
