"""
JSON Schema Contract Validators

Валидация payload'ов на границе с внешними системами:
- exchange_input.json: снапшот exchange от participant registry
- assignment.json: финальное назначение для notification dispatcher

Схемы лежат в contracts/schema/ в корне репозитория (Draft 2020-12).
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).resolve().parents[3] / "contracts" / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Чтение схем из каталога с проверкой против meta-schema и кэшем."""

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or SCHEMA_DIR
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}
        self._validators: Dict[str, Draft202012Validator] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени файла без расширения.

        Raises:
            FileNotFoundError: нет файла <schema_name>.json
            ValueError: файл не является валидной Draft 2020-12 схемой
        """
        if schema_name not in self._schemas:
            schema_path = self._schema_dir / f"{schema_name}.json"
            if not schema_path.is_file():
                raise FileNotFoundError(f"Schema not found: {schema_path}")

            schema = json.loads(schema_path.read_text(encoding="utf-8"))
            try:
                Draft202012Validator.check_schema(schema)
            except jsonschema.SchemaError as e:
                raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e.message}") from e
            self._schemas[schema_name] = schema

        return self._schemas[schema_name]

    def validator_for(self, schema_name: str) -> Draft202012Validator:
        """Скомпилированный validator (один на схему)."""
        if schema_name not in self._validators:
            self._validators[schema_name] = Draft202012Validator(self.load_schema(schema_name))
        return self._validators[schema_name]


# Общий загрузчик: схемы неизменны в рамках процесса
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор одного контракта; подкласс задаёт schema_name."""

    schema_name: str = ""

    def __init__(self, loader: Optional[SchemaLoader] = None):
        self.validator = (loader or _SCHEMA_LOADER).validator_for(self.schema_name)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: первое найденное нарушение
        """
        self.validator.validate(data)


class ExchangeInputValidator(ContractValidator):
    schema_name = "exchange_input"


class AssignmentValidator(ContractValidator):
    schema_name = "assignment"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_exchange_input(data: Dict[str, Any]) -> None:
    ExchangeInputValidator().validate(data)


def validate_assignment(data: Dict[str, Any]) -> None:
    AssignmentValidator().validate(data)
