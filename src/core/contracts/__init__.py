"""
Contract Validation Module

Модуль для валидации JSON контрактов между matching engine и внешними системами.
"""

from .payloads import (
    SCHEMA_VERSION,
    ExchangeInput,
    dump_assignment,
    parse_exchange_input,
)
from .validators import (
    AssignmentValidator,
    ContractValidator,
    ExchangeInputValidator,
    SchemaLoader,
    validate_assignment,
    validate_exchange_input,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ExchangeInputValidator",
    "AssignmentValidator",
    "ExchangeInput",
    # Functions
    "validate_exchange_input",
    "validate_assignment",
    "parse_exchange_input",
    "dump_assignment",
    "SCHEMA_VERSION",
]
