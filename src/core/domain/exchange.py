"""
GiftExchange — Модель exchange (группы обмена подарками)

Lifecycle статусов:
    draft → inviting → (matching engine) → active | failed_to_start
    failed_to_start → (matching engine) → active | failed_to_start
    active → completed

Бюджет и дата принимаются окружающей системой, но matching engine их
игнорирует.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class ExchangeStatus(str, Enum):
    """Статус exchange."""

    DRAFT = "draft"
    INVITING = "inviting"
    ACTIVE = "active"
    FAILED_TO_START = "failed_to_start"
    COMPLETED = "completed"


# =============================================================================
# GIFT EXCHANGE MODEL
# =============================================================================


class GiftExchange(BaseModel):
    """
    Снапшот exchange на момент старта.

    Immutable модель (frozen=True). Переход статуса создаёт копию
    через with_status().
    """

    id: int | str = Field(..., description="Идентификатор exchange")
    name: str = Field(..., min_length=1, description="Название exchange")
    status: ExchangeStatus = Field(ExchangeStatus.DRAFT, description="Текущий статус")

    # Метаданные (не используются engine)
    budget_min: float | None = Field(None, ge=0, description="Минимальный бюджет (nullable)")
    budget_max: float | None = Field(None, ge=0, description="Максимальный бюджет (nullable)")
    exchange_date: date | None = Field(None, description="Дата обмена (nullable)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_budget_range(self) -> "GiftExchange":
        """budget_max >= budget_min, если заданы оба"""
        if self.budget_min is not None and self.budget_max is not None:
            if self.budget_max < self.budget_min:
                raise ValueError(
                    f"budget_max {self.budget_max} must be >= budget_min {self.budget_min}"
                )
        return self

    @property
    def can_start(self) -> bool:
        """Старт матчинга возможен из inviting и повторно после failed_to_start."""
        return self.status in (ExchangeStatus.INVITING, ExchangeStatus.FAILED_TO_START)

    def with_status(self, status: ExchangeStatus) -> "GiftExchange":
        return self.model_copy(update={"status": status})
