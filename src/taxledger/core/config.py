"""
TokenConfig — конфигурация развёртывания движка

Загрузка в два шага:
1. JSON Schema (token_config.json) — структура и форматы
2. Pydantic модель — типы, дефолты, инварианты ставок

Дефолты соответствуют исходному развёртыванию: CREPE V3 / CREPE, 9 decimals,
supply 690 000 000 000 * 10^9, buy/sell (100, 400), transfer (0, 0),
авто-конверсия включена, порог = supply / 10 000.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from taxledger.core.contracts import validate_token_config
from taxledger.core.domain.fee_schedule import FeeSchedule
from taxledger.core.domain.units import normalize_address

DEFAULT_DECIMALS = 9
DEFAULT_TOTAL_SUPPLY = 690_000_000_000 * 10**DEFAULT_DECIMALS
DEFAULT_THRESHOLD_DIVISOR = 10_000


class VenueSeed(BaseModel):
    """Площадка, регистрируемая при инициализации."""

    address: str = Field(..., description="Адрес пула")
    tier: int = Field(..., ge=0, description="Fee tier пула")

    model_config = {"frozen": True}

    @field_validator("address")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return normalize_address(v)


class SwapSettings(BaseModel):
    """Начальные параметры авто-конверсии (None — порог по умолчанию)."""

    threshold_amount: int | None = Field(None, gt=0, description="Порог treasury")
    enabled: bool = Field(True, description="Авто-конверсия включена")

    model_config = {"frozen": True}


class TokenConfig(BaseModel):
    """Полная конфигурация развёртывания."""

    name: str = Field("CREPE V3", min_length=1, description="Имя токена")
    symbol: str = Field("CREPE", min_length=1, description="Тикер")
    decimals: int = Field(DEFAULT_DECIMALS, ge=0, le=36, description="Десятичные знаки")
    total_supply: int = Field(DEFAULT_TOTAL_SUPPLY, ge=0, description="Эмиссия в минимальных единицах")

    self_address: str = Field(..., description="Адрес движка (владелец treasury)")
    authority: str = Field(..., description="Единственный authority")
    marketing_wallet: str = Field(..., description="Получатель marketing-выручки")

    fee_schedule: FeeSchedule = Field(default_factory=FeeSchedule, description="Начальные ставки")
    swap: SwapSettings = Field(default_factory=SwapSettings, description="Авто-конверсия")
    venues: list[VenueSeed] = Field(default_factory=list, description="Начальные площадки")
    excluded_accounts: list[str] = Field(default_factory=list, description="Дополнительные исключения")

    model_config = {"frozen": True}

    @field_validator("self_address", "authority", "marketing_wallet")
    @classmethod
    def _normalize_address(cls, v: str) -> str:
        return normalize_address(v)

    @field_validator("excluded_accounts")
    @classmethod
    def _normalize_accounts(cls, v: list[str]) -> list[str]:
        return [normalize_address(a) for a in v]

    @model_validator(mode="after")
    def _check_roles(self) -> "TokenConfig":
        if self.marketing_wallet == self.self_address:
            raise ValueError("marketing_wallet cannot be the engine address")
        return self

    @property
    def swap_threshold(self) -> int:
        """Фактический порог: явный или supply / 10 000 (минимум 1)."""
        if self.swap.threshold_amount is not None:
            return self.swap.threshold_amount
        return max(self.total_supply // DEFAULT_THRESHOLD_DIVISOR, 1)


def load_token_config(source: Union[str, Path, Dict[str, Any]]) -> TokenConfig:
    """
    Загрузка и валидация конфигурации.

    Args:
        source: путь к JSON файлу или уже разобранный dict

    Returns:
        TokenConfig

    Raises:
        jsonschema.ValidationError: нарушение token_config.json
        pydantic.ValidationError: нарушение инвариантов модели
    """
    if isinstance(source, dict):
        raw = source
    else:
        with open(source, "r", encoding="utf-8") as f:
            raw = json.load(f)

    validate_token_config(raw)
    return TokenConfig.model_validate(raw)
