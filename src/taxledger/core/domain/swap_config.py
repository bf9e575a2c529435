"""
SwapConfig — конфигурация авто-конверсии накопленных комиссий

threshold_amount > 0, enabled: bool. Изменяется только через GovernanceGate,
повторная установка текущего значения отклоняется.
"""

from enum import Enum

from pydantic import BaseModel, Field


class ConversionState(str, Enum):
    """
    Состояние AutoConversionTrigger.

    IDLE: ожидание
    CONVERTING: идёт цикл конверсии (ExecutionGuard поднят)
    """

    IDLE = "IDLE"
    CONVERTING = "CONVERTING"


class SwapConfig(BaseModel):
    """Порог и флаг авто-конверсии."""

    threshold_amount: int = Field(..., gt=0, description="Порог treasury для запуска конверсии")
    enabled: bool = Field(default=True, description="Авто-конверсия включена")

    model_config = {"frozen": True}
