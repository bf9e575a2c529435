"""Conversion — авто-конверсия накопленных комиссий через внешнюю площадку.

- AutoConversionTrigger: state machine IDLE/CONVERTING с ExecutionGuard
- ConversionVenue: порт площадки
"""

from .trigger import AutoConversionTrigger, ConversionResult
from .venue import ConversionProceeds, ConversionVenue

__all__ = [
    "AutoConversionTrigger",
    "ConversionResult",
    "ConversionProceeds",
    "ConversionVenue",
]
