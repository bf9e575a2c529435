"""
Contract Validation Module

Модуль для валидации JSON контрактов системы taxledger.
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    TokenConfigValidator,
    validate_token_config,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "TokenConfigValidator",
    # Functions
    "validate_token_config",
]
