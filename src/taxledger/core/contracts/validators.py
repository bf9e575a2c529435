"""
JSON Schema контракты конфигурации

Схемы лежат в пакете (schema/*.json) и читаются через importlib.resources,
поэтому работают и из wheel, и из editable-установки.

Схемы:
- token_config.json — конфигурация развёртывания движка
"""

import json
from importlib.resources import files
from importlib.resources.abc import Traversable
from typing import Any, Dict

from jsonschema import Draft202012Validator, SchemaError
from jsonschema.exceptions import best_match


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Загрузчик и кэш схем из каталога пакета."""

    def __init__(self, schema_dir: Traversable | None = None):
        self._schema_dir = schema_dir or files("taxledger.core.contracts").joinpath("schema")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Args:
            schema_name: имя схемы без расширения ('token_config')

        Raises:
            FileNotFoundError: файла схемы нет
            ValueError: схема не проходит meta-validation Draft 2020-12
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        resource = self._schema_dir.joinpath(f"{schema_name}.json")
        if not resource.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_name}.json")

        schema = json.loads(resource.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор одного контракта поверх Draft202012Validator."""

    def __init__(self, schema_name: str, loader: SchemaLoader = _SCHEMA_LOADER):
        self.schema_name = schema_name
        self.validator = Draft202012Validator(loader.load_schema(schema_name))

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Из всех нарушений пробрасывается наиболее релевантное (best_match),
        а не первое попавшееся при обходе схемы.

        Raises:
            jsonschema.ValidationError
        """
        error = best_match(self.validator.iter_errors(data))
        if error is not None:
            raise error


class TokenConfigValidator(ContractValidator):
    """Валидатор token_config."""

    def __init__(self):
        super().__init__("token_config")


def validate_token_config(data: Dict[str, Any]) -> None:
    """
    Raises:
        jsonschema.ValidationError: data не соответствует token_config.json
    """
    TokenConfigValidator().validate(data)
