"""
Contracts — JSON Schema документов конфигурации

Документ конфигурации (dict или JSON файл) сверяется со схемой до построения
pydantic модели: неизвестные ключи и неверные типы отсекаются здесь,
диапазоны продублированы в ArithmeticConfig.

Схемы: contracts/schema/<contract>.json, Draft 2020-12.
"""

import json
from pathlib import Path
from typing import Any, Final, Iterable, Mapping

import jsonschema
from jsonschema import Draft202012Validator

from src.bignum.errors import InvalidArgument

SCHEMA_DIR: Final[Path] = Path(__file__).parent / "schema"


# =============================================================================
# РЕЕСТР СХЕМ
# =============================================================================


class SchemaRegistry:
    """
    Кэш скомпилированных валидаторов по имени контракта.

    Схема проходит meta-validation один раз, при первом обращении.
    """

    def __init__(self, schema_dir: Path = SCHEMA_DIR):
        if not schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {schema_dir}")
        self.schema_dir = schema_dir
        self._validators: dict[str, Draft202012Validator] = {}

    def validator(self, contract: str) -> Draft202012Validator:
        """
        Валидатор контракта.

        Raises:
            FileNotFoundError: нет файла <contract>.json
            ValueError: файл не является JSON Schema Draft 2020-12
        """
        cached = self._validators.get(contract)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{contract}.json"
        if not path.is_file():
            raise FileNotFoundError(f"No schema for contract {contract!r}: {path}")
        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"{path.name} is not a valid Draft 2020-12 schema: {e.message}") from e

        compiled = Draft202012Validator(schema)
        self._validators[contract] = compiled
        return compiled


_REGISTRY = SchemaRegistry()


# =============================================================================
# КОНТРАКТЫ
# =============================================================================


def _format_path(path: Iterable[Any]) -> str:
    return ".".join(str(part) for part in path) or "<document>"


class ConfigContract:
    """
    Контракт одного типа документа.

    violations() перечисляет нарушения в виде "path: message",
    check() поднимает InvalidArgument со всеми нарушениями сразу.
    """

    def __init__(self, contract: str, registry: SchemaRegistry | None = None):
        self.contract = contract
        self._validator = (registry or _REGISTRY).validator(contract)

    def violations(self, document: Mapping[str, Any]) -> list[str]:
        errors = sorted(
            self._validator.iter_errors(document),
            key=lambda error: tuple(str(part) for part in error.path),
        )
        return [f"{_format_path(error.path)}: {error.message}" for error in errors]

    def accepts(self, document: Mapping[str, Any]) -> bool:
        return self._validator.is_valid(document)

    def check(self, document: Mapping[str, Any]) -> None:
        found = self.violations(document)
        if found:
            raise InvalidArgument(f"{self.contract} contract violation: " + "; ".join(found))


ARITHMETIC_CONFIG: Final[ConfigContract] = ConfigContract("arithmetic_config")


def validate_arithmetic_config(document: Mapping[str, Any]) -> None:
    """
    Проверка документа конфигурации арифметики.

    Raises:
        InvalidArgument: документ не соответствует arithmetic_config.json
    """
    ARITHMETIC_CONFIG.check(document)
