"""
ArithmeticConfig — настраиваемые параметры арифметики

Immutable Pydantic модель с валидацией диапазонов.
Активная конфигурация хранится на уровне процесса; тесты переключают её
через override_config() (например, чтобы форсировать split-умножение на
небольших операндах).

JSON документы конфигурации проходят JSON Schema валидацию
(contracts/schema/arithmetic_config.json) перед построением модели.
"""

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping

from pydantic import BaseModel, Field, ValidationError

from src.bignum.contracts import validate_arithmetic_config
from src.bignum.errors import InvalidArgument


class ArithmeticConfig(BaseModel):
    """Параметры алгоритмов bignum."""

    initial_capacity: int = Field(
        4, ge=1, description="Ёмкость буфера нового BigInteger (сегменты)"
    )
    multiply_threshold: int = Field(
        100,
        ge=4,
        description="Длина (сегменты), начиная с которой умножение идёт через split",
    )
    double_precision_digits: int = Field(
        16, ge=1, le=17, description="Значащие десятичные цифры, извлекаемые из double"
    )
    newton_guard_digits: int = Field(
        2, ge=0, description="Запас точности Newton-Raphson сверх len(a) + len(b)"
    )
    newton_extra_iterations: int = Field(
        4, ge=0, description="Дополнительные итерации Newton сверх 2 * log2(precision)"
    )
    correction_step_bound: int = Field(
        20, ge=1, description="Максимум шагов коррекции частного после Newton"
    )
    max_decimal_digits: int = Field(
        100_000_000,
        ge=1,
        description="Максимум десятичных цифр значения, собираемого из текста или double",
    )
    check_invariants: bool = Field(
        True, description="Проверять постусловия (divmod, split) после вычисления"
    )

    model_config = {"frozen": True}


_ACTIVE_CONFIG: ArithmeticConfig = ArithmeticConfig()


def get_config() -> ArithmeticConfig:
    """Текущая активная конфигурация."""
    return _ACTIVE_CONFIG


def set_config(config: ArithmeticConfig) -> ArithmeticConfig:
    """
    Установка активной конфигурации.

    Returns:
        Предыдущая конфигурация (для ручного восстановления)
    """
    global _ACTIVE_CONFIG
    if not isinstance(config, ArithmeticConfig):
        raise InvalidArgument(f"Expected ArithmeticConfig, got {type(config).__name__}")
    previous = _ACTIVE_CONFIG
    _ACTIVE_CONFIG = config
    return previous


@contextmanager
def override_config(**changes: Any) -> Iterator[ArithmeticConfig]:
    """
    Временная замена отдельных полей активной конфигурации.

    Изменения проходят полную pydantic валидацию.

    Examples:
        >>> with override_config(multiply_threshold=4):
        ...     pass
    """
    merged = {**get_config().model_dump(), **changes}
    try:
        config = ArithmeticConfig(**merged)
    except ValidationError as e:
        raise InvalidArgument(f"Invalid config override: {e}") from e

    previous = set_config(config)
    try:
        yield config
    finally:
        set_config(previous)


def load_config(document: Mapping[str, Any] | str | Path) -> ArithmeticConfig:
    """
    Построение конфигурации из JSON документа.

    Args:
        document: dict с полями конфигурации или путь к JSON файлу

    Returns:
        Провалидированный ArithmeticConfig (активная конфигурация не меняется)

    Raises:
        InvalidArgument: документ не проходит JSON Schema или pydantic валидацию
    """
    if isinstance(document, (str, Path)):
        with open(document, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidArgument(f"Config file {document} is not valid JSON: {e}") from e
    else:
        data = dict(document)

    validate_arithmetic_config(data)

    try:
        return ArithmeticConfig(**data)
    except ValidationError as e:
        raise InvalidArgument(f"Invalid arithmetic config: {e}") from e
