"""
Conversion — native int/double ↔ BigInteger, десятичный текст

Функциональность:
- from_int / to_int (to_int с асимметричной границей int32)
- from_double / to_double (from_double — осознанно lossy: не более
  double_precision_digits значащих цифр, округление half-up)
- from_decimal_string: конечный автомат (FSM) по грамматике
      sign? digits ('.' digits)? ([eE] sign? digits)?
- to_decimal_string / string_length: каноническая форма без экспоненты
- to_scientific / from_scientific: мантисса double + десятичная экспонента
  (используется Division Engine для затравки Newton-Raphson)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ошибка разбора обнаруживается до любой мутации destination
2. Дробная часть округляется half-up (от нуля) до разряда единиц
3. Строка из одних нулей даёт 0 независимо от экспоненты и знака
"""

import math
from enum import Enum
from typing import Final

from src.bignum.config import get_config
from src.bignum.digits import (
    POW10,
    RADIX,
    SEGMENT_DIGITS,
    BigInteger,
    set_zero,
)
from src.bignum.errors import InvalidArgument, Overflow

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Граница to_int: допустимый диапазон [-2^31, 2^31 - 1]
INT_OVERFLOW_BOUND: Final[int] = 2_147_483_648

# Максимум десятичных цифр, представимых в double без переполнения
DOUBLE_MAX_DIGITS: Final[int] = 308

# Длина цифр экспоненты, после которой она не переводится в int;
# длину самого значения ограничивает max_decimal_digits
MAX_EXPONENT_DIGITS: Final[int] = 18

# Цифры мантиссы, извлекаемые из double перед округлением
_DOUBLE_REPR_DIGITS: Final[int] = 17


# =============================================================================
# FSM ДЕСЯТИЧНОГО ТЕКСТА
# =============================================================================


class ParserState(str, Enum):
    """Состояния автомата разбора десятичной строки."""

    START = "START"
    SIGN = "SIGN"  # прочитан '+'/'-', ждём цифру
    INTEGER = "INTEGER"  # * цифры целой части
    POINT = "POINT"  # прочитана '.', ждём цифру
    FRACTION = "FRACTION"  # * цифры дробной части
    EXP_MARK = "EXP_MARK"  # прочитан 'e'/'E'
    EXP_SIGN = "EXP_SIGN"  # знак экспоненты, ждём цифру
    EXPONENT = "EXPONENT"  # * цифры экспоненты


class _CharClass(str, Enum):
    DIGIT = "DIGIT"
    SIGN = "SIGN"
    POINT = "POINT"
    EXP = "EXP"


ACCEPTING_STATES: Final[frozenset[ParserState]] = frozenset(
    {ParserState.INTEGER, ParserState.FRACTION, ParserState.EXPONENT}
)

_TRANSITIONS: Final[dict[tuple[ParserState, _CharClass], ParserState]] = {
    (ParserState.START, _CharClass.SIGN): ParserState.SIGN,
    (ParserState.START, _CharClass.DIGIT): ParserState.INTEGER,
    (ParserState.SIGN, _CharClass.DIGIT): ParserState.INTEGER,
    (ParserState.INTEGER, _CharClass.DIGIT): ParserState.INTEGER,
    (ParserState.INTEGER, _CharClass.POINT): ParserState.POINT,
    (ParserState.INTEGER, _CharClass.EXP): ParserState.EXP_MARK,
    (ParserState.POINT, _CharClass.DIGIT): ParserState.FRACTION,
    (ParserState.FRACTION, _CharClass.DIGIT): ParserState.FRACTION,
    (ParserState.FRACTION, _CharClass.EXP): ParserState.EXP_MARK,
    (ParserState.EXP_MARK, _CharClass.SIGN): ParserState.EXP_SIGN,
    (ParserState.EXP_MARK, _CharClass.DIGIT): ParserState.EXPONENT,
    (ParserState.EXP_SIGN, _CharClass.DIGIT): ParserState.EXPONENT,
    (ParserState.EXPONENT, _CharClass.DIGIT): ParserState.EXPONENT,
}


def _classify(ch: str) -> _CharClass | None:
    if "0" <= ch <= "9":
        return _CharClass.DIGIT
    if ch in "+-":
        return _CharClass.SIGN
    if ch == ".":
        return _CharClass.POINT
    if ch in "eE":
        return _CharClass.EXP
    return None


def _scan_decimal(text: str) -> tuple[bool, str, str, int]:
    """
    Прогон FSM по строке.

    Returns:
        (negative, integer_digits, fraction_digits, exponent)

    Raises:
        InvalidArgument: недопустимый символ или неакцепторное конечное состояние
    """
    state = ParserState.START
    negative = False
    exponent_negative = False
    integer_digits: list[str] = []
    fraction_digits: list[str] = []
    exponent_digits: list[str] = []

    for position, ch in enumerate(text):
        char_class = _classify(ch)
        next_state = _TRANSITIONS.get((state, char_class)) if char_class else None
        if next_state is None:
            raise InvalidArgument(
                f"Invalid decimal literal {text!r}: unexpected {ch!r} at position {position}"
            )

        if next_state is ParserState.SIGN:
            negative = ch == "-"
        elif next_state is ParserState.EXP_SIGN:
            exponent_negative = ch == "-"
        elif next_state is ParserState.INTEGER:
            integer_digits.append(ch)
        elif next_state is ParserState.FRACTION:
            fraction_digits.append(ch)
        elif next_state is ParserState.EXPONENT:
            exponent_digits.append(ch)
        state = next_state

    if state not in ACCEPTING_STATES:
        raise InvalidArgument(f"Invalid decimal literal {text!r}: incomplete input")

    exponent_text = "".join(exponent_digits).lstrip("0") or "0"
    if len(exponent_text) > MAX_EXPONENT_DIGITS:
        if not exponent_negative:
            raise InvalidArgument(f"Exponent out of range in {text!r}")
        # Заведомо ниже разряда единиц: округление даёт 0
        return negative, "", "", 0
    exponent = -int(exponent_text) if exponent_negative else int(exponent_text)

    return negative, "".join(integer_digits), "".join(fraction_digits), exponent


# =============================================================================
# СБОРКА ЗНАЧЕНИЯ ИЗ ЦИФР
# =============================================================================


def _increment_digits(run: str) -> str:
    """run + 1 для десятичной строки без знака ("" трактуется как 0)."""
    digits = list(run)
    index = len(digits) - 1
    while index >= 0 and digits[index] == "9":
        digits[index] = "0"
        index -= 1
    if index < 0:
        return "1" + "".join(digits)
    digits[index] = chr(ord(digits[index]) + 1)
    return "".join(digits)


def _round_to_units(run: str, exponent: int) -> tuple[str, int]:
    """
    Округление значения run * 10^exponent до целого (half-up по модулю).

    Отбрасываемые цифры удаляются, решение принимает старшая из них.
    Если разряд единиц лежит выше всех цифр, округляющая цифра равна 0.

    Returns:
        (run, exponent) с exponent >= 0
    """
    if exponent >= 0:
        return run, exponent

    keep = len(run) + exponent
    if keep < 0:
        return "", 0
    rounding_digit = run[keep]
    run = run[:keep]
    if rounding_digit >= "5":
        run = _increment_digits(run)
    return run, 0


def _assemble(dst: BigInteger, negative: bool, run: str, exponent: int) -> None:
    """
    dst := ±run * 10^exponent, exponent >= 0. Сегменты режутся по 9 цифр.

    Raises:
        InvalidArgument: результат длиннее max_decimal_digits (dst не изменяется)
    """
    run = run.lstrip("0")
    if not run:
        set_zero(dst)
        return

    limit = get_config().max_decimal_digits
    if len(run) + exponent > limit:
        raise InvalidArgument(
            f"Value with {len(run) + exponent} decimal digits exceeds max_decimal_digits={limit}"
        )

    whole_segments, offset = divmod(exponent, SEGMENT_DIGITS)
    text = run + "0" * offset
    segments = [0] * whole_segments
    for end in range(len(text), 0, -SEGMENT_DIGITS):
        segments.append(int(text[max(0, end - SEGMENT_DIGITS) : end]))

    dst.load(-1 if negative else 1, segments)


# =============================================================================
# NATIVE → BIGINTEGER
# =============================================================================


def from_int(dst: BigInteger, value: int) -> None:
    """
    dst := value. Модуль раскладывается на сегменты по основанию RADIX.

    Raises:
        InvalidArgument: value не является int
    """
    dst.check_live()
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgument(f"Expected int, got {type(value).__name__}")

    sign = (value > 0) - (value < 0)
    value = abs(value)
    segments = []
    while value > 0:
        value, low = divmod(value, RADIX)
        segments.append(low)
    dst.load(sign, segments)


def from_double(dst: BigInteger, value: float) -> None:
    """
    dst := round(value), осознанно lossy.

    Алгоритм:
    1. Значения в (-0.5, 0.5) → 0
    2. Из double берутся 17 значащих цифр
    3. Они округляются half-up до double_precision_digits (по умолчанию 16)
    4. Результат округляется half-up (от нуля) до разряда единиц;
       младшие сегменты ниже точности заполняются нулями

    Raises:
        InvalidArgument: NaN/Inf или не число

    Examples:
        2.5 → 3, -2.5 → -3, 1.2345678901234568e17 → 123456789012345700
    """
    dst.check_live()
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise InvalidArgument(f"Expected float, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidArgument(f"Cannot convert non-finite double {value} to BigInteger")

    if -0.5 < value < 0.5:
        set_zero(dst)
        return

    mantissa, _, exponent_text = format(abs(value), f".{_DOUBLE_REPR_DIGITS - 1}e").partition("e")
    run = mantissa.replace(".", "")
    exponent = int(exponent_text) - (len(run) - 1)

    precision = get_config().double_precision_digits
    dropped = len(run) - precision
    if dropped > 0:
        rounding_digit = run[precision]
        run = run[:precision]
        exponent += dropped
        if rounding_digit >= "5":
            run = _increment_digits(run)

    run, exponent = _round_to_units(run, exponent)
    _assemble(dst, value < 0, run, exponent)


def from_decimal_string(dst: BigInteger, text: str) -> None:
    """
    dst := целое, заданное десятичной строкой (с округлением half-up).

    Грамматика: sign? digits ('.' digits)? ([eE] sign? digits)?

    Целая и дробная части рассматриваются как единый ряд цифр, экспонента
    корректируется на длину дробной части. Отрицательная итоговая экспонента
    отбрасывает младшие цифры с округлением по старшей отброшенной.

    Raises:
        InvalidArgument: строка не соответствует грамматике или результат
            длиннее max_decimal_digits

    Examples:
        "123.45e2" → 12345, "123.456e2" → 12346, "5e-1" → 1, "0000e10" → 0
    """
    dst.check_live()
    if not isinstance(text, str):
        raise InvalidArgument(f"Expected str, got {type(text).__name__}")

    negative, integer_digits, fraction_digits, exponent = _scan_decimal(text)

    run, exponent = _round_to_units(
        integer_digits + fraction_digits, exponent - len(fraction_digits)
    )
    _assemble(dst, negative, run, exponent)


def from_scientific(dst: BigInteger, base: float, exponent: int) -> None:
    """
    dst := base * 10^exponent через десятичный парсер.

    base печатается с 20 знаками после точки (формат "%.20fE%d").
    """
    if not math.isfinite(base):
        raise InvalidArgument(f"Scientific base must be finite, got {base}")
    from_decimal_string(dst, f"{base:.20f}E{exponent}")


# =============================================================================
# BIGINTEGER → ТЕКСТ
# =============================================================================


def digit_count(value: BigInteger) -> int:
    """Число десятичных цифр |value| (1 для нуля)."""
    value.check_live()
    if value.sign == 0:
        return 1
    return SEGMENT_DIGITS * (value.length - 1) + len(str(value.magnitude[value.length - 1]))


def string_length(value: BigInteger) -> int:
    """Точная длина to_decimal_string(value)."""
    return digit_count(value) + (1 if value.sign < 0 else 0)


def to_decimal_string(value: BigInteger) -> str:
    """
    Каноническая десятичная форма.

    Старший сегмент без дополнения нулями, остальные — ровно 9 цифр;
    один ведущий '-' для отрицательных, "0" для нуля.
    """
    value.check_live()
    if value.sign == 0:
        return "0"

    data = value.magnitude
    top = value.length - 1
    parts = [str(data[top])]
    parts.extend(f"{data[index]:0{SEGMENT_DIGITS}d}" for index in range(top - 1, -1, -1))
    text = "".join(parts)
    return "-" + text if value.sign < 0 else text


def nth_digit(value: BigInteger, nth: int) -> int:
    """
    n-я десятичная цифра |value|, считая от разряда единиц (n = 0).

    Raises:
        InvalidArgument: nth < 0
    """
    value.check_live()
    if nth < 0:
        raise InvalidArgument(f"Digit index must be non-negative, got {nth}")
    segment, offset = divmod(nth, SEGMENT_DIGITS)
    if value.sign == 0 or segment >= value.length:
        return 0
    return (value.magnitude[segment] // POW10[offset]) % 10


# =============================================================================
# BIGINTEGER → NATIVE
# =============================================================================


def to_double(value: BigInteger) -> float:
    """
    Конверсия в double, сегменты накапливаются от старшего к младшему.

    Raises:
        Overflow: более DOUBLE_MAX_DIGITS десятичных цифр
    """
    value.check_live()
    if digit_count(value) > DOUBLE_MAX_DIGITS:
        raise Overflow(
            f"BigInteger with {digit_count(value)} digits exceeds double range"
        )

    result = 0.0
    data = value.magnitude
    for index in range(value.length - 1, -1, -1):
        result = result * RADIX + data[index]
    return -result if value.sign < 0 else result


def to_int(value: BigInteger) -> int:
    """
    Конверсия в int32.

    Граница асимметрична: -2147483648 допустим, +2147483648 — нет.

    Raises:
        Overflow: значение вне [-2^31, 2^31 - 1]
    """
    value.check_live()
    limit = INT_OVERFLOW_BOUND if value.sign < 0 else INT_OVERFLOW_BOUND - 1

    result = 0
    data = value.magnitude
    for index in range(value.length - 1, -1, -1):
        result = result * RADIX + data[index]
        if result > limit:
            raise Overflow(f"BigInteger {value} does not fit into int32")
    return -result if value.sign < 0 else result


def to_scientific(value: BigInteger) -> tuple[float, int]:
    """
    Нормализованная мантисса и десятичная экспонента.

    value ≈ base * 10^exponent, |base| в [1, 10), exponent = digit_count - 1.
    Мантисса собирается из double_precision_digits + 1 старших цифр.

    Returns:
        (base, exponent); для нуля (0.0, 0)
    """
    value.check_live()
    if value.sign == 0:
        return 0.0, 0

    exponent = digit_count(value) - 1
    take = min(get_config().double_precision_digits + 1, exponent + 1)
    digits = [str(nth_digit(value, exponent - i)) for i in range(take)]
    base = float(digits[0] + "." + "".join(digits[1:]) if take > 1 else digits[0])
    return (-base if value.sign < 0 else base), exponent
