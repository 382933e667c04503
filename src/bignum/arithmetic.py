"""
Arithmetic — сложение, вычитание, умножение, степени

Все операции мутируют destination на месте и нормализуют его (pack)
перед возвратом.

Контракты алиасинга (dst is src):
- add: вычисляется как multiply_int(dst, 2)
- subtract: результат 0
- multiply: источник предварительно копируется во временный BigInteger

Умножение:
- обе длины < multiply_threshold → школьный алгоритм O(n·m)
- одна длина >= порога → split длинного операнда пополам, 2 произведения
- обе длины >= порога → Karatsuba: 3 рекурсивных произведения

Сдвиги на степени десяти структурные: вставка/удаление целых сегментов
плюс одно умножение/деление на 10^k, k < 9.
"""

import logging
from typing import Final

from src.bignum.config import get_config
from src.bignum.conversion import from_int
from src.bignum.digits import (
    INT32_MAX,
    INT32_MIN,
    POW10,
    RADIX,
    SEGMENT_DIGITS,
    BigInteger,
    check_live,
    copy,
    copy_of,
    is_neg_one,
    is_one,
    negate,
    set_one,
    set_zero,
)
from src.bignum.errors import InvalidArgument, InvariantViolation

LOG = logging.getLogger(__name__)

# Максимум десятичных цифр native int (int32)
INT_MAX_DIGITS: Final[int] = 10

# На сколько сегментов может вырасти значение после операции с native int
MAX_SEGMENT_INCREMENT: Final[int] = INT_MAX_DIGITS // SEGMENT_DIGITS + 1


def _require_int(value: int, name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgument(f"{name} must be int, got {type(value).__name__}")


def _require_native_int(value: int, name: str) -> None:
    _require_int(value, name)
    if not INT32_MIN <= value <= INT32_MAX:
        raise InvalidArgument(f"{name} must fit into int32, got {value}")


# =============================================================================
# СЛОЖЕНИЕ / ВЫЧИТАНИЕ
# =============================================================================


def add(dst: BigInteger, src: BigInteger) -> None:
    """
    dst := dst + src.

    Общий путь: знак вносится в каждый сегмент (все сегменты отрицательного
    операнда меняют знак), сегменты суммируются, знак результата берётся
    у старшего ненулевого сегмента, затем сегменты приводятся к
    неотрицательным и перенос/заём распространяется одним проходом.
    """
    check_live(dst, src)
    if dst.sign == 0:
        copy(dst, src)
        return
    if src.sign == 0:
        return
    if dst is src:
        multiply_int(dst, 2)
        return
    if src.length == 1:
        add_int(dst, src.sign * src.magnitude[0])
        return

    size = max(dst.length, src.length) + 1
    dst.ensure_capacity(size)
    data = dst.magnitude
    for index in range(dst.length, size):
        data[index] = 0
    dst.length = size

    if dst.sign < 0:
        for index in range(size):
            data[index] = -data[index]

    src_data = src.magnitude
    if src.sign < 0:
        for index in range(src.length):
            data[index] -= src_data[index]
    else:
        for index in range(src.length):
            data[index] += src_data[index]

    # A + (-A) даёт 0
    sign = 0
    for index in range(size - 1, -1, -1):
        if data[index] != 0:
            sign = 1 if data[index] > 0 else -1
            break

    if sign < 0:
        for index in range(size):
            data[index] = -data[index]

    # Старший сегмент не переполняется: size на 1 больше длин операндов
    for index in range(size - 1):
        if data[index] < 0:
            data[index] += RADIX
            data[index + 1] -= 1
        elif data[index] >= RADIX:
            data[index] -= RADIX
            data[index + 1] += 1

    dst.sign = sign
    dst.pack()


def add_int(dst: BigInteger, value: int) -> None:
    """
    dst := dst + value.

    Fast path для |value| < RADIX: если dst длиннее одного сегмента, знак
    не меняется, а длина растёт не более чем на MAX_SEGMENT_INCREMENT.
    Иначе — полное сложение через временный BigInteger.
    """
    dst.check_live()
    _require_int(value, "value")

    if dst.sign == 0:
        from_int(dst, value)
        return
    if value == 0:
        return

    if -RADIX < value < RADIX:
        data = dst.magnitude
        if dst.length == 1:
            from_int(dst, dst.sign * data[0] + value)
            return

        value_sign = 1 if value > 0 else -1
        amount = abs(value)
        dst.ensure_capacity(dst.length + MAX_SEGMENT_INCREMENT)
        data = dst.magnitude
        data[dst.length] = 0
        dst.length += 1

        index = 0
        if value_sign == dst.sign:
            while amount:
                data[index] += amount
                if data[index] >= RADIX:
                    data[index] -= RADIX
                    amount = 1
                else:
                    amount = 0
                index += 1
        else:
            while amount:
                data[index] -= amount
                if data[index] < 0:
                    data[index] += RADIX
                    amount = 1
                else:
                    amount = 0
                index += 1
        dst.pack()
        return

    with BigInteger() as operand:
        from_int(operand, value)
        add(dst, operand)


def subtract(dst: BigInteger, src: BigInteger) -> None:
    """
    dst := dst - src как add(dst, -src); знак src восстанавливается.

    dst is src → 0.
    """
    check_live(dst, src)
    if dst is src:
        set_zero(dst)
        return
    negate(src)
    try:
        add(dst, src)
    finally:
        negate(src)


def subtract_int(dst: BigInteger, value: int) -> None:
    _require_int(value, "value")
    add_int(dst, -value)


# =============================================================================
# УМНОЖЕНИЕ
# =============================================================================


def multiply_int(dst: BigInteger, value: int) -> None:
    """
    dst := dst * value, value в диапазоне int32.

    Raises:
        InvalidArgument: value не int или вне int32
    """
    dst.check_live()
    _require_native_int(value, "value")

    if value == 0:
        set_zero(dst)
        return
    if value == 1:
        return
    if value == -1:
        negate(dst)
        return

    if value < 0:
        negate(dst)
        value = -value

    dst.ensure_capacity(dst.length + MAX_SEGMENT_INCREMENT)
    data = dst.magnitude
    carry = 0
    index = 0
    while index < dst.length or carry:
        if index >= dst.length:
            data[index] = 0
        carry, data[index] = divmod(data[index] * value + carry, RADIX)
        index += 1
    dst.length = index
    dst.pack()


def _multiply_schoolbook(dst: BigInteger, src: BigInteger) -> None:
    """Школьное умножение с накоплением в массиве длины la + lb."""
    a = dst.magnitude[: dst.length]
    b = src.magnitude[: src.length]
    b_len = len(b)
    result = [0] * (len(a) + b_len)

    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        k = i
        for y in b:
            carry, result[k] = divmod(result[k] + x * y + carry, RADIX)
            k += 1
        while carry:
            carry, result[k] = divmod(result[k] + carry, RADIX)
            k += 1

    dst.load(dst.sign * src.sign, result)


def split(src: BigInteger, low_len: int) -> tuple[BigInteger, BigInteger]:
    """
    Разбиение src = high * RADIX^low_len + low.

    Обе части получают знак src (high может оказаться нулём).
    Владелец обеих частей — вызывающий код.

    Raises:
        InvalidArgument: low_len < 0
    """
    src.check_live()
    _require_int(low_len, "low_len")
    if low_len < 0:
        raise InvalidArgument(f"low_len must be non-negative, got {low_len}")

    high = BigInteger()
    low = BigInteger()
    if low_len >= src.length:
        copy(low, src)
    else:
        high.load(src.sign, src.magnitude[low_len : src.length])
        low.load(src.sign, src.magnitude[:low_len])

    if get_config().check_invariants:
        with copy_of(high) as recombined:
            multiply_by_pow10(recombined, low_len * SEGMENT_DIGITS)
            add(recombined, low)
            if recombined.segments() != src.segments() or recombined.sign != src.sign:
                high.release()
                low.release()
                raise InvariantViolation(f"split at {low_len} does not recombine")
    return high, low


def _multiply_split_longer(dst: BigInteger, src: BigInteger) -> None:
    """Только один операнд >= порога: делим его пополам, два произведения."""
    if src.length >= dst.length:
        low_len = src.length // 2
        high, low = split(src, low_len)
        with high, low, copy_of(dst) as partial:
            multiply(partial, high)
            multiply_by_pow10(partial, low_len * SEGMENT_DIGITS)
            multiply(dst, low)
            add(dst, partial)
    else:
        low_len = dst.length // 2
        high, low = split(dst, low_len)
        with high, low:
            multiply(high, src)
            multiply_by_pow10(high, low_len * SEGMENT_DIGITS)
            multiply(low, src)
            copy(dst, high)
            add(dst, low)


def _multiply_karatsuba(dst: BigInteger, src: BigInteger) -> None:
    """
    Оба операнда >= порога.

    a = a1 * B^m + a0, b = b1 * B^m + b0
    a * b = z2 * B^2m + z1 * B^m + z0, где
        z2 = a1 * b1, z0 = a0 * b0, z1 = (a1 + a0)(b1 + b0) - z2 - z0
    """
    low_len = (dst.length + src.length) // 4
    shift = low_len * SEGMENT_DIGITS
    a_high, a_low = split(dst, low_len)
    b_high, b_low = split(src, low_len)
    with a_high, a_low, b_high, b_low, BigInteger() as middle, BigInteger() as b_sum:
        copy(middle, a_high)
        add(middle, a_low)
        copy(b_sum, b_high)
        add(b_sum, b_low)
        multiply(middle, b_sum)

        multiply(a_high, b_high)
        multiply(a_low, b_low)
        subtract(middle, a_high)
        subtract(middle, a_low)

        copy(dst, a_high)
        multiply_by_pow10(dst, shift)
        add(dst, middle)
        multiply_by_pow10(dst, shift)
        add(dst, a_low)


def multiply(dst: BigInteger, src: BigInteger) -> None:
    """
    dst := dst * src.

    Порог multiply_threshold берётся из активной конфигурации.
    """
    check_live(dst, src)
    if dst is src:
        with copy_of(src) as operand:
            multiply(dst, operand)
        return

    if dst.sign == 0 or src.sign == 0:
        set_zero(dst)
        return

    threshold = get_config().multiply_threshold
    if dst.length < threshold and src.length < threshold:
        _multiply_schoolbook(dst, src)
    elif dst.length >= threshold and src.length >= threshold:
        LOG.debug("karatsuba multiply: %d x %d segments", dst.length, src.length)
        _multiply_karatsuba(dst, src)
    else:
        LOG.debug("split multiply: %d x %d segments", dst.length, src.length)
        _multiply_split_longer(dst, src)


# =============================================================================
# СТЕПЕНИ ДЕСЯТИ
# =============================================================================


def multiply_by_pow10(value: BigInteger, power: int) -> None:
    """
    value := value * 10^power (power < 0 → divide_by_pow10).

    Целые сегменты вставляются структурно, остаток — одним multiply_int.
    """
    value.check_live()
    _require_int(power, "power")
    if power < 0:
        divide_by_pow10(value, -power)
        return
    if power == 0 or value.sign == 0:
        return

    shift, rest = divmod(power, SEGMENT_DIGITS)
    if shift:
        length = value.length
        value.ensure_capacity(length + shift)
        data = value.magnitude
        data[shift : shift + length] = data[:length]
        data[:shift] = [0] * shift
        value.length = length + shift

    if rest:
        multiply_int(value, POW10[rest])
    else:
        value.pack()


def _divide_magnitude_small(value: BigInteger, divisor: int) -> int:
    """|value| := |value| // divisor за один проход от старшего сегмента. Returns остаток."""
    data = value.magnitude
    remainder = 0
    for index in range(value.length - 1, -1, -1):
        data[index], remainder = divmod(remainder * RADIX + data[index], divisor)
    value.pack()
    return remainder


def divide_by_pow10(value: BigInteger, power: int) -> None:
    """
    value := floor(value / 10^power) (power < 0 → multiply_by_pow10).

    Целые сегменты отбрасываются структурно, остаток — одним делением
    на 10^k, k < 9. Для отрицательных значений округление к -inf.
    """
    value.check_live()
    _require_int(power, "power")
    if power < 0:
        multiply_by_pow10(value, -power)
        return
    if power == 0 or value.sign == 0:
        return

    negative = value.sign < 0
    shift, rest = divmod(power, SEGMENT_DIGITS)
    if value.length <= shift:
        # Все цифры ниже разряда единиц
        if negative:
            from_int(value, -1)
        else:
            set_zero(value)
        return

    data = value.magnitude
    inexact = any(data[:shift])
    if shift:
        remaining = value.length - shift
        data[:remaining] = data[shift : value.length]
        value.length = remaining

    if rest and _divide_magnitude_small(value, POW10[rest]):
        inexact = True
    else:
        value.pack()

    if negative and inexact:
        add_int(value, -1)


def mod_by_pow10(value: BigInteger, power: int) -> None:
    """
    Оставляет младшие power десятичных цифр модуля, знак сохраняется.

    Raises:
        InvalidArgument: power < 0
    """
    value.check_live()
    _require_int(power, "power")
    if power < 0:
        raise InvalidArgument(f"power must be non-negative, got {power}")

    keep_segments, keep_digits = divmod(power, SEGMENT_DIGITS)
    if keep_segments < value.length:
        value.length = keep_segments + 1
        value.magnitude[keep_segments] %= POW10[keep_digits]
        value.pack()


# =============================================================================
# ДЕЛЕНИЕ НА NATIVE INT
# =============================================================================


def divide_by_int(value: BigInteger, divisor: int) -> None:
    """
    value := floor(value / divisor), divisor в диапазоне int32.

    Long division за один проход; при ненулевом остатке и разных знаках
    частное уменьшается на 1, чтобы остаток имел знак делителя.

    Raises:
        InvalidArgument: divisor == 0 или вне int32
    """
    value.check_live()
    _require_native_int(divisor, "divisor")
    if divisor == 0:
        raise InvalidArgument("Division by zero")

    if divisor < 0:
        negate(value)
        divisor = -divisor
    if divisor == 1:
        return

    negative = value.sign < 0
    remainder = _divide_magnitude_small(value, divisor)
    if negative and remainder:
        add_int(value, -1)


def mod_by_int(value: BigInteger, divisor: int) -> int:
    """
    value mod divisor; результат имеет знак делителя (или 0).

    value не изменяется.

    Raises:
        InvalidArgument: divisor == 0 или вне int32
    """
    value.check_live()
    _require_native_int(divisor, "divisor")
    if divisor == 0:
        raise InvalidArgument("Modulo by zero")

    modulus = abs(divisor)
    data = value.magnitude
    remainder = 0
    for index in range(value.length - 1, -1, -1):
        remainder = (remainder * RADIX + data[index]) % modulus
    if value.sign < 0:
        remainder = -remainder

    if (divisor < 0 < remainder) or (remainder < 0 < divisor):
        remainder += divisor
    return remainder


# =============================================================================
# ВОЗВЕДЕНИЕ В СТЕПЕНЬ
# =============================================================================


def pow(value: BigInteger, exponent: int) -> None:
    """
    value := value ** exponent, возведение через квадраты.

    0^0 = 1 по соглашению. Основания -1, 0, 1 обрабатываются без умножений.

    Raises:
        InvalidArgument: exponent < 0
    """
    value.check_live()
    _require_int(exponent, "exponent")
    if exponent < 0:
        raise InvalidArgument(f"Exponent must be non-negative, got {exponent}")

    if exponent == 0:
        set_one(value)
        return
    if exponent == 1 or value.sign == 0 or is_one(value):
        return
    if is_neg_one(value):
        if exponent % 2 == 0:
            set_one(value)
        return

    if exponent % 2 == 1:
        with copy_of(value) as base:
            pow(value, exponent // 2)
            multiply(value, value)
            multiply(value, base)
    else:
        pow(value, exponent // 2)
        multiply(value, value)
