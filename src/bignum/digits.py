"""
Digit-Vector — ядро представления BigInteger

Sign-magnitude целое: знак хранится отдельно, модуль — массив сегментов
по основанию RADIX = 10^9, младший сегмент первым.

Модуль владеет растущим буфером сегментов и поддерживает инварианты:
1. length >= 1
2. старший сегмент ненулевой (кроме значения 0: length == 1, magnitude[0] == 0)
3. sign == 0 тогда и только тогда, когда значение равно 0
4. capacity >= length; len(magnitude) == capacity

Каждая мутирующая операция вызывает pack() (прямо или через вызванную
под-операцию) перед возвратом.

Владение: каждый BigInteger эксклюзивно владеет своим буфером.
release() освобождает буфер; дальнейшее использование → ReleasedHandle.
BigInteger — context manager: `with BigInteger() as tmp:` гарантирует
release() на всех путях выхода.
"""

import functools
from typing import Callable, Final, Iterable, Optional

from src.bignum.config import get_config
from src.bignum.errors import InvariantViolation, ReleasedHandle

# =============================================================================
# КОНСТАНТЫ ПРЕДСТАВЛЕНИЯ
# =============================================================================

# Основание системы счисления сегментов
RADIX: Final[int] = 1_000_000_000

# log10(RADIX): число десятичных цифр в одном сегменте
SEGMENT_DIGITS: Final[int] = 9

# Степени десяти 10^0 .. 10^9
POW10: Final[tuple[int, ...]] = tuple(10**i for i in range(SEGMENT_DIGITS + 1))

# Границы native int (int32)
INT32_MIN: Final[int] = -(2**31)
INT32_MAX: Final[int] = 2**31 - 1


# =============================================================================
# ИНСТРУМЕНТАЦИЯ ВЫДЕЛЕНИЙ (только для тестов)
# =============================================================================

_allocation_hook: Optional[Callable[[int], None]] = None


def set_allocation_hook(
    hook: Optional[Callable[[int], None]],
) -> Optional[Callable[[int], None]]:
    """
    Установка hook учёта буферов.

    hook(+1) вызывается при создании BigInteger, hook(-1) — при release().

    Returns:
        Предыдущий hook
    """
    global _allocation_hook
    previous = _allocation_hook
    _allocation_hook = hook
    return previous


# =============================================================================
# BIGINTEGER
# =============================================================================


@functools.total_ordering
class BigInteger:
    """
    Целое произвольной точности.

    Attributes:
        sign: -1, 0 или +1
        magnitude: буфер сегментов (младший первым), len(magnitude) == capacity
        length: число значащих сегментов
        capacity: размер буфера
    """

    __slots__ = ("sign", "magnitude", "length", "capacity")

    # Изменяемый объект
    __hash__ = None

    def __init__(self) -> None:
        capacity = get_config().initial_capacity
        self.sign = 0
        self.magnitude: Optional[list[int]] = [0] * capacity
        self.length = 1
        self.capacity = capacity
        if _allocation_hook is not None:
            _allocation_hook(1)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def released(self) -> bool:
        return self.magnitude is None

    def release(self) -> None:
        """Освобождение буфера. Повторный вызов ничего не делает."""
        if self.magnitude is None:
            return
        self.magnitude = None
        self.length = 0
        self.capacity = 0
        self.sign = 0
        if _allocation_hook is not None:
            _allocation_hook(-1)

    def check_live(self) -> None:
        if self.magnitude is None:
            raise ReleasedHandle("BigInteger has been released and must not be reused")

    def __enter__(self) -> "BigInteger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    # -------------------------------------------------------------------------
    # Буфер
    # -------------------------------------------------------------------------

    def _set_capacity(self, new_capacity: int) -> None:
        if new_capacity < self.length:
            raise InvariantViolation(
                f"capacity {new_capacity} below length {self.length}"
            )
        self.magnitude = self.magnitude[: self.length] + [0] * (new_capacity - self.length)
        self.capacity = new_capacity

    def ensure_capacity(self, min_size: int) -> None:
        """
        Гарантия capacity >= min_size.

        При нехватке буфер растёт до 2 * min_size + 2 (амортизированно O(1)).
        """
        self.check_live()
        if min_size <= 0:
            raise InvariantViolation(f"min_size must be positive, got {min_size}")
        if min_size > self.capacity:
            self._set_capacity(min_size * 2 + 2)

    def pack(self) -> None:
        """
        Нормализация представления.

        1. Отбрасывает старшие нулевые сегменты (length >= 1)
        2. Сжимает буфер, если заполнение < 25%
        3. Обнуляет sign для нулевого значения
        """
        self.check_live()
        data = self.magnitude
        index = self.length - 1
        while index > 0 and data[index] == 0:
            index -= 1
        self.length = index + 1

        if self.length * 4 < self.capacity:
            self._set_capacity(self.length * 2)

        if self.length == 1 and data[0] == 0:
            self.sign = 0
        elif self.sign == 0:
            raise InvariantViolation("non-zero magnitude carries sign 0")

    def load(self, sign: int, segments: Iterable[int]) -> None:
        """
        Замена содержимого: sign и сегменты (младший первым).

        Сегменты должны лежать в [0, RADIX). Пустой список трактуется как 0.
        """
        self.check_live()
        values = list(segments) or [0]
        self.ensure_capacity(len(values))
        data = self.magnitude
        data[: len(values)] = values
        self.length = len(values)
        self.sign = sign if any(values) else 0
        self.pack()

    def segments(self) -> tuple[int, ...]:
        """Значащие сегменты (младший первым), только для чтения."""
        self.check_live()
        return tuple(self.magnitude[: self.length])

    # -------------------------------------------------------------------------
    # Python protocol
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        from src.bignum.conversion import to_decimal_string

        return to_decimal_string(self)

    def __repr__(self) -> str:
        if self.magnitude is None:
            return "BigInteger(<released>)"
        return f"BigInteger('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BigInteger):
            return NotImplemented
        from src.bignum.comparator import equal

        return equal(self, other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BigInteger):
            return NotImplemented
        from src.bignum.comparator import compare

        return compare(self, other) < 0


# =============================================================================
# БАЗОВЫЕ ОПЕРАЦИИ
# =============================================================================


def check_live(*values: BigInteger) -> None:
    """ReleasedHandle, если хотя бы один из аргументов освобождён."""
    for value in values:
        value.check_live()


def copy(dst: BigInteger, src: BigInteger) -> None:
    """dst := src. При dst is src ничего не делает."""
    check_live(dst, src)
    if dst is src:
        return
    dst.ensure_capacity(src.length)
    dst.magnitude[: src.length] = src.magnitude[: src.length]
    dst.length = src.length
    dst.sign = src.sign
    dst.pack()


def copy_of(src: BigInteger) -> BigInteger:
    """Новый BigInteger со значением src (владелец — вызывающий код)."""
    result = BigInteger()
    copy(result, src)
    return result


def set_zero(value: BigInteger) -> None:
    value.check_live()
    value.magnitude[0] = 0
    value.length = 1
    value.sign = 0
    value.pack()


def set_one(value: BigInteger) -> None:
    value.check_live()
    value.magnitude[0] = 1
    value.length = 1
    value.sign = 1
    value.pack()


def negate(value: BigInteger) -> None:
    """Смена знака на месте (0 остаётся 0)."""
    value.check_live()
    value.sign = -value.sign


def is_zero(value: BigInteger) -> bool:
    value.check_live()
    return value.sign == 0


def is_positive(value: BigInteger) -> bool:
    value.check_live()
    return value.sign > 0


def is_negative(value: BigInteger) -> bool:
    value.check_live()
    return value.sign < 0


def is_one(value: BigInteger) -> bool:
    value.check_live()
    return value.sign > 0 and value.length == 1 and value.magnitude[0] == 1


def is_neg_one(value: BigInteger) -> bool:
    value.check_live()
    return value.sign < 0 and value.length == 1 and value.magnitude[0] == 1
