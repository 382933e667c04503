"""
Errors — таксономия ошибок bignum

Пользовательские ошибки (сообщаются вызывающему коду сразу, без повторов):
- InvalidArgument: некорректный ввод, деление на ноль, отрицательная степень
- Overflow: сужающая конверсия вне диапазона

Ошибки программирования (нарушение внутренних инвариантов):
- InvariantViolation: отрицательный ноль, превышение границы коррекции, и т.п.
- ReleasedHandle: повторное использование освобождённого BigInteger
"""


class BigIntError(Exception):
    """Базовый класс всех ошибок bignum."""

    pass


class InvalidArgument(BigIntError, ValueError):
    """
    Некорректный аргумент операции.

    Возникает ДО любой мутации destination:
    - синтаксическая ошибка в десятичной строке
    - деление / взятие остатка на ноль
    - отрицательный показатель степени
    - NaN/Inf при конверсии из double
    - native-операнд вне диапазона int32 для fast path
    """

    pass


class Overflow(BigIntError, OverflowError):
    """Значение не помещается в целевой native тип (int32 / double)."""

    pass


class InvariantViolation(BigIntError, AssertionError):
    """
    Нарушение внутреннего инварианта (дефект реализации, а не ввода).

    Библиотека никогда не перехватывает это исключение.
    """

    pass


class ReleasedHandle(BigIntError, RuntimeError):
    """Операция над BigInteger после release()."""

    pass
