"""
Comparator — полный порядок на BigInteger

Сначала сравниваются знаки, затем модули (длина, потом сегменты от старшего
к младшему). Используется всеми остальными слоями.
"""

from src.bignum.digits import BigInteger, check_live


def compare_magnitude(a: BigInteger, b: BigInteger) -> int:
    """
    Сравнение |a| и |b|.

    Returns:
        -1 если |a| < |b|, 0 если равны, +1 если |a| > |b|
    """
    check_live(a, b)
    if a.length != b.length:
        return 1 if a.length > b.length else -1

    data_a = a.magnitude
    data_b = b.magnitude
    for index in range(a.length - 1, -1, -1):
        if data_a[index] != data_b[index]:
            return 1 if data_a[index] > data_b[index] else -1
    return 0


def compare(a: BigInteger, b: BigInteger) -> int:
    """
    Сравнение a и b.

    Returns:
        -1 если a < b, 0 если a == b, +1 если a > b

    Examples:
        -5 < 3 (по знаку), -5 < -3 (обратный порядок модулей)
    """
    check_live(a, b)
    if a.sign != b.sign:
        return 1 if a.sign > b.sign else -1
    if a.sign == 0:
        return 0
    if a.sign > 0:
        return compare_magnitude(a, b)
    return compare_magnitude(b, a)


def equal(a: BigInteger, b: BigInteger) -> bool:
    if a is b:
        check_live(a)
        return True
    return compare(a, b) == 0
