"""
Property тесты: BigInteger против Python int

Случайные операнды (фиксированный seed), эталон — встроенный int.

Проверяет:
1. Разбор / печать: to_decimal_string(parse(s)) == s для канонических s
2. Согласованность compare с порядком int
3. (a + b) - b == a, коммутативность умножения
4. a == b·q + r, знак r совпадает со знаком b
5. pow совпадает с int ** int
"""

import random

from src.bignum.arithmetic import add, multiply, pow, subtract
from src.bignum.comparator import compare
from src.bignum.config import override_config
from src.bignum.conversion import (
    from_decimal_string,
    from_int,
    string_length,
    to_decimal_string,
)
from src.bignum.digits import BigInteger, copy_of
from src.bignum.division import divmod

SEED = 1729
ROUNDS = 150


def big(value: int) -> BigInteger:
    result = BigInteger()
    from_int(result, value)
    return result


def as_int(value: BigInteger) -> int:
    return int(to_decimal_string(value))


def random_int(rng: random.Random, max_digits: int = 120) -> int:
    value = rng.randrange(10 ** rng.randint(1, max_digits))
    return -value if rng.random() < 0.5 else value


class TestTextProperties:
    """Текстовая форма"""

    def test_canonical_round_trip(self) -> None:
        rng = random.Random(SEED)
        for _ in range(ROUNDS):
            text = str(random_int(rng, 200))
            value = BigInteger()
            from_decimal_string(value, text)
            assert to_decimal_string(value) == text
            assert string_length(value) == len(text)

    def test_leading_zeros_and_plus(self) -> None:
        rng = random.Random(SEED + 1)
        for _ in range(ROUNDS):
            number = rng.randrange(10**60)
            value = BigInteger()
            from_decimal_string(value, "+" + "0" * rng.randint(0, 12) + str(number))
            assert as_int(value) == number

    def test_exponent_equals_shift(self) -> None:
        rng = random.Random(SEED + 2)
        for _ in range(ROUNDS):
            number = random_int(rng, 40)
            exponent = rng.randint(0, 40)
            value = BigInteger()
            from_decimal_string(value, f"{number}e{exponent}")
            assert as_int(value) == number * 10**exponent


class TestArithmeticProperties:
    """Алгебраические свойства"""

    def test_add_then_subtract(self) -> None:
        rng = random.Random(SEED + 3)
        for _ in range(ROUNDS):
            x, y = random_int(rng), random_int(rng)
            value = big(x)
            operand = big(y)
            add(value, operand)
            assert as_int(value) == x + y
            subtract(value, operand)
            assert as_int(value) == x

    def test_compare_matches_int(self) -> None:
        rng = random.Random(SEED + 4)
        for _ in range(ROUNDS):
            x, y = random_int(rng, 30), random_int(rng, 30)
            assert compare(big(x), big(y)) == (x > y) - (x < y)

    def test_multiply_commutes(self) -> None:
        rng = random.Random(SEED + 5)
        with override_config(multiply_threshold=4):
            for _ in range(ROUNDS // 3):
                x, y = random_int(rng, 300), random_int(rng, 300)
                left = big(x)
                multiply(left, big(y))
                right = big(y)
                multiply(right, big(x))
                assert as_int(left) == as_int(right) == x * y

    def test_multiply_associates(self) -> None:
        """(a·b)·c == a·(b·c) на длинах по обе стороны порога"""
        rng = random.Random(SEED + 8)
        for threshold, lengths in ((4, (1, 2, 3, 4, 5, 12, 30)), (100, (1, 40, 99, 100, 101, 150))):
            with override_config(multiply_threshold=threshold):
                for _ in range(6):
                    a, b, c = (
                        rng.randrange(10 ** (9 * length - 1), 10 ** (9 * length))
                        * rng.choice((1, -1))
                        for length in (rng.choice(lengths) for _ in range(3))
                    )
                    left = big(a)
                    multiply(left, big(b))
                    multiply(left, big(c))
                    right = big(b)
                    multiply(right, big(c))
                    with big(a) as head:
                        multiply(head, right)
                        assert as_int(left) == as_int(head) == a * b * c, (threshold, a, b, c)

    def test_pow_matches_int(self) -> None:
        rng = random.Random(SEED + 6)
        for _ in range(40):
            x = random_int(rng, 12)
            exponent = rng.randint(0, 30)
            value = big(x)
            pow(value, exponent)
            assert as_int(value) == x**exponent


class TestDivmodProperties:
    """Тождество деления с остатком"""

    def test_identity_and_remainder_sign(self) -> None:
        rng = random.Random(SEED + 7)
        for _ in range(ROUNDS):
            x = random_int(rng, 150)
            y = random_int(rng, 80) or 1
            a, b = big(x), big(y)
            q, r = divmod(a, b)
            with copy_of(b) as total:
                multiply(total, q)
                add(total, r)
                assert as_int(total) == x
            assert r.sign in (0, b.sign)
            assert abs(as_int(r)) < abs(y)
            assert (as_int(q), as_int(r)) == (x // y, x % y)
