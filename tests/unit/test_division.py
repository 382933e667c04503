"""
Тесты для Division Engine

Проверяет:
1. divmod на эталонных примерах и по всем комбинациям знаков
2. Быстрые пути (один сегмент, |a| < |b|, |a| == |b|)
3. Newton-Raphson путь против Python int
4. Ошибки: деление на ноль, превышение границы коррекции
5. Отсутствие утечек BigInteger на всех путях
"""

import logging
import random

import pytest

import src.bignum.division as division
from src.bignum.config import override_config
from src.bignum.conversion import from_int, to_decimal_string
from src.bignum.digits import RADIX, BigInteger
from src.bignum.division import check_divmod, divide, divmod, mod, newton_reciprocal
from src.bignum.errors import InvalidArgument, InvariantViolation


def big(value: int) -> BigInteger:
    result = BigInteger()
    from_int(result, value)
    return result


def as_int(value: BigInteger) -> int:
    return int(to_decimal_string(value))


def check(x: int, y: int) -> None:
    q, r = divmod(big(x), big(y))
    assert (as_int(q), as_int(r)) == (x // y, x % y), (x, y)


# =============================================================================
# ЭТАЛОННЫЕ ПРИМЕРЫ
# =============================================================================


class TestDivmodBasics:
    """Тесты divmod на малых значениях"""

    def test_reference_examples(self) -> None:
        q, r = divmod(big(12345), big(7))
        assert (as_int(q), as_int(r)) == (1763, 4)
        q, r = divmod(big(-7), big(3))
        assert (as_int(q), as_int(r)) == (-3, 2)

    def test_all_sign_combinations(self) -> None:
        """Остаток имеет знак делителя"""
        for x in (7, -7, 0, 6, -6):
            for y in (3, -3, 1, -1, 7, -7):
                check(x, y)

    def test_zero_dividend(self) -> None:
        q, r = divmod(BigInteger(), big(10**20))
        assert q.sign == 0
        assert r.sign == 0

    def test_operands_unchanged(self) -> None:
        a = big(-(10**30) - 17)
        b = big(10**12 + 3)
        divmod(a, b)
        assert as_int(a) == -(10**30) - 17
        assert as_int(b) == 10**12 + 3

    def test_aliasing(self) -> None:
        """divmod(x, x) → (1, 0)"""
        value = big(-(10**25))
        q, r = divmod(value, value)
        assert as_int(q) == 1
        assert r.sign == 0


class TestDivmodFastPaths:
    """Тесты путей без Newton-Raphson"""

    def test_single_segment_divisor(self) -> None:
        for x in (10**50 + 1, -(10**50) - 1):
            for y in (RADIX - 1, -(RADIX - 1), 2, -2):
                check(x, y)

    def test_smaller_magnitude(self) -> None:
        """|a| < |b| → q ∈ {0, -1}"""
        big_divisor = 10**30 + 7
        check(10**20, big_divisor)
        check(-(10**20), big_divisor)
        check(10**20, -big_divisor)
        check(-(10**20), -big_divisor)

    def test_equal_magnitude(self) -> None:
        """|a| == |b| → q = ±1, r = 0"""
        value = 10**30 + 7
        check(value, value)
        check(-value, value)
        check(value, -value)
        check(-value, -value)


# =============================================================================
# NEWTON-RAPHSON
# =============================================================================


class TestNewtonPath:
    """Тесты divmod через обратную величину"""

    def test_random_operands_match_int(self) -> None:
        rng = random.Random(42)
        for _ in range(60):
            y = rng.randint(RADIX, 10**rng.randint(10, 60))
            x = y * rng.randint(1, 10**rng.randint(1, 60)) + rng.randint(-y, y)
            for sx, sy in ((1, 1), (-1, 1), (1, -1), (-1, -1)):
                check(sx * x, sy * y)

    def test_exact_multiples(self) -> None:
        """Точное деление даёт r == 0"""
        y = 123456789123456789123
        check(y * 10**40, y)
        check(-y * (10**40 + 1), y)

    def test_quotient_boundary(self) -> None:
        """a = q·b ± 1 на границе частного"""
        y = 10**27 + 1
        for x in (y * 10**30 - 1, y * 10**30, y * 10**30 + 1):
            check(x, y)
            check(-x, y)

    def test_karatsuba_inside_division(self) -> None:
        rng = random.Random(5)
        with override_config(multiply_threshold=4):
            for _ in range(10):
                y = rng.randint(10**40, 10**90)
                x = rng.randint(10**100, 10**250)
                check(x, y)
                check(-x, y)

    def test_invariant_checks_disabled(self) -> None:
        with override_config(check_invariants=False):
            check(10**60 + 12345, 10**25 + 3)

    def test_reciprocal_accuracy(self) -> None:
        """reciprocal * 10^shift ≈ 1/divisor с точностью до единиц последнего разряда"""
        divisor = 123456789123456789
        reciprocal, shift = newton_reciprocal(big(divisor), 40)
        with reciprocal:
            assert abs(as_int(reciprocal) - 10 ** (-shift) // divisor) <= 2

    def test_reciprocal_requires_positive(self) -> None:
        with pytest.raises(InvalidArgument):
            newton_reciprocal(big(-(10**10)), 20)

    def test_debug_logging(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="src.bignum.division"):
            check(10**40 + 1, 10**15 + 7)
        assert "newton reciprocal" in caplog.text


# =============================================================================
# ОШИБКИ
# =============================================================================


class TestDivisionErrors:
    """Тесты ошибок Division Engine"""

    def test_division_by_zero(self) -> None:
        with pytest.raises(InvalidArgument):
            divmod(big(5), BigInteger())

    def test_divide_by_zero_does_not_mutate(self) -> None:
        value = big(10**20)
        with pytest.raises(InvalidArgument):
            divide(value, BigInteger())
        with pytest.raises(InvalidArgument):
            mod(value, BigInteger())
        assert as_int(value) == 10**20

    def test_correction_bound_exceeded(self, monkeypatch) -> None:
        """Неточная обратная величина → InvariantViolation"""
        monkeypatch.setattr(
            division, "newton_reciprocal", lambda divisor, precision: (BigInteger(), 0)
        )
        with pytest.raises(InvariantViolation):
            divmod(big(10**40), big(10**20 + 1))

    def test_check_divmod_detects_bad_result(self) -> None:
        with pytest.raises(InvariantViolation):
            check_divmod(big(10), big(3), big(3), big(2))
        with pytest.raises(InvariantViolation):
            check_divmod(big(-7), big(3), big(-2), big(-1))

    def test_check_divmod_accepts_good_result(self) -> None:
        check_divmod(big(-7), big(3), big(-3), big(2))


# =============================================================================
# DIVIDE / MOD
# =============================================================================


class TestInPlace:
    """Тесты divide / mod"""

    def test_divide(self) -> None:
        value = big(-(10**40) - 1)
        divide(value, big(10**12 + 7))
        assert as_int(value) == (-(10**40) - 1) // (10**12 + 7)

    def test_mod(self) -> None:
        value = big(10**40 + 1)
        mod(value, big(-(10**12) - 7))
        assert as_int(value) == (10**40 + 1) % -(10**12 + 7)

    def test_self_division(self) -> None:
        value = big(10**30 + 1)
        divide(value, value)
        assert as_int(value) == 1
        value = big(10**30 + 1)
        mod(value, value)
        assert value.sign == 0


# =============================================================================
# ВЛАДЕНИЕ
# =============================================================================


class TestNoLeaks:
    """Все временные BigInteger освобождаются"""

    def test_divmod_releases_temporaries(self, allocations) -> None:
        with big(-(10**80) - 3) as a, big(10**30 + 11) as b:
            q, r = divmod(a, b)
            q.release()
            r.release()
        assert allocations.live == 0

    def test_negative_divisor_path(self, allocations) -> None:
        with big(10**50) as a, big(-(10**20) - 1) as b:
            q, r = divmod(a, b)
            q.release()
            r.release()
        assert allocations.live == 0

    def test_failure_releases_results(self, allocations, monkeypatch) -> None:
        monkeypatch.setattr(
            division, "newton_reciprocal", lambda divisor, precision: (BigInteger(), 0)
        )
        with big(10**40) as a, big(10**20 + 1) as b:
            with pytest.raises(InvariantViolation):
                divmod(a, b)
        assert allocations.live == 0

    def test_in_place_operations(self, allocations) -> None:
        with big(10**45 + 9) as value, big(10**18 + 1) as divisor:
            divide(value, divisor)
            mod(value, divisor)
        assert allocations.live == 0
