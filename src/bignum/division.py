"""
Division Engine — точное divmod для произвольных операндов

Контракт: divmod(a, b) → (q, r), где a = b·q + r и знак r совпадает со
знаком b (или r == 0), для любого ненулевого b.

Алгоритм:
1. b < 0 → рекурсия на (a, -b), затем q := -q; при r != 0: r := r + b, q := q - 1
2. b помещается в один сегмент → long division на native int
3. |a| <= |b| → ответ без итераций (q ∈ {-1, 0, 1})
4. Иначе: Newton-Raphson приближение 1/b в fixed-point десятичной форме,
   q ≈ a · (1/b), r = a - q·b, затем ограниченный цикл коррекции
   (Barrett-style), сдвигающий q на ±1 пока r < 0 или r >= b

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль → InvalidArgument до любой мутации
2. Цикл коррекции укладывается в correction_step_bound шагов; превышение —
   дефект точности обратной величины (InvariantViolation)
3. При check_invariants проверяется постусловие a == b·q + r
"""

import logging

from src.bignum.arithmetic import (
    add,
    add_int,
    divide_by_int,
    divide_by_pow10,
    mod_by_int,
    multiply,
    multiply_by_pow10,
    multiply_int,
    subtract,
)
from src.bignum.comparator import compare, compare_magnitude, equal
from src.bignum.config import get_config
from src.bignum.conversion import (
    from_int,
    from_scientific,
    string_length,
    to_scientific,
)
from src.bignum.digits import (
    BigInteger,
    check_live,
    copy,
    copy_of,
    negate,
    set_one,
    set_zero,
)
from src.bignum.errors import InvalidArgument, InvariantViolation

LOG = logging.getLogger(__name__)


# =============================================================================
# NEWTON-RAPHSON
# =============================================================================


def newton_reciprocal(divisor: BigInteger, precision: int) -> tuple[BigInteger, int]:
    """
    Приближение 1/divisor: reciprocal * 10^shift ≈ 1/divisor.

    Затравка — double оценка 1/base (divisor ≈ base * 10^e), итерация
        z ← 2z - z²·divisor / 10^(2e + precision)
    держит z в масштабе 10^(e + precision). Остановка: итерация повторила
    одну из двух предыдущих либо исчерпан бюджет
    2 * bit_length(precision) + newton_extra_iterations.

    Args:
        divisor: положительный делитель
        precision: целевое число десятичных цифр

    Returns:
        (reciprocal, shift); владелец reciprocal — вызывающий код
    """
    divisor.check_live()
    if divisor.sign <= 0:
        raise InvalidArgument("Newton reciprocal requires a positive divisor")

    config = get_config()
    base, exponent = to_scientific(divisor)
    scale = 2 * exponent + precision
    shift = -scale
    budget = 2 * precision.bit_length() + config.newton_extra_iterations

    reciprocal = BigInteger()
    try:
        from_scientific(reciprocal, 1.0 / base, exponent + precision)
        iterations = 0
        converged = False
        with BigInteger() as square, BigInteger() as previous, BigInteger() as older:
            while iterations < budget:
                iterations += 1
                copy(square, reciprocal)
                multiply(square, square)
                multiply(square, divisor)
                divide_by_pow10(square, scale)

                copy(older, previous)
                copy(previous, reciprocal)
                multiply_int(reciprocal, 2)
                subtract(reciprocal, square)

                if equal(reciprocal, previous) or (iterations > 1 and equal(reciprocal, older)):
                    converged = True
                    break
    except BaseException:
        reciprocal.release()
        raise

    LOG.debug(
        "newton reciprocal: precision=%d iterations=%d converged=%s",
        precision,
        iterations,
        converged,
    )
    return reciprocal, shift


# =============================================================================
# DIVMOD
# =============================================================================


def check_divmod(a: BigInteger, b: BigInteger, q: BigInteger, r: BigInteger) -> None:
    """
    Проверка постусловия: a == b·q + r, sign(r) ∈ {0, sign(b)}.

    Raises:
        InvariantViolation: постусловие нарушено
    """
    with copy_of(b) as total:
        multiply(total, q)
        add(total, r)
        if not equal(total, a):
            raise InvariantViolation(f"divmod postcondition failed: {a} != {b} * {q} + {r}")
    if r.sign not in (0, b.sign):
        raise InvariantViolation(f"remainder {r} does not carry the divisor sign")


def _finish(a: BigInteger, b: BigInteger, q: BigInteger, r: BigInteger) -> None:
    if get_config().check_invariants:
        check_divmod(a, b, q, r)


def _divmod_into(a: BigInteger, b: BigInteger, q: BigInteger, r: BigInteger) -> None:
    if b.sign < 0:
        with copy_of(b) as positive:
            negate(positive)
            _divmod_into(a, positive, q, r)
        negate(q)
        if r.sign != 0:
            add(r, b)
            add_int(q, -1)
        _finish(a, b, q, r)
        return

    if b.length == 1:
        LOG.debug("divmod: single-segment divisor")
        divisor = b.magnitude[0]
        copy(q, a)
        divide_by_int(q, divisor)
        from_int(r, mod_by_int(a, divisor))
        _finish(a, b, q, r)
        return

    magnitude_order = compare_magnitude(a, b)
    if magnitude_order < 0:
        if a.sign >= 0:
            set_zero(q)
            copy(r, a)
        else:
            from_int(q, -1)
            copy(r, a)
            add(r, b)
        _finish(a, b, q, r)
        return
    if magnitude_order == 0:
        if a.sign > 0:
            set_one(q)
        else:
            from_int(q, -1)
        set_zero(r)
        _finish(a, b, q, r)
        return

    config = get_config()
    precision = string_length(a) + string_length(b) + config.newton_guard_digits
    reciprocal, shift = newton_reciprocal(b, precision)
    with reciprocal:
        copy(q, a)
        multiply(q, reciprocal)
        multiply_by_pow10(q, shift)

    # r = a - q·b
    copy(r, q)
    multiply(r, b)
    negate(r)
    add(r, a)

    steps = 0
    while True:
        if r.sign < 0:
            add_int(q, -1)
            add(r, b)
        elif compare(r, b) >= 0:
            add_int(q, 1)
            subtract(r, b)
        else:
            break
        steps += 1
        if steps > config.correction_step_bound:
            raise InvariantViolation(
                f"quotient correction exceeded {config.correction_step_bound} steps "
                f"(precision={precision}); reciprocal is not accurate enough"
            )

    LOG.debug("divmod: %d correction steps", steps)
    _finish(a, b, q, r)


def divmod(a: BigInteger, b: BigInteger) -> tuple[BigInteger, BigInteger]:
    """
    Деление с остатком: (q, r), a = b·q + r, r имеет знак b.

    a и b не изменяются (a is b допустимо). Владелец q и r — вызывающий код.

    Raises:
        InvalidArgument: b == 0

    Examples:
        divmod(12345, 7) → (1763, 4)
        divmod(-7, 3) → (-3, 2)
    """
    check_live(a, b)
    if b.sign == 0:
        raise InvalidArgument("Division by zero")

    q = BigInteger()
    r = BigInteger()
    try:
        _divmod_into(a, b, q, r)
    except BaseException:
        q.release()
        r.release()
        raise
    return q, r


def divide(dst: BigInteger, src: BigInteger) -> None:
    """
    dst := floor(dst / src).

    Raises:
        InvalidArgument: src == 0 (dst не изменяется)
    """
    q, r = divmod(dst, src)
    with q, r:
        copy(dst, q)


def mod(dst: BigInteger, src: BigInteger) -> None:
    """
    dst := dst mod src, результат имеет знак src.

    Raises:
        InvalidArgument: src == 0 (dst не изменяется)
    """
    q, r = divmod(dst, src)
    with q, r:
        copy(dst, r)
