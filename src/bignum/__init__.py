"""
bignum — целые произвольной точности

Sign-magnitude представление по основанию 10^9, десятичный ввод/вывод
(включая научную нотацию), сложение, вычитание, умножение (школьное и
Karatsuba), деление с остатком (Newton-Raphson + коррекция), степени.

pow и divmod не реэкспортируются, чтобы не затенять builtins: используйте
src.bignum.arithmetic.pow и src.bignum.division.divmod.
"""

# Errors
from src.bignum.errors import (
    BigIntError,
    InvalidArgument,
    InvariantViolation,
    Overflow,
    ReleasedHandle,
)

# Configuration
from src.bignum.config import (
    ArithmeticConfig,
    get_config,
    load_config,
    override_config,
    set_config,
)

# Digit-Vector core
from src.bignum.digits import (
    INT32_MAX,
    INT32_MIN,
    RADIX,
    SEGMENT_DIGITS,
    BigInteger,
    copy,
    copy_of,
    is_neg_one,
    is_negative,
    is_one,
    is_positive,
    is_zero,
    negate,
    set_allocation_hook,
    set_one,
    set_zero,
)

# Comparator
from src.bignum.comparator import (
    compare,
    compare_magnitude,
    equal,
)

# Conversion
from src.bignum.conversion import (
    DOUBLE_MAX_DIGITS,
    ParserState,
    digit_count,
    from_decimal_string,
    from_double,
    from_int,
    from_scientific,
    nth_digit,
    string_length,
    to_decimal_string,
    to_double,
    to_int,
    to_scientific,
)

# Arithmetic
from src.bignum.arithmetic import (
    add,
    add_int,
    divide_by_int,
    divide_by_pow10,
    mod_by_int,
    mod_by_pow10,
    multiply,
    multiply_by_pow10,
    multiply_int,
    split,
    subtract,
    subtract_int,
)

# Division Engine
from src.bignum.division import (
    check_divmod,
    divide,
    mod,
    newton_reciprocal,
)

__all__ = [
    # Errors
    "BigIntError",
    "InvalidArgument",
    "InvariantViolation",
    "Overflow",
    "ReleasedHandle",
    # Configuration
    "ArithmeticConfig",
    "get_config",
    "load_config",
    "override_config",
    "set_config",
    # Digit-Vector constants
    "INT32_MAX",
    "INT32_MIN",
    "RADIX",
    "SEGMENT_DIGITS",
    # Digit-Vector types
    "BigInteger",
    # Digit-Vector functions
    "copy",
    "copy_of",
    "is_neg_one",
    "is_negative",
    "is_one",
    "is_positive",
    "is_zero",
    "negate",
    "set_allocation_hook",
    "set_one",
    "set_zero",
    # Comparator
    "compare",
    "compare_magnitude",
    "equal",
    # Conversion constants
    "DOUBLE_MAX_DIGITS",
    # Conversion types
    "ParserState",
    # Conversion functions
    "digit_count",
    "from_decimal_string",
    "from_double",
    "from_int",
    "from_scientific",
    "nth_digit",
    "string_length",
    "to_decimal_string",
    "to_double",
    "to_int",
    "to_scientific",
    # Arithmetic
    "add",
    "add_int",
    "divide_by_int",
    "divide_by_pow10",
    "mod_by_int",
    "mod_by_pow10",
    "multiply",
    "multiply_by_pow10",
    "multiply_int",
    "split",
    "subtract",
    "subtract_int",
    # Division Engine
    "check_divmod",
    "divide",
    "mod",
    "newton_reciprocal",
]
