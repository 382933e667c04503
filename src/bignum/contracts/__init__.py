"""
Contract Validation Module

JSON Schema контракты документов конфигурации bignum.
"""

from .validators import (
    ARITHMETIC_CONFIG,
    SCHEMA_DIR,
    ConfigContract,
    SchemaRegistry,
    validate_arithmetic_config,
)

__all__ = [
    # Constants
    "ARITHMETIC_CONFIG",
    "SCHEMA_DIR",
    # Classes
    "SchemaRegistry",
    "ConfigContract",
    # Functions
    "validate_arithmetic_config",
]
