"""
payroll_kernel -- shared infrastructure for the payroll core.

Structured logging (``logging_config``), the typed exception hierarchy
(``exceptions``) and boundary numeric conversions (``values``).  Has no
dependency on ``payroll_config`` or ``payroll_engines``.
"""

from payroll_kernel.exceptions import (
    CalculationError,
    ConfigurationError,
    PayrollKernelError,
    RateTableNotFoundError,
    RateTableValidationError,
    UnsupportedRateTableVersionError,
)
from payroll_kernel.logging_config import (
    LogContext,
    configure_logging,
    get_logger,
    reset_logging,
)
from payroll_kernel.values import (
    coerce_hours,
    parse_hours,
    round_hours,
    round_yen,
    to_decimal,
)

__all__ = [
    "CalculationError",
    "ConfigurationError",
    "LogContext",
    "PayrollKernelError",
    "RateTableNotFoundError",
    "RateTableValidationError",
    "UnsupportedRateTableVersionError",
    "coerce_hours",
    "configure_logging",
    "get_logger",
    "parse_hours",
    "reset_logging",
    "round_hours",
    "round_yen",
    "to_decimal",
]
