"""
Typed exception hierarchy for the payroll core.

Every error carries a class-level ``code`` (machine-readable, API-safe)
and stores its context as attributes so it survives logging and
serialization without message parsing.

    PayrollKernelError (base)
    |
    +-- ConfigurationError
    |   +-- RateTableNotFoundError
    |   +-- RateTableValidationError
    |   +-- UnsupportedRateTableVersionError
    |
    +-- CalculationError

Category        | Code                           | When Raised
----------------|--------------------------------|--------------------------------------
Configuration   | RATE_TABLE_NOT_FOUND           | No YAML file for the requested set
                | RATE_TABLE_INVALID             | Validator found structural errors
                | UNSUPPORTED_RATE_TABLE_VERSION | schema_version not understood
----------------|--------------------------------|--------------------------------------
Calculation     | CALCULATION_FAILED             | One batch entry could not be computed

The calculation engines themselves are total: for well-typed input they
return a result instead of raising.  ``CalculationError`` only appears
in batch results, wrapping whatever the caller's malformed input caused.
"""

from __future__ import annotations

from collections.abc import Sequence


class PayrollKernelError(Exception):
    """
    Base exception for all payroll core errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Configuration exceptions


class ConfigurationError(PayrollKernelError):
    """Base exception for rate-table configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class RateTableNotFoundError(ConfigurationError):
    """No rate-table file exists for the requested version or path."""

    code: str = "RATE_TABLE_NOT_FOUND"

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"Rate table not found: {location}")


class RateTableValidationError(ConfigurationError):
    """Rate table failed structural validation."""

    code: str = "RATE_TABLE_INVALID"

    def __init__(self, version: str, errors: Sequence[str]):
        self.version = version
        self.errors = tuple(errors)
        super().__init__(
            f"Rate table {version} is invalid: " + "; ".join(self.errors)
        )


class UnsupportedRateTableVersionError(ConfigurationError):
    """Rate-table file declares a schema version this loader cannot read."""

    code: str = "UNSUPPORTED_RATE_TABLE_VERSION"

    def __init__(self, schema_version: int, supported: Sequence[int]):
        self.schema_version = schema_version
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported rate table schema version {schema_version} "
            f"(supported: {', '.join(str(v) for v in self.supported)})"
        )


# Calculation exceptions


class CalculationError(PayrollKernelError):
    """A single payroll calculation could not be completed."""

    code: str = "CALCULATION_FAILED"

    def __init__(self, employee_id: str, reason: str):
        self.employee_id = employee_id
        self.reason = reason
        super().__init__(
            f"Payroll calculation failed for employee {employee_id}: {reason}"
        )
