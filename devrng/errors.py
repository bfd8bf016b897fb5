"""
Seed errors.

Every failure to obtain a seed is fatal for the test run that hit it: a
malformed reproduction seed means the environment is broken, and falling back
to a fresh seed would silently run something other than what was asked for.
Nothing here is retried or recovered internally. Callers decide whether to
let the exception terminate the process or turn it into their own failure
(the pytest plugin raises ``pytest.UsageError``).
"""

from __future__ import annotations


class SeedError(Exception):
    """Base class for all seed acquisition failures."""

    pass


class WrongLengthError(SeedError, ValueError):
    """Raised when a seed does not have exactly 32 bytes (64 hex characters)."""

    pass


class InvalidEncodingError(SeedError, ValueError):
    """Raised when a seed value is not valid hex or not valid text."""

    pass


class EntropyUnavailableError(SeedError, OSError):
    """Raised when the operating system entropy source cannot be read."""

    pass
