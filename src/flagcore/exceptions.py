"""Exceptions raised by flagcore.

Every evaluation failure derives from :class:`FlagCoreError` and carries an
:class:`~flagcore.types.ErrorCode`, so the client facade can map any of them
onto a default-value result.
"""

from __future__ import annotations

from flagcore.types import ErrorCode

__all__ = [
    "CircularSegmentReferenceError",
    "ConfigurationError",
    "FlagCoreError",
    "FlagNotFoundError",
    "KindMismatchError",
    "MalformedValueError",
    "MisconfiguredReferenceError",
    "SegmentNotFoundError",
]


class FlagCoreError(Exception):
    """Base class for flagcore errors."""

    error_code: ErrorCode = ErrorCode.GENERAL_ERROR

    def __init__(self, message: str, *, error_code: ErrorCode | None = None) -> None:
        super().__init__(message)
        if error_code is not None:
            self.error_code = error_code

    def __str__(self) -> str:
        return f"{self.error_code.value}: {super().__str__()}"


class ConfigurationError(FlagCoreError):
    """Raised when a configuration value is invalid."""


class FlagNotFoundError(FlagCoreError):
    """Raised when a flag key is not present in storage."""

    error_code = ErrorCode.FLAG_NOT_FOUND

    def __init__(self, flag_key: str) -> None:
        super().__init__(f"Flag '{flag_key}' not found")
        self.flag_key = flag_key


class SegmentNotFoundError(FlagCoreError):
    """Raised when a referenced segment is not present in storage."""

    error_code = ErrorCode.SEGMENT_NOT_FOUND

    def __init__(self, segment_id: str) -> None:
        super().__init__(f"Segment '{segment_id}' not found")
        self.segment_id = segment_id


class KindMismatchError(FlagCoreError):
    """Raised when a typed accessor is used on a flag of another kind."""

    error_code = ErrorCode.TYPE_MISMATCH

    def __init__(self, flag_key: str, expected: str, actual: str) -> None:
        super().__init__(f"Flag '{flag_key}' is of kind '{actual}', requested '{expected}'")
        self.flag_key = flag_key
        self.expected = expected
        self.actual = actual


class MalformedValueError(FlagCoreError):
    """Raised when a stored variation value cannot be parsed as its kind."""

    error_code = ErrorCode.PARSE_ERROR


class MisconfiguredReferenceError(FlagCoreError):
    """Raised when a flag references a variation it does not declare."""

    error_code = ErrorCode.MISCONFIGURED_REFERENCE

    def __init__(self, flag_key: str, variation: str | None) -> None:
        super().__init__(f"Flag '{flag_key}' references unknown variation '{variation}'")
        self.flag_key = flag_key
        self.variation = variation


class CircularSegmentReferenceError(FlagCoreError):
    """Raised when segment rules reference each other in a cycle."""

    def __init__(self, segment_ids: list[str]) -> None:
        chain = " -> ".join(segment_ids)
        super().__init__(f"Circular segment reference detected: {chain}")
        self.segment_ids = segment_ids
