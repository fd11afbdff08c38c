"""Exceptions for Moot Court."""


class MootCourtError(Exception):
    """Base exception for moot court operations."""

    pass


class CaseContextError(MootCourtError):
    """Raised when a case file cannot be loaded."""

    def __init__(self, message: str = "Case context is invalid."):
        super().__init__(message)


class SnapshotError(MootCourtError):
    """Raised when a session snapshot is missing or malformed."""

    def __init__(self, message: str = "Session snapshot is invalid."):
        super().__init__(message)


class DecisionValidationError(MootCourtError):
    """Raised when a decision record violates a consistency invariant."""

    def __init__(self, code: str, message: str = ""):
        self.code = code
        super().__init__(f"{code}: {message}" if message else code)

