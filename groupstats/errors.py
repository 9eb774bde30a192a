"""Unified exception hierarchy for groupstats.

All groupstats-specific exceptions inherit from GroupStatsError, enabling
consistent handling. The analytics engine absorbs store and analyzer errors
at its operation boundary; adapters and the analyzer raise them.

Exception Hierarchy:
    GroupStatsError (base)
    +-- ConfigurationError - Configuration and settings issues
    +-- StoreError - Message archive or roster store failures
    |   +-- MessageStoreError - Message archive access/query failure
    |   +-- RosterUnavailableError - Roster database missing
    |   +-- RosterQueryError - Membership query failure
    +-- AnalyzerError - Word-frequency analysis failures

Usage:
    from groupstats.errors import StoreError

    try:
        rows = store.fetch_messages(room_id, start_ts, end_ts)
    except StoreError as e:
        logger.warning("Store error: %s (code: %s)", e.message, e.code)
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standard error codes for groupstats errors."""

    # Configuration errors (CFG_*)
    CFG_INVALID = "CFG_INVALID"
    CFG_MISSING = "CFG_MISSING"

    # Store errors (STO_*)
    STO_DB_NOT_FOUND = "STO_DB_NOT_FOUND"
    STO_QUERY_FAILED = "STO_QUERY_FAILED"
    STO_ROSTER_UNAVAILABLE = "STO_ROSTER_UNAVAILABLE"
    STO_CONVERSATION_NOT_FOUND = "STO_CONVERSATION_NOT_FOUND"

    # Analyzer errors (ANA_*)
    ANA_INVALID_PARAMS = "ANA_INVALID_PARAMS"
    ANA_FAILED = "ANA_FAILED"

    # Generic errors
    UNKNOWN = "UNKNOWN"


class GroupStatsError(Exception):
    """Base exception for all groupstats errors.

    Attributes:
        message: Human-readable error message.
        code: Machine-readable error code from ErrorCode enum.
        details: Optional additional context about the error.
        cause: Optional original exception that caused this error.
    """

    default_message: str = "An error occurred"
    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        self.cause = cause

        super().__init__(self.message)

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        parts = [f"{self.__class__.__name__}({self.message!r}"]
        if self.code != self.default_code:
            parts.append(f", code={self.code.value!r}")
        if self.details:
            parts.append(f", details={self.details!r}")
        if self.cause:
            parts.append(f", cause={self.cause!r}")
        parts.append(")")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses.

        Returns:
            Dictionary with error, code, and detail fields.
        """
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "detail": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# Configuration Errors


class ConfigurationError(GroupStatsError):
    """Raised for configuration and settings issues."""

    default_message = "Configuration error"
    default_code = ErrorCode.CFG_INVALID

    def __init__(
        self,
        message: str | None = None,
        *,
        config_key: str | None = None,
        config_path: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        if config_path:
            details["config_path"] = config_path
        super().__init__(message, code=code, details=details, cause=cause)


# Store Errors


class StoreError(GroupStatsError):
    """Base class for message archive and roster store errors."""

    default_message = "Store error"
    default_code = ErrorCode.STO_QUERY_FAILED

    def __init__(
        self,
        message: str | None = None,
        *,
        db_path: str | None = None,
        room_id: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize a store error.

        Args:
            message: Human-readable error message.
            db_path: Path to the database file involved.
            room_id: Conversation the operation was scoped to.
            code: Error code for programmatic handling.
            details: Additional context as key-value pairs.
            cause: Original exception that caused this error.
        """
        details = details or {}
        if db_path:
            details["db_path"] = db_path
        if room_id:
            details["room_id"] = room_id
        super().__init__(message, code=code, details=details, cause=cause)


class MessageStoreError(StoreError):
    """Raised when the message archive cannot be read.

    Examples:
        - Message database file not found
        - Query failure (locked, corrupt, unexpected schema)
    """

    default_message = "Cannot read message archive"


class RosterUnavailableError(StoreError):
    """Raised when no roster database is available."""

    default_message = "Roster data unavailable"
    default_code = ErrorCode.STO_ROSTER_UNAVAILABLE


class RosterQueryError(StoreError):
    """Raised when a membership query against the roster database fails."""

    default_message = "Roster query failed"


# Analyzer Errors


class AnalyzerError(GroupStatsError):
    """Raised for word-frequency analysis failures.

    Examples:
        - top_n, min_count or min_length below 1
        - Tokenizer failure on malformed input
    """

    default_message = "Text analysis failed"
    default_code = ErrorCode.ANA_FAILED

    def __init__(
        self,
        message: str | None = None,
        *,
        parameter: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if parameter:
            details["parameter"] = parameter
        super().__init__(message, code=code, details=details, cause=cause)


# Convenience factories


def message_db_not_found(db_path: str) -> MessageStoreError:
    """Create a MessageStoreError for a missing message database.

    Args:
        db_path: Path where the database was expected.

    Returns:
        MessageStoreError with appropriate code.
    """
    return MessageStoreError(
        f"Message database not found at: {db_path}",
        db_path=db_path,
        code=ErrorCode.STO_DB_NOT_FOUND,
    )


def roster_db_not_found(db_path: str | None) -> RosterUnavailableError:
    """Create a RosterUnavailableError for a missing contact database.

    Args:
        db_path: Path where the database was expected, None if not configured.

    Returns:
        RosterUnavailableError with appropriate code.
    """
    if db_path is None:
        return RosterUnavailableError("No roster database configured")
    return RosterUnavailableError(
        f"Roster database not found at: {db_path}",
        db_path=db_path,
        code=ErrorCode.STO_DB_NOT_FOUND,
    )


def invalid_analyzer_param(parameter: str, value: int) -> AnalyzerError:
    """Create an AnalyzerError for an out-of-range parameter.

    Args:
        parameter: Name of the parameter.
        value: Rejected value.

    Returns:
        AnalyzerError with appropriate code.
    """
    return AnalyzerError(
        f"{parameter} must be >= 1, got {value}",
        parameter=parameter,
        code=ErrorCode.ANA_INVALID_PARAMS,
    )


__all__ = [
    "ErrorCode",
    "GroupStatsError",
    "ConfigurationError",
    "StoreError",
    "MessageStoreError",
    "RosterUnavailableError",
    "RosterQueryError",
    "AnalyzerError",
    "message_db_not_found",
    "roster_db_not_found",
    "invalid_analyzer_param",
]
