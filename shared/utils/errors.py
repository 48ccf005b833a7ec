"""
Custom error classes for the aggregation core.

Provides structured error handling with error codes,
context information, and proper exception chaining.
"""

from typing import Optional, Dict, Any, Iterable
from dataclasses import dataclass


@dataclass
class ErrorContext:
    """Error context information."""
    service: str
    operation: str
    series_id: Optional[str] = None
    correlation_id: Optional[str] = None
    metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


class DataProcessingError(Exception):
    """Base exception for data processing errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        context: Optional[ErrorContext] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        result = {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

        if self.context:
            result["context"] = {
                "service": self.context.service,
                "operation": self.context.operation,
                "series_id": self.context.series_id,
                "correlation_id": self.context.correlation_id,
                "metadata": self.context.metadata,
            }

        return result


class ValidationError(DataProcessingError):
    """Error raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        context: Optional[ErrorContext] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            context=context,
            details=details or {}
        )
        self.field = field
        self.value = value

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)


class AggregatorNotFoundError(DataProcessingError, LookupError):
    """Error raised when no aggregator is registered under a name.

    The query layer turns this into an "unsupported aggregator" response;
    it is never silently replaced by another aggregator.
    """

    def __init__(
        self,
        name: str,
        available: Optional[Iterable[str]] = None,
        context: Optional[ErrorContext] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"No such aggregator: {name}",
            error_code="AGGREGATOR_NOT_FOUND",
            context=context,
            details=details or {}
        )
        self.name = name
        self.available = sorted(available) if available is not None else []

        self.details["name"] = name
        if self.available:
            self.details["available"] = self.available


class EmptySequenceError(DataProcessingError):
    """Error raised when an aggregation receives a sequence with no values."""

    def __init__(
        self,
        domain: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        message = "Cannot aggregate an empty sequence"
        if domain:
            message = f"Cannot aggregate an empty {domain} sequence"
        super().__init__(
            message=message,
            error_code="EMPTY_SEQUENCE",
            context=context,
            details=details or {}
        )
        self.domain = domain

        if domain:
            self.details["domain"] = domain


def create_error_context(
    service: str,
    operation: str,
    series_id: Optional[str] = None,
    correlation_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> ErrorContext:
    """Create error context."""
    return ErrorContext(
        service=service,
        operation=operation,
        series_id=series_id,
        correlation_id=correlation_id,
        metadata=metadata or {}
    )
