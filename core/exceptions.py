"""
Custom exceptions for the expense tracker backend.
"""
from typing import Any, Dict, Optional


class ExpenseTrackerException(Exception):
    """Base exception for all expense tracker errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FileProcessingError(ExpenseTrackerException):
    """Raised when an uploaded statement cannot be processed."""
    pass


class ParsingError(ExpenseTrackerException):
    """Raised when a statement file cannot be read into rows."""
    pass


class LLMError(ExpenseTrackerException):
    """Raised when the categorization gateway call fails."""
    pass


class ConfigurationError(ExpenseTrackerException):
    """Raised when configuration is invalid."""
    pass


class DataNotFoundError(ExpenseTrackerException):
    """Raised when required data is not found."""
    pass


class StorageError(ExpenseTrackerException):
    """Raised when a transaction store operation fails."""
    pass
