"""
Error model for the reporting tools.

Provides structured error codes and sanitized error messages. The engine
itself degrades gracefully on malformed records; these errors are only
raised for malformed tool requests and unexpected failures.
"""

import os
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Structured error codes for the MCP tools."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolError(Exception):
    """Base exception for tool errors with structured error information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None
    ):
        """
        Initialize a tool error.

        Args:
            code: The error code
            message: Human-readable error message
            retryable: Whether the operation can be retried
            original_error: The original exception if this wraps another error
        """
        self.code = code
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format for MCP response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "retryable": self.retryable
            }
        }


def sanitize_path(path: str) -> str:
    """
    Return only the basename for absolute paths, keep relative paths.

    Args:
        path: The file path to sanitize

    Returns:
        Sanitized path string
    """
    if os.path.isabs(path):
        return os.path.basename(path)
    return path


def sanitize_stack_trace(error_msg: str) -> str:
    """
    Keep only the first line of an error message.

    Args:
        error_msg: The original error message

    Returns:
        Error message without stack trace
    """
    lines = error_msg.split('\n')
    if lines:
        return lines[0].strip()
    return error_msg


def create_validation_error(message: str) -> ToolError:
    """
    Create a validation error.

    Args:
        message: Description of the validation failure

    Returns:
        ToolError with VALIDATION_ERROR code
    """
    return ToolError(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        retryable=False
    )


def create_file_not_found_error(file_path: str, file_type: str = "File") -> ToolError:
    """
    Create a file not found error.

    Args:
        file_path: The file path that was not found
        file_type: Type of file (e.g., "Presets file")

    Returns:
        ToolError with FILE_NOT_FOUND code
    """
    sanitized_path = sanitize_path(file_path)
    return ToolError(
        code=ErrorCode.FILE_NOT_FOUND,
        message=f"{file_type} not found: {sanitized_path}",
        retryable=False
    )


def create_internal_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an internal error for unexpected exceptions.

    Args:
        message: Description of the internal error
        original_error: The original exception

    Returns:
        ToolError with INTERNAL_ERROR code
    """
    sanitized_message = sanitize_stack_trace(message)

    return ToolError(
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )
