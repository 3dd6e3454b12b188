"""Error taxonomy and classification for review-orchestra."""

from dataclasses import dataclass, field
from enum import Enum


class ErrorCategory(Enum):
    """Classification of errors for recovery strategies."""

    USER_ERROR = "user_error"  # Bad arguments or input
    FILE_NOT_FOUND = "file_not_found"  # Missing files
    PERMISSION_DENIED = "permission_denied"  # Permission issues
    COMMAND_NOT_FOUND = "command_not_found"  # claude/npm/curl missing
    BACKUP_NOT_FOUND = "backup_not_found"  # Unknown backup name
    INVALID_SUMMARY = "invalid_summary"  # Malformed review summary
    INVALID_PROMPT = "invalid_prompt"  # Prompt file failed checks
    INSTALL_ERROR = "install_error"  # A copy step failed
    SYSTEM_ERROR = "system_error"  # Internal errors


class OrchestraError(Exception):
    """Base class for errors raised by review-orchestra.

    Attributes:
        category: Category used to pick a recovery suggestion
        context: Extra details (paths, backup names, field names)
    """

    category = ErrorCategory.SYSTEM_ERROR

    def __init__(self, message: str, **context) -> None:
        super().__init__(message)
        self.context = context


class InstallError(OrchestraError):
    """A step of the installation failed."""

    category = ErrorCategory.INSTALL_ERROR


class ClaudeNotInstalledError(OrchestraError):
    """The claude CLI is missing and could not be installed automatically."""

    category = ErrorCategory.COMMAND_NOT_FOUND


class BackupNotFoundError(OrchestraError):
    """The requested backup does not exist."""

    category = ErrorCategory.BACKUP_NOT_FOUND


class SummaryParseError(OrchestraError, ValueError):
    """A review summary is missing a field or has an invalid value."""

    category = ErrorCategory.INVALID_SUMMARY


class PromptCheckError(OrchestraError):
    """A prompt file could not be read or parsed."""

    category = ErrorCategory.INVALID_PROMPT


@dataclass
class RecoverableError:
    """An error classified for display to the user.

    Attributes:
        category: The error category for recovery strategy selection
        original_error: The original exception that was raised
        context: Additional context about the error (file paths, etc.)
        recovery_suggestion: Human-readable suggestion for fixing the error
        user_message: User-friendly error message
    """

    category: ErrorCategory
    original_error: Exception
    recovery_suggestion: str
    user_message: str
    context: dict = field(default_factory=dict)
