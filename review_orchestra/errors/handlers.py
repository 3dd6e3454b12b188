"""Error classification and recovery suggestions for review-orchestra."""

from dataclasses import dataclass
from typing import Protocol

from review_orchestra.config import CLAUDE_INSTALL_COMMANDS
from review_orchestra.errors.taxonomy import (
    ErrorCategory,
    OrchestraError,
    RecoverableError,
)


@dataclass
class RecoveryResult:
    """Result of error recovery attempt.

    Attributes:
        success: Whether recovery was successful
        message: Human-readable message about the failure
        suggestion: Optional suggestion for user action
    """

    success: bool
    message: str
    suggestion: str | None = None


class ErrorRecoveryStrategy(Protocol):
    """Protocol for error recovery strategies."""

    def can_handle(self, error: RecoverableError) -> bool:
        """Check if this strategy can handle the error."""
        ...

    def recover(self, error: RecoverableError) -> RecoveryResult:
        """Produce a recovery result for the error."""
        ...


class ClaudeMissingRecovery:
    """Suggest manual installation of the claude CLI."""

    def can_handle(self, error: RecoverableError) -> bool:
        return error.category == ErrorCategory.COMMAND_NOT_FOUND

    def recover(self, error: RecoverableError) -> RecoveryResult:
        lines = ["Please install Claude Code manually:"]
        lines.append(f"  {CLAUDE_INSTALL_COMMANDS[0]}")
        lines.append("  or visit: https://claude.ai/code")
        lines.append("Re-run with --skip-claude-install to skip this check.")
        return RecoveryResult(
            success=False,
            message=error.user_message,
            suggestion="\n".join(lines),
        )


class BackupNotFoundRecovery:
    """Point the user at the list of existing backups."""

    def can_handle(self, error: RecoverableError) -> bool:
        return error.category == ErrorCategory.BACKUP_NOT_FOUND

    def recover(self, error: RecoverableError) -> RecoveryResult:
        return RecoveryResult(
            success=False,
            message=error.user_message,
            suggestion="Run 'orchestra list-backups' to see available backups.",
        )


class PermissionDeniedRecovery:
    """Suggest checking and fixing permissions."""

    def can_handle(self, error: RecoverableError) -> bool:
        return error.category == ErrorCategory.PERMISSION_DENIED

    def recover(self, error: RecoverableError) -> RecoveryResult:
        file_path = error.context.get("file_path", "")
        suggestion = (
            f"Permission denied for: {file_path}\n\n"
            "To fix this, you may need to:\n"
            f"1. Check permissions: `ls -la {file_path}`\n"
            f"2. Change ownership if needed: `sudo chown -R $USER {file_path}`\n"
            "3. Point ORCHESTRA_CLAUDE_DIR at a writable directory"
        )
        return RecoveryResult(
            success=False,
            message=error.user_message,
            suggestion=suggestion,
        )


class ErrorHandler:
    """Central error handler with recovery strategies.

    Classifies exceptions raised by CLI commands and attaches a
    suggestion the user can act on.
    """

    def __init__(self) -> None:
        self.strategies: list[ErrorRecoveryStrategy] = [
            ClaudeMissingRecovery(),
            BackupNotFoundRecovery(),
            PermissionDeniedRecovery(),
        ]

    def classify_error(
        self, error: Exception, context: dict | None = None
    ) -> RecoverableError:
        """Classify an error into a category with recovery information.

        Args:
            error: The exception to classify
            context: Optional additional context about the error

        Returns:
            RecoverableError with classification and recovery info
        """
        context = dict(context or {})

        if isinstance(error, OrchestraError):
            context = {**error.context, **context}
            return RecoverableError(
                category=error.category,
                original_error=error,
                context=context,
                recovery_suggestion=_DEFAULT_SUGGESTIONS.get(
                    error.category, "Check the error message above and try again."
                ),
                user_message=str(error),
            )

        if isinstance(error, PermissionError):
            context.setdefault("file_path", error.filename or "")
            return RecoverableError(
                category=ErrorCategory.PERMISSION_DENIED,
                original_error=error,
                context=context,
                recovery_suggestion="Check file permissions with `ls -la`",
                user_message=f"Permission denied: {error.filename or error}",
            )

        if isinstance(error, FileNotFoundError):
            context.setdefault("file_path", error.filename or "")
            return RecoverableError(
                category=ErrorCategory.FILE_NOT_FOUND,
                original_error=error,
                context=context,
                recovery_suggestion="Check the path and try again.",
                user_message=f"File not found: {error.filename or error}",
            )

        if isinstance(error, ValueError):
            return RecoverableError(
                category=ErrorCategory.USER_ERROR,
                original_error=error,
                context=context,
                recovery_suggestion="Run 'orchestra help' for usage.",
                user_message=str(error),
            )

        return RecoverableError(
            category=ErrorCategory.SYSTEM_ERROR,
            original_error=error,
            context=context,
            recovery_suggestion="Check the error message above and try again.",
            user_message=f"Unexpected error: {error}",
        )

    def handle(self, error: Exception, context: dict | None = None) -> RecoveryResult:
        """Handle error with the first matching recovery strategy.

        Args:
            error: The exception to handle
            context: Optional additional context about the error

        Returns:
            Result of the recovery attempt
        """
        classified = self.classify_error(error, context)

        for strategy in self.strategies:
            if strategy.can_handle(classified):
                return strategy.recover(classified)

        return RecoveryResult(
            success=False,
            message=classified.user_message,
            suggestion=classified.recovery_suggestion,
        )


_DEFAULT_SUGGESTIONS = {
    ErrorCategory.INSTALL_ERROR: "Restore the previous state with 'orchestra restore <backup-name>'.",
    ErrorCategory.INVALID_SUMMARY: "Compare against 'orchestra summary template'.",
    ErrorCategory.INVALID_PROMPT: "Run 'orchestra check' for a full report.",
}
