"""Error handling and recovery system for review-orchestra."""

from review_orchestra.errors.handlers import ErrorHandler, RecoveryResult
from review_orchestra.errors.taxonomy import (
    BackupNotFoundError,
    ClaudeNotInstalledError,
    ErrorCategory,
    InstallError,
    OrchestraError,
    PromptCheckError,
    RecoverableError,
    SummaryParseError,
)

__all__ = [
    "BackupNotFoundError",
    "ClaudeNotInstalledError",
    "ErrorCategory",
    "ErrorHandler",
    "InstallError",
    "OrchestraError",
    "PromptCheckError",
    "RecoverableError",
    "RecoveryResult",
    "SummaryParseError",
]
