"""Custom exceptions for s3deploy."""

from typing import Any


class S3DeployError(Exception):
    """Base exception for all s3deploy errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigurationError(S3DeployError):
    """Missing or invalid inputs, or an absent source directory."""

    pass


class CommandError(S3DeployError):
    """An external command exited non-zero or could not be launched."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


class SyncError(CommandError):
    """The `aws s3 sync` invocation failed."""

    pass


class InvalidationError(CommandError):
    """The `aws cloudfront create-invalidation` invocation failed."""

    pass


class ParseWarning(UserWarning):
    """Invalidation output did not contain an invalidation id."""

    pass
