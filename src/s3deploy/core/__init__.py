"""Core utilities and shared components for s3deploy."""

# Note: Import context lazily to avoid circular imports
# Use: from s3deploy.core.context import DeployContext, pass_context
from s3deploy.core.exceptions import (
    S3DeployError,
    ConfigurationError,
    CommandError,
    SyncError,
    InvalidationError,
    ParseWarning,
)
from s3deploy.core.output import OutputFormat, OutputFormatter
from s3deploy.core.reporter import ActionReporter

__all__ = [
    "S3DeployError",
    "ConfigurationError",
    "CommandError",
    "SyncError",
    "InvalidationError",
    "ParseWarning",
    "OutputFormat",
    "OutputFormatter",
    "ActionReporter",
]
