"""Deployment data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, field_validator

from s3deploy.core.exceptions import S3DeployError

T = TypeVar("T")

DEFAULT_SOURCE_DIR = "."
DEFAULT_REGION = "us-east-1"


class RunState(str, Enum):
    """Run states, in the order a successful run visits them."""

    VALIDATING = "validating"
    SETTING_ENV = "setting_env"
    SYNCING = "syncing"
    INVALIDATING = "invalidating"
    REPORTING_SUCCESS = "reporting_success"
    FAILED = "failed"


class AwsCredentials(BaseModel):
    """Credentials and endpoint handed to the aws CLI through its environment."""

    model_config = {"frozen": True}

    access_key_id: str
    secret_access_key: str
    region: str = DEFAULT_REGION
    endpoint: str = ""

    def to_env(self) -> dict[str, str]:
        """Environment variables the aws CLI reads.

        AWS_S3_ENDPOINT is only present when an endpoint was given, so an
        inherited value is never replaced by an empty string.
        """
        env = {
            "AWS_ACCESS_KEY_ID": self.access_key_id,
            "AWS_SECRET_ACCESS_KEY": self.secret_access_key,
            "AWS_DEFAULT_REGION": self.region,
        }
        if self.endpoint != "":
            env["AWS_S3_ENDPOINT"] = self.endpoint
        return env

    def __repr__(self) -> str:
        return (
            f"AwsCredentials(access_key_id='***', secret_access_key='***', "
            f"region={self.region!r}, endpoint={self.endpoint!r})"
        )


class DeploymentConfig(BaseModel):
    """Immutable description of one deployment run."""

    model_config = {"frozen": True}

    access_key_id: str
    secret_access_key: str
    bucket_name: str
    source_dir: str = DEFAULT_SOURCE_DIR
    region: str = DEFAULT_REGION
    prefix: str = ""
    endpoint: str = ""
    acl: str = ""
    delete_removed: bool = False
    cdn_distribution_id: str = ""

    @field_validator("access_key_id", "secret_access_key", "bucket_name")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @property
    def destination_url(self) -> str:
        """S3 URL the source directory is synced to."""
        if self.prefix:
            return f"s3://{self.bucket_name}/{self.prefix}"
        return f"s3://{self.bucket_name}"

    @property
    def invalidation_enabled(self) -> bool:
        return self.cdn_distribution_id != ""

    @property
    def credentials(self) -> AwsCredentials:
        return AwsCredentials(
            access_key_id=self.access_key_id,
            secret_access_key=self.secret_access_key,
            region=self.region,
            endpoint=self.endpoint,
        )

    def to_display_dict(self) -> dict[str, Any]:
        """Config as a dict with credentials masked."""
        return {
            "access_key_id": mask_secret(self.access_key_id),
            "secret_access_key": mask_secret(self.secret_access_key),
            "bucket_name": self.bucket_name,
            "source_dir": self.source_dir,
            "region": self.region,
            "prefix": self.prefix,
            "endpoint": self.endpoint,
            "acl": self.acl,
            "delete_removed": self.delete_removed,
            "cdn_distribution_id": self.cdn_distribution_id,
            "destination_url": self.destination_url,
        }


def mask_secret(value: str, visible: int = 4) -> str:
    """Mask all but the last few characters of a secret."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


@dataclass
class StepResult(Generic[T]):
    """Result from a single run step: either a value or an error."""

    name: str
    success: bool
    value: T | None = None
    error: S3DeployError | None = None

    @classmethod
    def ok(cls, name: str, value: T | None = None) -> "StepResult[T]":
        return cls(name=name, success=True, value=value)

    @classmethod
    def fail(cls, name: str, error: S3DeployError) -> "StepResult[T]":
        return cls(name=name, success=False, error=error)


@dataclass
class DeploymentOutcome:
    """Final record of a deployment run."""

    state: RunState = RunState.VALIDATING
    s3_url: str | None = None
    invalidation_id: str | None = None
    error: S3DeployError | None = None
    steps: list[StepResult[Any]] = field(default_factory=list)
    commands: list[list[str]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state == RunState.REPORTING_SUCCESS

    @property
    def failure_message(self) -> str | None:
        if self.error is None:
            return None
        return f"Action failed with error: {self.error}"
