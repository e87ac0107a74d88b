"""Input and runtime configuration for s3deploy using Pydantic."""

import os
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from s3deploy.core.exceptions import ConfigurationError
from s3deploy.core.logging import LogLevel
from s3deploy.deploy.models import DEFAULT_REGION, DEFAULT_SOURCE_DIR, DeploymentConfig


# Action input names
ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
S3_BUCKET = "AWS_S3_BUCKET"
SOURCE_DIR = "SOURCE_DIR"
REGION = "AWS_REGION"
CLOUDFRONT_DISTRIBUTION_ID = "CLOUDFRONT_DISTRIBUTION_ID"
S3_PREFIX = "AWS_S3_PREFIX"
S3_ENDPOINT = "AWS_S3_ENDPOINT"
S3_ACL = "AWS_S3_ACL"
DELETE_REMOVED = "DELETE_REMOVED"

INPUT_NAMES = [
    ACCESS_KEY_ID,
    SECRET_ACCESS_KEY,
    S3_BUCKET,
    SOURCE_DIR,
    REGION,
    CLOUDFRONT_DISTRIBUTION_ID,
    S3_PREFIX,
    S3_ENDPOINT,
    S3_ACL,
    DELETE_REMOVED,
]

# YAML 1.2 core schema booleans
TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


class RunnerSettings(BaseSettings):
    """Runtime settings read from S3DEPLOY_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="S3DEPLOY_", extra="ignore", populate_by_name=True)

    aws_cli: str = "aws"
    log_level: LogLevel = LogLevel.INFO
    dry_run: bool = False
    config: str | None = None
    github_output: str | None = Field(default=None, validation_alias="GITHUB_OUTPUT")


def input_env_name(name: str) -> str:
    """Environment variable a pipeline uses to pass the named input."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


class ActionInputs:
    """Reads named action inputs.

    Values come from INPUT_<NAME> environment variables first and then from
    an optional mapping loaded from a YAML inputs file.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        fallback: Mapping[str, Any] | None = None,
    ):
        self._environ = environ if environ is not None else os.environ
        self._fallback = dict(fallback or {})

    def get_input(self, name: str, required: bool = False) -> str:
        """Get an input value, stripped of surrounding whitespace.

        Raises:
            ConfigurationError: If a required input is missing or empty
        """
        value = self._environ.get(input_env_name(name), "")
        if not value and name in self._fallback:
            fallback = self._fallback[name]
            value = "" if fallback is None else str(fallback)
        value = value.strip()

        if required and not value:
            raise ConfigurationError(f"Input required and not supplied: {name}")
        return value

    def get_boolean_input(self, name: str, required: bool = False) -> bool:
        """Get a boolean input. An empty optional input is False.

        Raises:
            ConfigurationError: If the value is not a core schema boolean
        """
        value = self.get_input(name, required=required)
        if value == "":
            return False
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        raise ConfigurationError(
            f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}",
            details={"support": "true | True | TRUE | false | False | FALSE"},
        )


def load_input_file(path: str | Path) -> dict[str, Any]:
    """Load an inputs YAML file mapping input names to values."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Inputs file not found: {path}")

    try:
        with open(config_path) as f:
            content = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}")

    if not isinstance(content, dict):
        raise ConfigurationError(f"Inputs file must contain a mapping: {config_path}")

    non_string = [str(key) for key in content if not isinstance(key, str)]
    if non_string:
        raise ConfigurationError(
            f"Input names in {config_path} must be strings",
            details={"invalid": ", ".join(sorted(non_string))},
        )

    unknown = sorted(set(content) - set(INPUT_NAMES))

    if unknown:
        raise ConfigurationError(
            f"Unknown inputs in {config_path}",
            details={"unknown": ", ".join(unknown)},
        )
    return content


def load_deployment_config(
    inputs: ActionInputs,
    path_exists: Callable[[str], bool] = os.path.exists,
) -> DeploymentConfig:
    """Read and validate the deployment configuration.

    Args:
        inputs: Input reader
        path_exists: Filesystem existence check for the source directory

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If a required input is missing, a value is
            invalid, or the source directory does not exist
    """
    access_key_id = inputs.get_input(ACCESS_KEY_ID, required=True)
    secret_access_key = inputs.get_input(SECRET_ACCESS_KEY, required=True)
    bucket_name = inputs.get_input(S3_BUCKET, required=True)
    source_dir = inputs.get_input(SOURCE_DIR) or DEFAULT_SOURCE_DIR
    region = inputs.get_input(REGION) or DEFAULT_REGION
    cdn_distribution_id = inputs.get_input(CLOUDFRONT_DISTRIBUTION_ID)
    prefix = inputs.get_input(S3_PREFIX)
    endpoint = inputs.get_input(S3_ENDPOINT)
    acl = inputs.get_input(S3_ACL)
    delete_removed = inputs.get_boolean_input(DELETE_REMOVED)

    if not path_exists(source_dir):
        raise ConfigurationError(f"Source directory does not exist: {source_dir}")

    try:
        return DeploymentConfig(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            bucket_name=bucket_name,
            source_dir=source_dir,
            region=region,
            prefix=prefix,
            endpoint=endpoint,
            acl=acl,
            delete_removed=delete_removed,
            cdn_distribution_id=cdn_distribution_id,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid deployment configuration: {e}")


def get_default_settings() -> RunnerSettings:
    """Get runtime settings from the environment.

    Raises:
        ConfigurationError: If an S3DEPLOY_* variable holds an invalid value
    """
    try:
        return RunnerSettings()
    except ValidationError as e:
        fields = ", ".join(f"S3DEPLOY_{str(err['loc'][0]).upper()}" for err in e.errors() if err["loc"])
        raise ConfigurationError(f"Invalid S3DEPLOY_* settings: {fields or e}")
