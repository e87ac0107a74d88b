"""Pytest fixtures for s3deploy tests."""

import os
import subprocess
from typing import Any, Generator
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from s3deploy.config import ActionInputs, input_env_name
from s3deploy.core.reporter import ActionReporter


INVALIDATION_OUTPUT = '{"Invalidation":{"Id":"INVALIDATION123"}}'

DEFAULT_INPUTS = {
    "AWS_ACCESS_KEY_ID": "test-access-key",
    "AWS_SECRET_ACCESS_KEY": "test-secret-key",
    "AWS_S3_BUCKET": "test-bucket",
    "SOURCE_DIR": "test-source-dir",
    "AWS_REGION": "us-east-1",
    "CLOUDFRONT_DISTRIBUTION_ID": "test-distribution-id",
    "AWS_S3_PREFIX": "test-prefix",
    "AWS_S3_ENDPOINT": "test-endpoint",
    "AWS_S3_ACL": "public-read",
}


def make_environ(inputs: dict[str, str]) -> dict[str, str]:
    """Translate input names to the INPUT_* variables a runner would set."""
    return {input_env_name(name): value for name, value in inputs.items()}


def fake_aws(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
    """Stand-in for subprocess.run: every aws command succeeds."""
    if "create-invalidation" in args:
        return subprocess.CompletedProcess(args, 0, stdout=INVALIDATION_OUTPUT, stderr="")
    return subprocess.CompletedProcess(args, 0, stdout=None, stderr=None)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def source_dir(tmp_path, monkeypatch) -> str:
    """Create ./test-source-dir and run the test from its parent."""
    (tmp_path / "test-source-dir").mkdir()
    (tmp_path / "test-source-dir" / "index.html").write_text("<html></html>")
    monkeypatch.chdir(tmp_path)
    return "test-source-dir"


@pytest.fixture
def default_inputs() -> dict[str, str]:
    return dict(DEFAULT_INPUTS)


@pytest.fixture
def make_inputs():
    """Build an ActionInputs from the default inputs plus overrides."""

    def _make(**overrides: str) -> ActionInputs:
        inputs = {**DEFAULT_INPUTS, **overrides}
        return ActionInputs(environ=make_environ(inputs))

    return _make


@pytest.fixture
def mock_reporter() -> MagicMock:
    """Mock pipeline reporter."""
    return MagicMock(spec=ActionReporter)


@pytest.fixture
def mock_subprocess() -> Generator[MagicMock, None, None]:
    """Mock subprocess.run as used by the command runner."""
    with patch("s3deploy.deploy.executor.subprocess.run") as mock_run:
        mock_run.side_effect = fake_aws
        yield mock_run


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Clean environment variables before each test."""
    env_vars = [
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_DEFAULT_REGION",
        "AWS_S3_ENDPOINT",
        "GITHUB_OUTPUT",
        "S3DEPLOY_AWS_CLI",
        "S3DEPLOY_LOG_LEVEL",
        "S3DEPLOY_DRY_RUN",
        "S3DEPLOY_CONFIG",
    ] + [input_env_name(name) for name in [*DEFAULT_INPUTS, "DELETE_REMOVED"]]

    original = {k: os.environ.get(k) for k in env_vars}

    # Remove vars for clean test
    for k in env_vars:
        os.environ.pop(k, None)

    yield

    # Restore original values
    for k, v in original.items():
        if v is not None:
            os.environ[k] = v
        else:
            os.environ.pop(k, None)
