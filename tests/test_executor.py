"""Tests for the command runner."""

import os
import subprocess
from unittest.mock import patch

import pytest

from s3deploy.core.exceptions import CommandError
from s3deploy.deploy.executor import CommandRunner
from s3deploy.deploy.models import AwsCredentials


@pytest.fixture
def credentials() -> AwsCredentials:
    return AwsCredentials(
        access_key_id="test-access-key",
        secret_access_key="test-secret-key",
        region="eu-west-1",
    )


class TestCommandRunner:
    """Tests for CommandRunner."""

    def test_streams_output_by_default(self, mock_subprocess):
        CommandRunner().run(["aws", "s3", "sync", "a", "s3://b"])
        kwargs = mock_subprocess.call_args.kwargs
        assert kwargs["capture_output"] is False
        assert kwargs["text"] is True

    def test_capture(self, mock_subprocess):
        result = CommandRunner().run(
            ["aws", "cloudfront", "create-invalidation"], capture=True
        )
        assert mock_subprocess.call_args.kwargs["capture_output"] is True
        assert "INVALIDATION123" in result.stdout

    def test_credentials_passed_to_child(self, mock_subprocess, credentials):
        CommandRunner().run(["aws", "s3", "ls"], credentials=credentials)

        env = mock_subprocess.call_args.kwargs["env"]
        assert env["AWS_ACCESS_KEY_ID"] == "test-access-key"
        assert env["AWS_SECRET_ACCESS_KEY"] == "test-secret-key"
        assert env["AWS_DEFAULT_REGION"] == "eu-west-1"
        assert "AWS_S3_ENDPOINT" not in env

    def test_parent_environment_untouched(self, mock_subprocess, credentials):
        CommandRunner().run(["aws", "s3", "ls"], credentials=credentials)
        assert "AWS_ACCESS_KEY_ID" not in os.environ
        assert "AWS_DEFAULT_REGION" not in os.environ

    def test_inherited_endpoint_kept_when_empty(self, mock_subprocess, credentials):
        os.environ["AWS_S3_ENDPOINT"] = "http://previous"
        CommandRunner().run(["aws", "s3", "ls"], credentials=credentials)
        assert mock_subprocess.call_args.kwargs["env"]["AWS_S3_ENDPOINT"] == "http://previous"

    def test_endpoint_exported(self, mock_subprocess):
        creds = AwsCredentials(access_key_id="k", secret_access_key="s", endpoint="http://minio")
        CommandRunner().run(["aws", "s3", "ls"], credentials=creds)
        assert mock_subprocess.call_args.kwargs["env"]["AWS_S3_ENDPOINT"] == "http://minio"

    def test_nonzero_exit_is_returned(self):
        with patch("s3deploy.deploy.executor.subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess(["aws"], 2)
            result = CommandRunner().run(["aws", "s3", "sync"])
        assert result.returncode == 2

    def test_command_not_found(self):
        with patch("s3deploy.deploy.executor.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(CommandError, match="Command not found: aws"):
                CommandRunner().run(["aws", "s3", "sync"])

    def test_os_error(self):
        with patch("s3deploy.deploy.executor.subprocess.run", side_effect=PermissionError("denied")):
            with pytest.raises(CommandError) as exc:
                CommandRunner().run(["aws", "s3", "sync"])
        assert exc.value.command == ["aws", "s3", "sync"]

    def test_dry_run_does_not_execute(self, mock_subprocess):
        result = CommandRunner(dry_run=True).run(["aws", "s3", "sync", "a", "s3://b"])
        mock_subprocess.assert_not_called()
        assert result.returncode == 0
        assert result.stdout == ""
