"""Deployment run orchestration.

A run moves strictly forward through its states:

    VALIDATING -> SETTING_ENV -> SYNCING -> INVALIDATING -> REPORTING_SUCCESS

INVALIDATING is skipped when no distribution id is configured. Each step
returns a StepResult; the first failed step moves the run to FAILED, which
reports a single failure message and runs nothing else. Side effects of
earlier steps (objects already synced) are left in place.
"""

import os
import warnings
from typing import Any, Callable

from s3deploy.config import ActionInputs, load_deployment_config
from s3deploy.core.exceptions import (
    CommandError,
    InvalidationError,
    ParseWarning,
    S3DeployError,
    SyncError,
)
from s3deploy.core.logging import StructuredLogger
from s3deploy.core.reporter import ActionReporter
from s3deploy.deploy.commands import (
    build_invalidation_command,
    build_sync_command,
    format_command,
    parse_invalidation_id,
)
from s3deploy.deploy.executor import CommandRunner
from s3deploy.deploy.models import (
    AwsCredentials,
    DeploymentConfig,
    DeploymentOutcome,
    RunState,
    StepResult,
)

OUTPUT_S3_URL = "s3_url"
OUTPUT_INVALIDATION_ID = "cloudfront_invalidation_id"

SYNC_ERROR_MESSAGE = "Error syncing files to S3"
INVALIDATION_ERROR_MESSAGE = "Error invalidating CloudFront cache"


class Deployer:
    """Runs one deployment: validate, sync, optionally invalidate, report."""

    def __init__(
        self,
        inputs: ActionInputs,
        reporter: ActionReporter,
        runner: CommandRunner | None = None,
        aws_cli: str = "aws",
        path_exists: Callable[[str], bool] = os.path.exists,
    ):
        self.inputs = inputs
        self.reporter = reporter
        self.runner = runner or CommandRunner()
        self.aws_cli = aws_cli
        self.path_exists = path_exists
        self._logger = StructuredLogger("deploy")
        self._log = self._logger

    def run(self) -> DeploymentOutcome:
        """Execute the deployment and report its result."""
        outcome = DeploymentOutcome()
        try:
            self._run(outcome)
        except Exception as e:
            # Anything unexpected still ends the run with a single failure report
            self._log.debug("Unexpected error during run", error=type(e).__name__)
            error = e if isinstance(e, S3DeployError) else S3DeployError(str(e) or type(e).__name__)
            self._fail(outcome, error)
        return outcome

    def _enter(self, outcome: DeploymentOutcome, state: RunState) -> None:
        outcome.state = state
        self._log = self._logger.bind(state=state.value)
        self._log.debug("Entered state")

    def _run(self, outcome: DeploymentOutcome) -> None:
        self._enter(outcome, RunState.VALIDATING)
        validated = self.validate()
        if not self._record(outcome, validated):
            return
        config: DeploymentConfig = validated.value

        self._enter(outcome, RunState.SETTING_ENV)
        prepared = self.prepare_credentials(config)
        if not self._record(outcome, prepared):
            return
        credentials: AwsCredentials = prepared.value

        self._enter(outcome, RunState.SYNCING)
        synced = self.sync(config, credentials, outcome)
        if not self._record(outcome, synced):
            return

        invalidation_id = ""
        if config.invalidation_enabled:
            self._enter(outcome, RunState.INVALIDATING)
            invalidated = self.invalidate(config, credentials, outcome)
            if not self._record(outcome, invalidated):
                return
            invalidation_id = invalidated.value or ""

        self._enter(outcome, RunState.REPORTING_SUCCESS)
        outcome.s3_url = config.destination_url
        self.reporter.set_output(OUTPUT_S3_URL, config.destination_url)
        if invalidation_id:
            outcome.invalidation_id = invalidation_id
            self.reporter.set_output(OUTPUT_INVALIDATION_ID, invalidation_id)

        self._log.info("Deployment finished", s3_url=config.destination_url)

    def _record(self, outcome: DeploymentOutcome, result: StepResult[Any]) -> bool:
        outcome.steps.append(result)
        if result.success:
            return True
        self._fail(outcome, result.error)
        return False

    def _fail(self, outcome: DeploymentOutcome, error: S3DeployError | None) -> None:
        self._log.debug("Run failed")
        self._enter(outcome, RunState.FAILED)
        outcome.error = error
        self.reporter.set_failed(outcome.failure_message or "Action failed with error: unknown")

    def validate(self) -> StepResult[DeploymentConfig]:
        """Read inputs and check that the source directory exists."""
        try:
            config = load_deployment_config(self.inputs, path_exists=self.path_exists)
        except S3DeployError as e:
            return StepResult.fail("validate", e)
        return StepResult.ok("validate", config)

    def prepare_credentials(self, config: DeploymentConfig) -> StepResult[AwsCredentials]:
        """Build the credential context handed to every aws invocation."""
        credentials = config.credentials
        self.reporter.add_mask(credentials.secret_access_key)
        self._log.debug(
            "Prepared aws environment",
            variables=",".join(sorted(credentials.to_env())),
        )
        return StepResult.ok("set_env", credentials)

    def sync(
        self,
        config: DeploymentConfig,
        credentials: AwsCredentials,
        outcome: DeploymentOutcome | None = None,
    ) -> StepResult[str]:
        """Sync the source directory to the bucket, streaming aws output."""
        destination = config.destination_url
        self.reporter.info(f"Syncing files from {config.source_dir} to S3 bucket: {destination}")
        if config.endpoint:
            self.reporter.info(f"Using endpoint: {config.endpoint}")

        args = build_sync_command(config, aws_cli=self.aws_cli)
        if outcome is not None:
            outcome.commands.append(args)

        try:
            result = self.runner.run(args, credentials=credentials, capture=False)
            if result.returncode != 0:
                raise SyncError(
                    command_failed_message(args, result.returncode),
                    command=args,
                    returncode=result.returncode,
                )
        except CommandError as e:
            self.reporter.error(SYNC_ERROR_MESSAGE)
            if not isinstance(e, SyncError):
                e = SyncError(e.message, command=e.command, returncode=e.returncode)
            return StepResult.fail("sync", e)

        return StepResult.ok("sync", destination)

    def invalidate(
        self,
        config: DeploymentConfig,
        credentials: AwsCredentials,
        outcome: DeploymentOutcome | None = None,
    ) -> StepResult[str]:
        """Invalidate every path of the distribution and parse the invalidation id.

        A missing id is not a failure: a ParseWarning is issued and the step
        succeeds with an empty id, so no id output is set.
        """
        distribution_id = config.cdn_distribution_id
        self.reporter.info(f"Invalidating CloudFront distribution: {distribution_id}")

        args = build_invalidation_command(distribution_id, aws_cli=self.aws_cli)
        if outcome is not None:
            outcome.commands.append(args)

        try:
            result = self.runner.run(args, credentials=credentials, capture=True)
            if result.returncode != 0:
                stderr = (result.stderr or "").strip()
                raise InvalidationError(
                    command_failed_message(args, result.returncode, stderr),
                    command=args,
                    returncode=result.returncode,
                    stderr=stderr,
                )
        except CommandError as e:
            self.reporter.error(INVALIDATION_ERROR_MESSAGE)
            if not isinstance(e, InvalidationError):
                e = InvalidationError(e.message, command=e.command, returncode=e.returncode)
            return StepResult.fail("invalidate", e)

        if self.runner.dry_run:
            return StepResult.ok("invalidate", "")

        self.reporter.info("CloudFront cache invalidation completed.")

        invalidation_id = parse_invalidation_id(result.stdout)
        if not invalidation_id:
            warnings.warn(
                "No invalidation id found in create-invalidation output",
                ParseWarning,
                stacklevel=2,
            )
        return StepResult.ok("invalidate", invalidation_id)


def command_failed_message(args: list[str], returncode: int, stderr: str = "") -> str:
    """Failure text naming the command, its exit code and any captured stderr."""
    message = f"Command failed: {format_command(args)} (exit code {returncode})"
    if stderr:
        message = f"{message}: {stderr}"
    return message
