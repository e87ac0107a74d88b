"""Blocking execution of aws CLI commands."""

import os
import subprocess

from s3deploy.core.exceptions import CommandError
from s3deploy.core.logging import get_command_logger
from s3deploy.deploy.commands import format_command
from s3deploy.deploy.models import AwsCredentials

logger = get_command_logger()


class CommandRunner:
    """Runs external commands with credentials passed through the child environment.

    In dry-run mode commands are only printed and a successful, empty result
    is returned.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def run(
        self,
        args: list[str],
        credentials: AwsCredentials | None = None,
        capture: bool = False,
    ) -> subprocess.CompletedProcess:
        """Run a command and wait for it to exit.

        Args:
            args: Program and arguments
            credentials: Values exported to the child's environment
            capture: Capture stdout/stderr as text instead of streaming
                them to the console

        Returns:
            The completed process; a non-zero return code is not raised

        Raises:
            CommandError: If the command could not be launched
        """
        display = format_command(args)

        if self.dry_run:
            logger.info(f"[dry-run] Would run: {display}")
            return subprocess.CompletedProcess(args, 0, stdout="", stderr="")

        run_env = os.environ.copy()
        if credentials is not None:
            run_env.update(credentials.to_env())

        logger.debug(f"Running: {display}")

        try:
            return subprocess.run(
                args,
                capture_output=capture,
                text=True,
                env=run_env,
            )
        except FileNotFoundError:
            raise CommandError(
                f"Command not found: {args[0]}. Install the AWS CLI and make sure it is on PATH.",
                command=args,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise CommandError(f"Failed to run {display}: {e}", command=args)
