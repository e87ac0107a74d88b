"""Click context object for sharing state across commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from s3deploy.config import ActionInputs, RunnerSettings, get_default_settings, load_input_file
from s3deploy.core.logging import StructuredLogger, level_for_verbosity, setup_logging
from s3deploy.core.output import OutputFormat, OutputFormatter
from s3deploy.core.reporter import ActionReporter

if TYPE_CHECKING:
    from s3deploy.deploy.executor import CommandRunner


class DeployContext:
    """Shared context object for s3deploy commands.

    This object is passed through Click's context mechanism and provides
    access to settings, the input reader, and the reporters.
    """

    def __init__(
        self,
        settings: RunnerSettings | None = None,
        config_file: str | None = None,
        output_format: OutputFormat | None = None,
        verbose: int = 0,
        quiet: bool = False,
        dry_run: bool = False,
        color: bool = True,
    ):
        self._settings = settings or get_default_settings()
        self._config_file = config_file or self._settings.config
        self._output_format = output_format or OutputFormat.TABLE
        self._dry_run = dry_run or self._settings.dry_run

        log_level = level_for_verbosity(verbose, quiet, default=self._settings.log_level)
        setup_logging(log_level, rich_output=color)
        self._logger = StructuredLogger("context")

        self._output = OutputFormatter(
            format=self._output_format,
            color=color,
            quiet=quiet,
        )
        self._reporter = ActionReporter(
            github_output=self._settings.github_output,
            quiet=quiet,
        )

        self._inputs: ActionInputs | None = None
        self._runner: CommandRunner | None = None

    @property
    def settings(self) -> RunnerSettings:
        return self._settings

    @property
    def output(self) -> OutputFormatter:
        """Get the output formatter."""
        return self._output

    @property
    def reporter(self) -> ActionReporter:
        """Get the pipeline reporter."""
        return self._reporter

    @property
    def logger(self) -> StructuredLogger:
        return self._logger

    @property
    def inputs(self) -> ActionInputs:
        """Get or create the input reader."""
        if self._inputs is None:
            fallback: dict[str, Any] = {}
            if self._config_file:
                fallback = load_input_file(self._config_file)
                self._logger.debug("Loaded inputs file", path=self._config_file)
            self._inputs = ActionInputs(fallback=fallback)
        return self._inputs

    @property
    def runner(self) -> "CommandRunner":
        """Get or create the command runner."""
        if self._runner is None:
            from s3deploy.deploy.executor import CommandRunner

            self._runner = CommandRunner(dry_run=self._dry_run)
        return self._runner


# Click decorator for passing context
pass_context = click.make_pass_decorator(DeployContext, ensure=True)
