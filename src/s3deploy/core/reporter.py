"""Pipeline-facing reporting: log lines, outputs, and the failure status.

Messages are written as GitHub Actions workflow commands so that errors and
warnings are annotated in the run UI. Outputs go to the file named by
GITHUB_OUTPUT, or to the console when the variable is unset.
"""

import uuid
from pathlib import Path

from rich.console import Console

from s3deploy.core.logging import get_logger

logger = get_logger(__name__)


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionReporter:
    """Reports progress and results back to the host pipeline."""

    def __init__(
        self,
        github_output: str | None = None,
        console: Console | None = None,
        quiet: bool = False,
    ):
        self.github_output = github_output
        self.quiet = quiet
        self.outputs: dict[str, str] = {}
        self.failed = False
        self._console = console or Console()

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def _write(self, line: str) -> None:
        self._console.out(line, highlight=False)

    def info(self, message: str) -> None:
        """Write an informational log line."""
        logger.debug(message)
        if self.quiet:
            return
        self._write(message)

    def warning(self, message: str) -> None:
        """Write a warning annotation."""
        logger.debug(message)
        self._write(f"::warning::{escape_data(message)}")

    def error(self, message: str) -> None:
        """Write an error annotation."""
        logger.debug(message)
        self._write(f"::error::{escape_data(message)}")

    def add_mask(self, value: str) -> None:
        """Ask the runner to redact a secret from the log."""
        if value:
            self._write(f"::add-mask::{escape_data(value)}")

    def set_output(self, name: str, value: str) -> None:
        """Set an output value for later pipeline steps."""
        self.outputs[name] = value

        if not self.github_output:
            self._write(f"{name}={value}")
            return

        if "\n" in value or "\r" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            entry = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            entry = f"{name}={value}\n"

        with open(Path(self.github_output), "a", encoding="utf-8") as f:
            f.write(entry)

    def set_failed(self, message: str) -> None:
        """Mark the step failed with a single error message."""
        self.failed = True
        self.error(message)
