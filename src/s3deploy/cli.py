"""Main CLI entry point for s3deploy."""

import sys
import warnings
from typing import Any

import click
from rich.console import Console

from s3deploy import __version__
from s3deploy.config import get_default_settings, load_deployment_config
from s3deploy.core.context import DeployContext, pass_context
from s3deploy.core.exceptions import ConfigurationError, ParseWarning, S3DeployError
from s3deploy.core.output import OutputFormat
from s3deploy.deploy.commands import (
    build_invalidation_command,
    build_sync_command,
    format_command,
)
from s3deploy.deploy.orchestrator import Deployer


CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
}


class OutputFormatType(click.ParamType):
    """Custom Click parameter type for output format."""

    name = "format"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        try:
            return OutputFormat(value.lower())
        except ValueError:
            self.fail(
                f"Invalid format '{value}'. Choose from: table, json, yaml",
                param,
                ctx,
            )


OUTPUT_FORMAT = OutputFormatType()


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console = Console()
    console.print(f"s3deploy version {__version__}")
    ctx.exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-o",
    "--output",
    "output_format",
    type=OUTPUT_FORMAT,
    metavar="FORMAT",
    help="Output format for config and plan: table, json, yaml",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for info, -vvv for debug)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Suppress non-essential output",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the aws commands without running them",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    metavar="FILE",
    envvar="S3DEPLOY_CONFIG",
    help="YAML file with fallback input values",
)
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
@click.pass_context
def cli(
    ctx: click.Context,
    output_format: OutputFormat | None,
    verbose: int,
    quiet: bool,
    dry_run: bool,
    no_color: bool,
    config_file: str | None,
) -> None:
    """s3deploy - Sync a directory to S3 and invalidate CloudFront.

    Inputs are read from INPUT_<NAME> environment variables, as set by
    GitHub Actions, falling back to values in the --config file.

    \b
    Examples:
        s3deploy run
        s3deploy --dry-run run
        s3deploy -c inputs.yaml plan
        s3deploy -o json config

    \b
    Inputs:
        AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_S3_BUCKET (required)
        SOURCE_DIR, AWS_REGION, AWS_S3_PREFIX, AWS_S3_ENDPOINT, AWS_S3_ACL,
        DELETE_REMOVED, CLOUDFRONT_DISTRIBUTION_ID
    """
    try:
        ctx.obj = DeployContext(
            settings=get_default_settings(),
            config_file=config_file,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            dry_run=dry_run,
            color=not no_color,
        )

        if dry_run and not quiet:
            ctx.obj.output.print_warning("Dry-run mode enabled - no commands will be executed")

    except ConfigurationError as e:
        console = Console(stderr=True)
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)


@cli.command()
@pass_context
def run(ctx: DeployContext) -> None:
    """Sync files to S3 and invalidate CloudFront if configured.

    Sets the s3_url output, and cloudfront_invalidation_id when an
    invalidation was created. Exits 1 on any failure.
    """
    try:
        inputs = ctx.inputs
    except ConfigurationError as e:
        ctx.reporter.set_failed(f"Action failed with error: {e}")
        sys.exit(ctx.reporter.exit_code)

    deployer = Deployer(
        inputs=inputs,
        reporter=ctx.reporter,
        runner=ctx.runner,
        aws_cli=ctx.settings.aws_cli,
    )
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ParseWarning)
        outcome = deployer.run()
    for warning in caught:
        if issubclass(warning.category, ParseWarning):
            ctx.reporter.warning(str(warning.message))
        else:
            warnings.showwarning(
                warning.message, warning.category, warning.filename, warning.lineno
            )
    ctx.logger.debug("Run complete", state=outcome.state.value)

    if not outcome.succeeded:
        sys.exit(ctx.reporter.exit_code)


@cli.command()
@pass_context
def config(ctx: DeployContext) -> None:
    """Show the resolved deployment configuration with secrets masked."""
    deployment = load_deployment_config(ctx.inputs)
    ctx.output.print_data(deployment.to_display_dict(), title="Deployment Configuration")


@cli.command()
@pass_context
def plan(ctx: DeployContext) -> None:
    """Show the aws commands a run would execute."""
    deployment = load_deployment_config(ctx.inputs)
    aws_cli = ctx.settings.aws_cli

    steps = [{"step": "sync", "command": format_command(build_sync_command(deployment, aws_cli))}]
    if deployment.invalidation_enabled:
        invalidation = build_invalidation_command(deployment.cdn_distribution_id, aws_cli)
        steps.append({"step": "invalidate", "command": format_command(invalidation)})

    ctx.output.print_data(steps, title="Deployment Plan")


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except S3DeployError as e:
        console = Console(stderr=True)
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console = Console(stderr=True)
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
