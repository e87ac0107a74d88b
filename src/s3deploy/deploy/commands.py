"""aws CLI command construction and output parsing."""

import re

from s3deploy.deploy.models import DeploymentConfig

INVALIDATE_ALL_PATHS = "/*"

# "Invalidation": { ... "Id": "<id>" ... }
INVALIDATION_ID_PATTERN = re.compile(
    r'"Invalidation"\s*:\s*\{[^{}]*?"Id"\s*:\s*"([^"]+)"',
    re.DOTALL,
)


def build_sync_command(config: DeploymentConfig, aws_cli: str = "aws") -> list[str]:
    """Build the `aws s3 sync` argument list.

    Optional clauses are appended in a fixed order: ACL, endpoint, delete.
    """
    args = [
        aws_cli,
        "s3",
        "sync",
        config.source_dir,
        config.destination_url,
        "--no-progress",
    ]

    if config.acl:
        args.extend(["--acl", config.acl])

    if config.endpoint:
        args.extend(["--endpoint-url", config.endpoint])

    if config.delete_removed:
        args.append("--delete")

    return args


def build_invalidation_command(
    distribution_id: str,
    aws_cli: str = "aws",
    paths: str = INVALIDATE_ALL_PATHS,
) -> list[str]:
    """Build the `aws cloudfront create-invalidation` argument list.

    JSON output is requested explicitly so the invalidation id can be parsed
    regardless of the output format configured for the aws CLI.
    """
    return [
        aws_cli,
        "cloudfront",
        "create-invalidation",
        "--distribution-id",
        distribution_id,
        "--paths",
        paths,
        "--output",
        "json",
    ]


def format_command(args: list[str], head: int = 3) -> str:
    """Render an argument list for display.

    The program and subcommand words (the first `head` arguments) and
    `--flags` are left bare; every other argument is double quoted.
    """
    parts = list(args[:head])
    for arg in args[head:]:
        if arg.startswith("--"):
            parts.append(arg)
        else:
            escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'"{escaped}"')
    return " ".join(parts)


def parse_invalidation_id(output: str | None) -> str:
    """Extract the invalidation id from create-invalidation output.

    Returns an empty string when the output has no invalidation id.
    """
    if not output:
        return ""
    match = INVALIDATION_ID_PATTERN.search(output)
    if match is None:
        return ""
    return match.group(1)
