"""Deployment orchestration module."""

from s3deploy.deploy.models import (
    AwsCredentials,
    DeploymentConfig,
    DeploymentOutcome,
    RunState,
    StepResult,
)

# Deployer lives in s3deploy.deploy.orchestrator, which depends on
# s3deploy.config and is not imported here.
__all__ = [
    "AwsCredentials",
    "DeploymentConfig",
    "DeploymentOutcome",
    "RunState",
    "StepResult",
]
