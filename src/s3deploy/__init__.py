"""s3deploy - sync a directory to S3 and invalidate CloudFront from CI."""

__version__ = "1.0.0"
