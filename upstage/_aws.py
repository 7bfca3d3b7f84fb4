"""AWS client factory functions for upstage."""

import os
from typing import Any

import boto3


def get_s3_client(region: str = "us-east-1") -> Any:
    """Get S3 client with endpoint from AWS_ENDPOINT_URL env var."""
    kwargs: dict[str, str] = {"region_name": region}
    if endpoint := os.environ.get("AWS_ENDPOINT_URL"):
        kwargs["endpoint_url"] = endpoint
    return boto3.client("s3", **kwargs)
