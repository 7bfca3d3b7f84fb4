"""Deployment target description."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ServerSideEncryption(Enum):
    AES256 = "AES256"
    KMS = "aws:kms"

    @classmethod
    def parse(cls, value: str | None) -> ServerSideEncryption | None:
        """Parse a configured encryption value; empty or "none" means no encryption."""
        if value is None or value.strip().lower() in ("", "none"):
            return None
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Unknown server side encryption: {value}")


@dataclass(frozen=True)
class DeploymentTarget:
    """Where and how artifacts are stored for one deployment.

    Attributes:
        bucket_name: Deployment bucket receiving the template and artifacts.
        stage: Deployment stage, e.g. "dev".
        region: AWS region of the bucket.
        encryption: Server side encryption directive, or None to send none.
        kms_key_id: KMS key used with ``ServerSideEncryption.KMS``.
    """

    bucket_name: str
    stage: str = "dev"
    region: str = "us-east-1"
    encryption: ServerSideEncryption | None = None
    kms_key_id: str = ""
