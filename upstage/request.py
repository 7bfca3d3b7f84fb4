"""Put-object request construction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, BinaryIO

from upstage.fingerprint import fingerprint, fingerprint_file
from upstage.target import DeploymentTarget, ServerSideEncryption

CONTENT_HASH_KEY = "content-hash"


@dataclass(frozen=True)
class UploadRequest:
    """A fully specified S3 put-object request.

    ``body`` is either raw bytes or an open binary file; file bodies keep their
    source path in ``body.name``.
    """

    bucket: str
    key: str
    body: bytes | BinaryIO
    content_type: str
    metadata: dict[str, str] = field(default_factory=dict)
    server_side_encryption: str | None = None
    kms_key_id: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Render keyword arguments for ``put_object``.

        Encryption keys are only present when encryption is configured.
        """
        params: dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": self.key,
            "Body": self.body,
            "ContentType": self.content_type,
            "Metadata": dict(self.metadata),
        }
        if self.server_side_encryption:
            params["ServerSideEncryption"] = self.server_side_encryption
        if self.kms_key_id:
            params["SSEKMSKeyId"] = self.kms_key_id
        return params


def build_upload_request(
    target: DeploymentTarget,
    key: str,
    body: bytes | BinaryIO,
    content_type: str,
    content_hash: str | None = None,
) -> UploadRequest:
    """Build an UploadRequest for ``key`` in the target's bucket."""
    if content_hash is None:
        if isinstance(body, (bytes, bytearray, memoryview)):
            content_hash = fingerprint(body)
        else:
            content_hash = fingerprint_file(body)

    encryption: str | None = None
    kms_key_id: str | None = None
    if target.encryption is not None:
        encryption = target.encryption.value
        if target.encryption is ServerSideEncryption.KMS and target.kms_key_id:
            kms_key_id = target.kms_key_id

    return UploadRequest(
        bucket=target.bucket_name,
        key=key,
        body=body,
        content_type=content_type,
        metadata={CONTENT_HASH_KEY: content_hash},
        server_side_encryption=encryption,
        kms_key_id=kms_key_id,
    )
