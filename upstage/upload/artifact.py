"""Artifact (.zip) upload."""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Callable

from upstage._errors import ArtifactReadError, InvalidArgumentError
from upstage._utils import format_kilobytes, object_key
from upstage.fingerprint import fingerprint_file
from upstage.logging import TransferLogger
from upstage.provider import PUT_OBJECT, S3_SERVICE, ObjectStoreGateway
from upstage.request import build_upload_request
from upstage.target import DeploymentTarget
from upstage.upload.selection import ArtifactDescriptor

logger = logging.getLogger("upstage.upload")

ZIP_CONTENT_TYPE = "application/zip"

ProgressSink = Callable[[str], None]


def service_progress_message(size: int) -> str:
    return f"Uploading service .zip file to S3 ({format_kilobytes(size)})..."


class ArtifactUploadStep:
    """Reads one artifact from disk and uploads it.

    Only the shared service artifact reports progress through ``progress``;
    per-function artifacts are logged at debug level.
    """

    def __init__(
        self,
        gateway: ObjectStoreGateway,
        progress: ProgressSink | None = None,
    ) -> None:
        self.gateway = gateway
        self.progress = progress or logger.info

    def upload(
        self,
        target: DeploymentTarget,
        artifact_directory: str,
        descriptor: ArtifactDescriptor,
    ) -> ArtifactDescriptor:
        if descriptor is None or not descriptor.source_path:
            raise InvalidArgumentError("Artifact path is required for upload")

        path = descriptor.source_path
        key = object_key(artifact_directory, descriptor.upload_key)

        try:
            size = os.path.getsize(path)
        except OSError as e:
            raise ArtifactReadError(f"Cannot read artifact '{path}': {e}") from e

        if descriptor.service_level:
            self.progress(service_progress_message(size))
        else:
            logger.debug(
                f"Uploading function artifact {path} ({format_kilobytes(size)})"
            )

        try:
            body = open(path, "rb")
        except OSError as e:
            raise ArtifactReadError(f"Cannot read artifact '{path}': {e}") from e

        transfer = TransferLogger(target.bucket_name, key, logger)
        with body:
            try:
                content_hash = fingerprint_file(body)
            except OSError as e:
                raise ArtifactReadError(f"Cannot read artifact '{path}': {e}") from e

            request = build_upload_request(
                target, key, body, ZIP_CONTENT_TYPE, content_hash=content_hash
            )
            transfer.start(size)
            try:
                self.gateway.invoke(
                    S3_SERVICE, PUT_OBJECT, request, target.stage, target.region
                )
            except Exception as e:
                transfer.fail(e)
                raise
        transfer.complete()

        return dataclasses.replace(descriptor, size_bytes=size)
