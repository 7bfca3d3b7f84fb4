"""Compiled template upload."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from upstage._utils import TEMPLATE_FILE_NAME, object_key
from upstage.normalize import normalize_template
from upstage.provider import PUT_OBJECT, S3_SERVICE, ObjectStoreGateway
from upstage.request import UploadRequest, build_upload_request
from upstage.target import DeploymentTarget

logger = logging.getLogger("upstage.upload")

Normalizer = Callable[[dict[str, Any]], dict[str, Any]]


def serialize_template(template: dict[str, Any]) -> bytes:
    """Serialize a template to its canonical JSON form."""
    return json.dumps(template, sort_keys=True, separators=(",", ":")).encode("utf-8")


def template_key(artifact_directory: str) -> str:
    return object_key(artifact_directory, TEMPLATE_FILE_NAME)


class TemplateUploadStep:
    """Normalizes a compiled template and uploads it under a well-known key."""

    def __init__(
        self,
        gateway: ObjectStoreGateway,
        normalizer: Normalizer = normalize_template,
    ) -> None:
        self.gateway = gateway
        self.normalizer = normalizer

    def upload(
        self,
        target: DeploymentTarget,
        artifact_directory: str,
        compiled_template: dict[str, Any],
    ) -> UploadRequest:
        normalized = self.normalizer(compiled_template)
        body = serialize_template(normalized)
        request = build_upload_request(
            target,
            template_key(artifact_directory),
            body,
            "application/json",
        )

        logger.info("Uploading CloudFormation file to S3...")
        self.gateway.invoke(
            S3_SERVICE, PUT_OBJECT, request, target.stage, target.region
        )
        return request
