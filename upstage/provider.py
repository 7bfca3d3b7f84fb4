"""Remote-call gateway for object store requests."""

from __future__ import annotations

import threading
from typing import Any, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from upstage._aws import get_s3_client
from upstage._errors import RemoteError
from upstage.request import UploadRequest

S3_SERVICE = "S3"
PUT_OBJECT = "putObject"


class ObjectStoreGateway(Protocol):
    """Protocol for anything that can execute an upload request.

    Implementations surface provider failures as exceptions; retries, if any,
    happen inside the implementation.
    """

    def invoke(
        self,
        service: str,
        operation: str,
        request: UploadRequest,
        stage: str,
        region: str,
    ) -> Any:
        """Execute ``operation`` on ``service`` and return the provider response."""
        ...


class AwsProvider:
    """boto3-backed gateway.

    One S3 client is created per region and shared between threads.
    """

    def __init__(self) -> None:
        self._clients: dict[str, Any] = {}
        self._lock = threading.Lock()

    def _client(self, region: str) -> Any:
        with self._lock:
            client = self._clients.get(region)
            if client is None:
                client = get_s3_client(region)
                self._clients[region] = client
            return client

    def invoke(
        self,
        service: str,
        operation: str,
        request: UploadRequest,
        stage: str,
        region: str,
    ) -> Any:
        if (service, operation) != (S3_SERVICE, PUT_OBJECT):
            raise ValueError(f"Unsupported operation: {service}.{operation}")

        try:
            return self._client(region).put_object(**request.to_params())
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            raise RemoteError(
                f"Failed to upload s3://{request.bucket}/{request.key} "
                f"(stage={stage}, region={region}): {code}: {e}"
            ) from e
        except BotoCoreError as e:
            raise RemoteError(
                f"Failed to upload s3://{request.bucket}/{request.key} "
                f"(stage={stage}, region={region}): {e}"
            ) from e
