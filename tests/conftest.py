"""Shared test utilities."""

import logging
import os
import threading
from pathlib import Path

import pytest

from upstage.target import DeploymentTarget


@pytest.fixture(autouse=True)
def clean_aws_env():
    """Remove AWS_ENDPOINT_URL to prevent tests from hitting LocalStack."""
    original = os.environ.get("AWS_ENDPOINT_URL")
    os.environ.pop("AWS_ENDPOINT_URL", None)
    yield
    if original:
        os.environ["AWS_ENDPOINT_URL"] = original


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def target() -> DeploymentTarget:
    return DeploymentTarget(
        bucket_name="deployment-bucket", stage="dev", region="us-east-1"
    )


class RecordingGateway:
    """Gateway double that records every call in order.

    File bodies are read while the call is in progress, since the upload step
    closes them afterwards.
    """

    def __init__(self, fail_keys: set[str] | None = None) -> None:
        self.calls: list[dict] = []
        self.fail_keys = fail_keys or set()
        self._lock = threading.Lock()

    def invoke(self, service, operation, request, stage, region):
        body = request.body
        if not isinstance(body, bytes):
            body = body.read()
            request.body.seek(0)
        with self._lock:
            self.calls.append(
                {
                    "service": service,
                    "operation": operation,
                    "request": request,
                    "params": request.to_params(),
                    "content": body,
                    "stage": stage,
                    "region": region,
                }
            )
        if request.key in self.fail_keys:
            raise ConnectionError(f"upload of {request.key} failed")
        return {}

    @property
    def keys(self) -> list[str]:
        return [call["request"].key for call in self.calls]


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


def write_artifact(directory: Path, name: str, content: bytes) -> str:
    path = directory / name
    path.write_bytes(content)
    return str(path)


@pytest.fixture(autouse=True)
def reset_upload_logger():
    """Undo handler changes made by get_logger() so caplog keeps working."""
    yield
    logger = logging.getLogger("upstage.upload")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
