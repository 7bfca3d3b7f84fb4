"""upstage - uploads compiled CloudFormation templates and artifacts to S3."""

from upstage._errors import (
    ArtifactReadError,
    ConfigurationError,
    InvalidArgumentError,
    RemoteError,
    UploadError,
)
from upstage.service import FunctionPackage, PackageConfig
from upstage.target import DeploymentTarget, ServerSideEncryption
from upstage.upload import UploadOrchestrator, UploadSummary, upload_artifacts

__all__ = [
    "ArtifactReadError",
    "ConfigurationError",
    "DeploymentTarget",
    "FunctionPackage",
    "InvalidArgumentError",
    "PackageConfig",
    "RemoteError",
    "ServerSideEncryption",
    "UploadError",
    "UploadOrchestrator",
    "UploadSummary",
    "upload_artifacts",
]
