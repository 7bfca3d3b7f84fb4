"""Template and artifact upload steps."""

from upstage.upload.artifact import ArtifactUploadStep
from upstage.upload.orchestrator import (
    UploadOrchestrator,
    UploadSummary,
    upload_artifacts,
)
from upstage.upload.selection import ArtifactDescriptor, select_artifacts
from upstage.upload.template import TemplateUploadStep

__all__ = [
    "ArtifactDescriptor",
    "ArtifactUploadStep",
    "TemplateUploadStep",
    "UploadOrchestrator",
    "UploadSummary",
    "select_artifacts",
    "upload_artifacts",
]
