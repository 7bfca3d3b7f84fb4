"""Upload orchestration: the compiled template first, then the artifacts."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from upstage.normalize import normalize_template
from upstage.provider import AwsProvider, ObjectStoreGateway
from upstage.service import PackageConfig
from upstage.target import DeploymentTarget
from upstage.upload.artifact import ArtifactUploadStep, ProgressSink
from upstage.upload.selection import ArtifactDescriptor, select_artifacts
from upstage.upload.template import Normalizer, TemplateUploadStep

logger = logging.getLogger("upstage.upload")

DEFAULT_MAX_WORKERS = 3


@dataclass
class UploadSummary:
    """Result of a completed upload pass."""

    template_key: str
    artifacts: list[ArtifactDescriptor] = field(default_factory=list)


class UploadOrchestrator:
    """Uploads the compiled template, then every selected artifact.

    The template upload is a barrier: artifacts are neither selected nor
    dispatched until it has completed. Artifact uploads run concurrently and
    fail fast: the first error cancels uploads that have not started yet and
    is raised once running uploads have finished. Nothing is rolled back.
    """

    def __init__(
        self,
        gateway: ObjectStoreGateway,
        progress: ProgressSink | None = None,
        normalizer: Normalizer = normalize_template,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.template_step = TemplateUploadStep(gateway, normalizer)
        self.artifact_step = ArtifactUploadStep(gateway, progress)
        self.max_workers = max_workers

    def run(
        self,
        target: DeploymentTarget,
        artifact_directory: str,
        compiled_template: dict[str, Any],
        package_config: PackageConfig,
    ) -> UploadSummary:
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            template_upload = executor.submit(
                self.template_step.upload,
                target,
                artifact_directory,
                compiled_template,
            )
            template_request = template_upload.result()

            descriptors = select_artifacts(package_config)
            logger.info(f"Uploading {len(descriptors)} artifact(s)...")

            futures = {
                executor.submit(
                    self.artifact_step.upload, target, artifact_directory, descriptor
                ): idx
                for idx, descriptor in enumerate(descriptors)
            }
            uploaded: list[ArtifactDescriptor] = list(descriptors)
            try:
                for future in as_completed(futures):
                    uploaded[futures[future]] = future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

        return UploadSummary(template_key=template_request.key, artifacts=uploaded)


def upload_artifacts(
    target: DeploymentTarget,
    artifact_directory: str,
    compiled_template: dict[str, Any],
    package_config: PackageConfig,
    gateway: ObjectStoreGateway | None = None,
    progress: ProgressSink | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> UploadSummary:
    """Upload a deployment's compiled template and artifacts to S3."""
    orchestrator = UploadOrchestrator(
        gateway or AwsProvider(),
        progress=progress,
        max_workers=max_workers,
    )
    return orchestrator.run(
        target, artifact_directory, compiled_template, package_config
    )
