"""Selection of the artifacts an upload pass transfers."""

from __future__ import annotations

from dataclasses import dataclass

from upstage._errors import ConfigurationError
from upstage._utils import TEMPLATE_FILE_NAME, base_name
from upstage.service import (
    Individual,
    PackageConfig,
    resolve_function_mode,
    resolve_service_artifact,
)


@dataclass(frozen=True)
class ArtifactDescriptor:
    """One physical file to transfer.

    Attributes:
        source_path: Local path of the artifact.
        upload_key: File name under the artifact directory.
        service_level: True for the shared service artifact.
        size_bytes: File size, known once the artifact has been read.
    """

    source_path: str
    upload_key: str
    service_level: bool = False
    size_bytes: int | None = None


def select_artifacts(package_config: PackageConfig) -> list[ArtifactDescriptor]:
    """Resolve the package configuration into the artifacts to upload.

    Individually packaged artifacts come first, in function declaration order.
    The shared service artifact, when any function uses it, is always last.
    """
    individual_paths: list[str] = []
    # A service without functions still ships its shared artifact.
    needs_service_artifact = not package_config.functions
    if package_config.individually:
        needs_service_artifact = False

    for function in package_config.functions:
        mode = resolve_function_mode(package_config, function)
        if isinstance(mode, Individual):
            if mode.artifact_path not in individual_paths:
                individual_paths.append(mode.artifact_path)
        else:
            needs_service_artifact = True

    service_path = (
        resolve_service_artifact(package_config) if needs_service_artifact else None
    )

    descriptors = [
        ArtifactDescriptor(source_path=path, upload_key=base_name(path))
        for path in individual_paths
        if path != service_path
    ]
    if service_path is not None:
        descriptors.append(
            ArtifactDescriptor(
                source_path=service_path,
                upload_key=base_name(service_path),
                service_level=True,
            )
        )

    _check_keys(descriptors)
    return descriptors


def _check_keys(descriptors: list[ArtifactDescriptor]) -> None:
    seen: dict[str, str] = {}
    for descriptor in descriptors:
        key = descriptor.upload_key
        if not key:
            raise ConfigurationError(
                f"Artifact path '{descriptor.source_path}' has no file name"
            )
        if key == TEMPLATE_FILE_NAME:
            raise ConfigurationError(
                f"Artifact '{descriptor.source_path}' collides with the "
                f"compiled template name '{TEMPLATE_FILE_NAME}'"
            )
        if key in seen:
            raise ConfigurationError(
                f"Artifacts '{seen[key]}' and '{descriptor.source_path}' would "
                f"both upload as '{key}'"
            )
        seen[key] = descriptor.source_path
