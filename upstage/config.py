"""Configuration loading and management for upstage.

Configuration is loaded from TOML files with environment variable overrides.

Configuration precedence (highest to lowest):
1. Environment variables
2. Local config (./upstage.toml)
3. Global config (~/.upstage/upstage.toml)
4. Default values
"""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from upstage._errors import ConfigurationError
from upstage.logging import LoggingConfig
from upstage.target import DeploymentTarget, ServerSideEncryption

GLOBAL_CONFIG_PATH = Path.home() / ".upstage" / "upstage.toml"
LOCAL_CONFIG_PATH = Path.cwd() / "upstage.toml"


def _load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file, returning empty dict if not found."""
    if path.exists():
        with path.open("rb") as f:
            return tomllib.load(f)
    return {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base.

    Lists and scalars are replaced; dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@dataclass
class UpstageConfig:
    """Main upstage configuration.

    Attributes:
        deployment_bucket: S3 bucket receiving the template and artifacts.
        stage: Deployment stage.
        region: AWS region of the deployment bucket.
        server_side_encryption: "AES256", "aws:kms" or empty for none.
        kms_key_id: KMS key for "aws:kms" encryption.
        package_path: Directory holding built artifacts; overrides the
            service definition when set.
        artifact_directory_name: Key prefix for this deployment; generated
            when empty.
        max_workers: Number of artifact uploads running at once.
        logging: Logging configuration.
    """

    # AWS configuration (from [aws] table)
    deployment_bucket: str = ""
    stage: str = "dev"
    region: str = "us-east-1"
    server_side_encryption: str = ""
    kms_key_id: str = ""

    # Upload configuration (from [upload] table)
    package_path: str = ""
    artifact_directory_name: str = ""
    max_workers: int = 3

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "UpstageConfig":
        """Create an UpstageConfig from a dictionary."""
        aws_config = d.get("aws", {})
        upload_config = d.get("upload", {})
        logging_config = d.get("logging", {})

        logging_cfg = LoggingConfig(
            level=logging_config.get("level", "INFO"),
            format=logging_config.get("format", "human"),
            show_timestamps=logging_config.get("show_timestamps", True),
        )
        return cls(
            deployment_bucket=aws_config.get("deployment_bucket", ""),
            stage=aws_config.get("stage", "dev"),
            region=aws_config.get("region", "us-east-1"),
            server_side_encryption=aws_config.get("server_side_encryption", ""),
            kms_key_id=aws_config.get("kms_key_id", ""),
            package_path=upload_config.get("package_path", ""),
            artifact_directory_name=upload_config.get("artifact_directory_name", ""),
            max_workers=upload_config.get("max_workers", 3),
            logging=logging_cfg,
        )

    def to_target(self) -> DeploymentTarget:
        """Build the immutable DeploymentTarget for one deployment."""
        if not self.deployment_bucket:
            raise ConfigurationError(
                "'deployment_bucket' is not configured. Set it in upstage.toml "
                "or via UPSTAGE_DEPLOYMENT_BUCKET env var."
            )
        try:
            encryption = ServerSideEncryption.parse(self.server_side_encryption)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return DeploymentTarget(
            bucket_name=self.deployment_bucket,
            stage=self.stage,
            region=self.region,
            encryption=encryption,
            kms_key_id=self.kms_key_id,
        )


def default_artifact_directory(
    service_name: str, stage: str, now: datetime | None = None
) -> str:
    """Build a unique key prefix for one deployment of a service."""
    if not service_name:
        raise ConfigurationError(
            "Cannot generate an artifact directory without a 'service' name; "
            "set 'service' or pass an artifact directory"
        )
    now = now or datetime.now(UTC)
    epoch_ms = int(now.timestamp()) * 1000 + now.microsecond // 1000
    iso = now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"upstage/{service_name}/{stage}/{epoch_ms}-{iso}"


def load_config() -> UpstageConfig:
    """Load and merge configuration from global and local TOML files.

    Applies environment variable overrides.
    """
    global_cfg = _load_toml(GLOBAL_CONFIG_PATH)
    local_cfg = _load_toml(LOCAL_CONFIG_PATH)
    merged = _deep_merge(global_cfg, local_cfg)

    config = UpstageConfig.from_dict(merged)

    if env_bucket := os.environ.get("UPSTAGE_DEPLOYMENT_BUCKET"):
        config.deployment_bucket = env_bucket
    if env_stage := os.environ.get("UPSTAGE_STAGE"):
        config.stage = env_stage
    if env_region := os.environ.get("UPSTAGE_REGION"):
        config.region = env_region
    if env_sse := os.environ.get("UPSTAGE_SERVER_SIDE_ENCRYPTION"):
        config.server_side_encryption = env_sse
    if env_kms := os.environ.get("UPSTAGE_KMS_KEY_ID"):
        config.kms_key_id = env_kms
    if env_package_path := os.environ.get("UPSTAGE_PACKAGE_PATH"):
        config.package_path = env_package_path
    if env_log_level := os.environ.get("UPSTAGE_LOG_LEVEL"):
        config.logging.level = env_log_level

    return config
