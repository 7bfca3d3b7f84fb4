"""Command line interface for upstage."""

import argparse
import sys
from pathlib import Path

from upstage._errors import ConfigurationError, UploadError
from upstage._utils import object_key


def _handle_upload(args: argparse.Namespace) -> None:
    """Handle the 'upload' command."""
    from upstage.config import default_artifact_directory, load_config
    from upstage.logging import get_logger
    from upstage.service import load_service, load_template
    from upstage.upload import upload_artifacts

    try:
        config = load_config()
    except Exception as e:
        print(f"Error: Failed to load configuration: {e}")
        sys.exit(1)

    if args.bucket:
        config.deployment_bucket = args.bucket
    if args.stage:
        config.stage = args.stage
    if args.region:
        config.region = args.region

    logger = get_logger("upstage.upload", config.logging)

    try:
        target = config.to_target()
        package_config = load_service(Path(args.service))
        compiled_template = load_template(Path(args.template))
        artifact_directory = (
            args.artifact_dir
            or config.artifact_directory_name
            or default_artifact_directory(package_config.service_name, target.stage)
        )
    except ConfigurationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if config.package_path:
        package_config.package_path = config.package_path

    try:
        summary = upload_artifacts(
            target,
            artifact_directory,
            compiled_template,
            package_config,
            progress=logger.info,
            max_workers=config.max_workers,
        )
    except UploadError as e:
        print(f"Error: Upload failed: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: Unexpected error: {e}")
        sys.exit(1)

    print(f"s3://{target.bucket_name}/{summary.template_key}")
    for artifact in summary.artifacts:
        key = object_key(artifact_directory, artifact.upload_key)
        print(f"s3://{target.bucket_name}/{key}")
    print("Upload complete!")


def main(argv: list[str] | None = None) -> None:
    """Entry point for the upstage command."""
    parser = argparse.ArgumentParser(
        prog="upstage",
        description="Upload a compiled template and its artifacts to S3",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    upload_parser = subparsers.add_parser(
        "upload", help="Upload the compiled template and artifacts"
    )
    upload_parser.add_argument(
        "--template", required=True, help="Compiled CloudFormation template file"
    )
    upload_parser.add_argument(
        "--service", required=True, help="Service definition YAML file"
    )
    upload_parser.add_argument(
        "--artifact-dir",
        default=None,
        help="Key prefix in the deployment bucket (default: generated)",
    )
    upload_parser.add_argument("--bucket", default=None, help="Deployment bucket")
    upload_parser.add_argument("--stage", default=None, help="Deployment stage")
    upload_parser.add_argument("--region", default=None, help="AWS region")

    args = parser.parse_args(argv)

    if args.command == "upload":
        _handle_upload(args)
    else:
        parser.print_help()
        sys.exit(1)
