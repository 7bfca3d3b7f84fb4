"""Unit tests for the upstage command line."""

import json
from pathlib import Path
from unittest.mock import patch

import boto3
import pytest
import yaml
from moto import mock_aws

from upstage._errors import RemoteError
from upstage.cli import main


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A service with one individually packaged function and a shared artifact."""
    for name in (
        "UPSTAGE_DEPLOYMENT_BUCKET",
        "UPSTAGE_STAGE",
        "UPSTAGE_REGION",
        "UPSTAGE_SERVER_SIDE_ENCRYPTION",
        "UPSTAGE_PACKAGE_PATH",
        "UPSTAGE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        "upstage.config.GLOBAL_CONFIG_PATH", tmp_path / "missing-global.toml"
    )
    monkeypatch.setattr("upstage.config.LOCAL_CONFIG_PATH", tmp_path / "upstage.toml")

    (tmp_path / "upstage.toml").write_text(
        '[aws]\ndeployment_bucket = "deployment-bucket"\n'
        "[logging]\nshow_timestamps = false\n"
    )
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "my-service.zip").write_bytes(b"x" * 2048)
    (tmp_path / "first.zip").write_bytes(b"first")
    (tmp_path / "service.yml").write_text(
        yaml.safe_dump(
            {
                "service": "my-service",
                "package": {"path": "build"},
                "functions": {
                    "first": {
                        "package": {"individually": True, "artifact": "first.zip"}
                    },
                    "second": {"handler": "handler.main"},
                },
            }
        )
    )
    (tmp_path / "template.json").write_text(json.dumps({"Resources": {}}))
    return tmp_path


def _upload_args(project: Path, *extra: str) -> list[str]:
    return [
        "upload",
        "--template",
        str(project / "template.json"),
        "--service",
        str(project / "service.yml"),
        *extra,
    ]


class TestUploadCommand:
    @mock_aws
    def test_upload(self, aws_credentials, project: Path, capsys) -> None:
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket="deployment-bucket")

        main(_upload_args(project, "--artifact-dir", "somedir"))

        out = capsys.readouterr().out
        assert "[INFO] Uploading service .zip file to S3 (2 KB)..." in out
        assert "s3://deployment-bucket/somedir/first.zip" in out
        assert "s3://deployment-bucket/somedir/my-service.zip" in out
        assert "Upload complete!" in out

        keys = {
            obj["Key"]
            for obj in s3.list_objects_v2(Bucket="deployment-bucket")["Contents"]
        }
        assert keys == {
            "somedir/compiled-cloudformation-template.json",
            "somedir/first.zip",
            "somedir/my-service.zip",
        }

    @mock_aws
    def test_generated_artifact_directory(
        self, aws_credentials, project: Path, capsys
    ) -> None:
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket="deployment-bucket")

        main(_upload_args(project, "--stage", "prod"))

        out = capsys.readouterr().out
        assert "s3://deployment-bucket/upstage/my-service/prod/" in out

    def test_missing_bucket(self, project: Path, capsys) -> None:
        (project / "upstage.toml").write_text("")

        with pytest.raises(SystemExit) as exc:
            main(_upload_args(project))

        assert exc.value.code == 1
        assert "deployment_bucket" in capsys.readouterr().out

    def test_bucket_flag_overrides_config(self, project: Path) -> None:
        (project / "upstage.toml").write_text("")

        with patch("upstage.upload.upload_artifacts") as upload:
            upload.return_value.template_key = "d/template.json"
            upload.return_value.artifacts = []
            main(
                _upload_args(
                    project, "--bucket", "flag-bucket", "--artifact-dir", "d"
                )
            )

        target = upload.call_args.args[0]
        assert target.bucket_name == "flag-bucket"

    def test_upload_failure(self, project: Path, capsys) -> None:
        with patch(
            "upstage.upload.upload_artifacts", side_effect=RemoteError("denied")
        ):
            with pytest.raises(SystemExit) as exc:
                main(_upload_args(project, "--artifact-dir", "d"))

        assert exc.value.code == 1
        assert "Error: Upload failed: denied" in capsys.readouterr().out

    def test_missing_template(self, project: Path, capsys) -> None:
        (project / "template.json").unlink()

        with pytest.raises(SystemExit) as exc:
            main(_upload_args(project))

        assert exc.value.code == 1
        assert "Failed to read template" in capsys.readouterr().out

    def test_malformed_function_config(self, project: Path, capsys) -> None:
        (project / "service.yml").write_text(
            "service: my-service\nfunctions:\n  first: handler.main\n"
        )

        with pytest.raises(SystemExit) as exc:
            main(_upload_args(project, "--artifact-dir", "d"))

        assert exc.value.code == 1
        assert "Error: Function 'first' must be a mapping" in capsys.readouterr().out

    def test_unnamed_service_needs_artifact_dir(self, project: Path, capsys) -> None:
        (project / "service.yml").write_text(
            "package:\n  artifact: build/my-service.zip\n"
        )

        with patch("upstage.upload.upload_artifacts") as upload:
            with pytest.raises(SystemExit) as exc:
                main(_upload_args(project))

        assert exc.value.code == 1
        assert "'service' name" in capsys.readouterr().out
        upload.assert_not_called()

    def test_requires_command(self) -> None:
        with pytest.raises(SystemExit):
            main([])
