import os
import sys
from pathlib import Path
from typing import Any, Callable, Iterator
import pytest


# Ensure 'snapshot_export' layer is importable at collection time (module import stage)
_repo_root = Path(__file__).resolve().parents[1]
_repo_root_str = str(_repo_root)
if _repo_root_str not in sys.path:
    sys.path.insert(0, _repo_root_str)
_layer_path = _repo_root / "src" / "lambda" / "layers" / "common" / "python"
_layer_str = str(_layer_path)
if _layer_str not in sys.path:
    sys.path.insert(0, _layer_str)

HANDLER_PATH = "src/lambda/functions/snapshot_exporter/handler.py"


@pytest.fixture(autouse=True)
def aws_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure default AWS region is set for moto/boto3 clients and clear exporter env leaks."""
    monkeypatch.setenv("AWS_REGION", os.environ.get("AWS_REGION", "us-east-1"))
    monkeypatch.setenv("AWS_DEFAULT_REGION", os.environ.get("AWS_DEFAULT_REGION", "us-east-1"))
    # Provide dummy credentials so botocore signing doesn't fail under moto
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", os.environ.get("AWS_ACCESS_KEY_ID", "testing"))
    monkeypatch.setenv(
        "AWS_SECRET_ACCESS_KEY",
        os.environ.get("AWS_SECRET_ACCESS_KEY", "testing"),
    )
    monkeypatch.setenv("AWS_SESSION_TOKEN", os.environ.get("AWS_SESSION_TOKEN", "testing"))

    for key in ("IamRoleArn", "S3BucketName", "KmsKeyArn", "SnapshotArnPrefix", "S3Prefix", "Events", "PrefixFilter"):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def exporter_env(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Apply snapshot exporter environment variables.

    Usage: exporter_env() for defaults or exporter_env(prefix_filter="prod-", s3_prefix=None).
    """

    def _apply(
        *,
        role_arn: str = "arn:aws:iam::123456789012:role/export-role",
        bucket_name: str = "rds-snapshot-export-dev-123456789012",
        key_arn: str = "arn:aws:kms:us-east-1:123456789012:key/1234abcd-12ab-34cd-56ef-1234567890ab",
        snapshot_arn_prefix: str = "arn:aws:rds:us-east-1:123456789012:snapshot",
        events: str = "Manual snapshot created",
        s3_prefix: str | None = "snapshots/",
        prefix_filter: str | None = None,
        environment: str = "dev",
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", environment)
        monkeypatch.setenv("IamRoleArn", role_arn)
        monkeypatch.setenv("S3BucketName", bucket_name)
        monkeypatch.setenv("KmsKeyArn", key_arn)
        monkeypatch.setenv("SnapshotArnPrefix", snapshot_arn_prefix)
        monkeypatch.setenv("Events", events)
        if s3_prefix is not None:
            monkeypatch.setenv("S3Prefix", s3_prefix)
        if prefix_filter is not None:
            monkeypatch.setenv("PrefixFilter", prefix_filter)

    return _apply


@pytest.fixture
def load_module() -> Callable[[str], dict[str, Any]]:
    import runpy

    def _apply(path: str = HANDLER_PATH) -> dict[str, Any]:
        return runpy.run_path(path)

    return _apply


@pytest.fixture
def fake_python_function(
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[[Any], None]:
    from aws_cdk import Duration

    def _apply(target_module: Any) -> None:
        from aws_cdk import aws_lambda as lambda_

        def _fake(scope, id, **kwargs):
            return lambda_.Function(
                scope,
                id,
                runtime=lambda_.Runtime.PYTHON_3_12,
                handler="index.handler",
                code=lambda_.Code.from_inline("def handler(event, context): return {}"),
                memory_size=kwargs.get("memory_size", 128),
                timeout=kwargs.get("timeout", Duration.seconds(10)),
                log_retention=kwargs.get("log_retention"),
                role=kwargs.get("role"),
                layers=kwargs.get("layers", []),
                environment=kwargs.get("environment", {}),
                function_name=kwargs.get("function_name"),
            )

        monkeypatch.setattr(target_module, "PythonFunction", _fake, raising=False)

    return _apply


@pytest.fixture
def cdk_app() -> Callable[[], Any]:
    """Return an App factory that skips asset bundling (no Docker in unit tests)."""
    from aws_cdk import App

    def _create() -> Any:
        return App(context={"aws:cdk:bundling-stacks": []})

    return _create


def pytest_configure(config):
    """Configure pytest with essential markers."""
    config.addinivalue_line("markers", "unit: unit test")
    config.addinivalue_line("markers", "integration: integration test")
    config.addinivalue_line("markers", "infrastructure: CDK synthesis test")
    config.addinivalue_line("markers", "lambda_test: Lambda handler test")


def pytest_collection_modifyitems(config, items):
    """Add markers based on file location."""
    rootdir = Path(config.rootdir)

    for item in items:
        rel_path = Path(item.fspath).relative_to(rootdir)

        if "unit" in rel_path.parts:
            item.add_marker(pytest.mark.unit)
        if "integration" in rel_path.parts:
            item.add_marker(pytest.mark.integration)
        if "lambda" in rel_path.parts:
            item.add_marker(pytest.mark.lambda_test)
        if "infrastructure" in rel_path.parts:
            item.add_marker(pytest.mark.infrastructure)
