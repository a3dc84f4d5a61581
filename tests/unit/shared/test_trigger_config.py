import pytest

from snapshot_export.errors import ConfigurationError
from snapshot_export.models.settings import TriggerConfig, normalize_bucket_prefix, parse_accepted_events


def _full_env() -> dict[str, str]:
    return {
        "IamRoleArn": "arn:aws:iam::123456789012:role/export-role",
        "S3BucketName": "export-bucket",
        "KmsKeyArn": "arn:aws:kms:us-east-1:123456789012:key/abc",
        "SnapshotArnPrefix": "arn:aws:rds:us-east-1:123456789012:snapshot",
        "Events": "Manual snapshot created,Automated snapshot created",
        "S3Prefix": "snapshots/",
        "PrefixFilter": "prod-",
    }


def test_from_env_builds_complete_config() -> None:
    """
    Given: 모든 필수/선택 설정이 포함된 환경
    When: TriggerConfig.from_env 실행
    Then: 필드가 정규화되어 채워짐
    """
    config = TriggerConfig.from_env(_full_env())

    assert config.role_arn == "arn:aws:iam::123456789012:role/export-role"
    assert config.bucket_name == "export-bucket"
    assert config.key_arn.endswith("key/abc")
    assert config.snapshot_arn_prefix == "arn:aws:rds:us-east-1:123456789012:snapshot"
    assert config.accepted_events == {"Manual snapshot created", "Automated snapshot created"}
    assert config.bucket_prefix == "snapshots"
    assert config.identifier_prefix_filter == "prod-"


@pytest.mark.parametrize("missing", ["IamRoleArn", "S3BucketName", "KmsKeyArn", "Events", "SnapshotArnPrefix"])
def test_from_env_reports_missing_required_field(missing: str) -> None:
    """
    Given: 필수 설정 하나가 누락된 환경
    When: TriggerConfig.from_env 실행
    Then: 누락된 필드명을 담은 ConfigurationError 발생
    """
    env = _full_env()
    del env[missing]

    with pytest.raises(ConfigurationError) as exc_info:
        TriggerConfig.from_env(env)

    assert exc_info.value.field == missing
    assert missing in str(exc_info.value)


def test_from_env_reports_first_missing_field_in_fixed_order() -> None:
    """
    Given: 버킷, 키, 이벤트가 모두 누락된 환경
    When: TriggerConfig.from_env 실행
    Then: 검증 순서상 첫 항목(S3BucketName)이 보고됨
    """
    env = {"IamRoleArn": "arn:aws:iam::123456789012:role/export-role"}

    with pytest.raises(ConfigurationError) as exc_info:
        TriggerConfig.from_env(env)

    assert exc_info.value.field == "S3BucketName"


def test_empty_values_count_as_missing() -> None:
    env = {**_full_env(), "KmsKeyArn": ""}
    with pytest.raises(ConfigurationError, match="KmsKeyArn"):
        TriggerConfig.from_env(env)


def test_events_without_entries_count_as_missing() -> None:
    env = {**_full_env(), "Events": " , ,"}
    with pytest.raises(ConfigurationError, match="Events"):
        TriggerConfig.from_env(env)


def test_optional_fields_default_to_none() -> None:
    env = _full_env()
    del env["S3Prefix"]
    env["PrefixFilter"] = ""

    config = TriggerConfig.from_env(env)

    assert config.bucket_prefix is None
    assert config.identifier_prefix_filter is None


def test_config_is_immutable() -> None:
    config = TriggerConfig.from_env(_full_env())
    with pytest.raises(AttributeError):
        config.bucket_name = "other"  # type: ignore[misc]


def test_parse_accepted_events_collapses_duplicates() -> None:
    """
    Given: 중복과 공백이 섞인 이벤트 목록 문자열
    When: parse_accepted_events 실행
    Then: 순서와 무관한 고유 집합 반환
    """
    events = parse_accepted_events("Manual snapshot created, Automated snapshot created,Manual snapshot created")
    assert events == frozenset({"Manual snapshot created", "Automated snapshot created"})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("snapshots/", "snapshots"),
        ("exports/rds/", "exports/rds"),
        ("snapshots", "snapshots"),
        ("a//", "a/"),
        ("/", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_bucket_prefix_strips_one_trailing_slash(raw, expected) -> None:
    assert normalize_bucket_prefix(raw) == expected


@pytest.mark.parametrize("raw", ["snapshots/", "exports/rds/", "snapshots"])
def test_normalize_bucket_prefix_is_stable_for_single_slash(raw: str) -> None:
    once = normalize_bucket_prefix(raw)
    assert normalize_bucket_prefix(once) == once
