import pytest

from infrastructure.config.environments import ENVIRONMENTS, get_environment_config


@pytest.mark.parametrize("environment", sorted(ENVIRONMENTS))
def test_known_environments_have_required_keys(environment: str) -> None:
    config = get_environment_config(environment)

    assert config["region"]
    snapshot_types = config.get("snapshot_types") or {}
    assert snapshot_types.get("manual") or snapshot_types.get("automated")


def test_unknown_environment_raises() -> None:
    with pytest.raises(ValueError):
        get_environment_config("qa")


def test_returned_config_is_a_copy() -> None:
    config = get_environment_config("dev")
    config["export_prefix"] = "changed/"

    assert get_environment_config("dev").get("export_prefix") != "changed/"
