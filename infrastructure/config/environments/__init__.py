from typing import cast

from infrastructure.config.types import EnvironmentConfig

from .dev import dev_config
from .staging import staging_config
from .prod import prod_config

ENVIRONMENTS = {
    "dev": dev_config,
    "staging": staging_config,
    "prod": prod_config,
}


def get_environment_config(environment: str) -> EnvironmentConfig:
    """Return a copy of the snapshot export settings for ``environment``."""
    if environment not in ENVIRONMENTS:
        raise ValueError(f"Unknown environment: {environment}")

    return cast(EnvironmentConfig, dict(ENVIRONMENTS[environment]))
