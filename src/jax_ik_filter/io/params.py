"""Loading filter parameters from YAML files."""

from pathlib import Path
from typing import Any, Dict, Union

import yaml

from jax_ik_filter.errors import ConfigurationError


def load_params(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML parameter tree.

    The document must be a mapping; its values are validated later by
    ``IKConfig.from_params``.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read parameters from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Parameter file {path} must contain a mapping")
    return data
