"""Configuration loading for tabletrace.

Functions:
    load_config: Load configuration from a YAML file
    create_default_config: Write a configuration template
    ensure_config_dir: Ensure ~/.tabletrace/ exists
    resolve_config_path: Pick the config file from argument, env var or default
"""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError
import yaml

from tabletrace.config.models import ConnectorConfig, get_config_dir, get_default_config
from tabletrace.core.errors import ConfigError

load_dotenv()
load_dotenv(Path.home() / ".tabletrace" / ".env")


def ensure_config_dir() -> Path:
    """Create ~/.tabletrace/ with its data and logs subdirectories.

    Returns:
        Path to the configuration directory.
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "data").mkdir(exist_ok=True)
    (config_dir / "logs").mkdir(exist_ok=True)
    return config_dir


def resolve_config_path(config_path: Path | None = None) -> Path:
    """Pick the configuration file.

    Priority:
        1. Explicit argument
        2. TABLETRACE_CONFIG environment variable
        3. ~/.tabletrace/config.yaml
    """
    if config_path is not None:
        return config_path

    env_path = os.environ.get("TABLETRACE_CONFIG", "").strip()
    if env_path:
        return Path(env_path).expanduser()

    return get_config_dir() / "config.yaml"


def create_default_config(
    config_dir: Path | None = None,
    *,
    overwrite: bool = False,
) -> Path:
    """Write a default config.yaml.

    Args:
        config_dir: Directory to create the file in. Defaults to ~/.tabletrace/
        overwrite: If True, replace an existing file.

    Returns:
        Path to the written config file.

    Raises:
        ConfigError: If the file exists and overwrite is False.
    """
    if config_dir is None:
        config_dir = ensure_config_dir()
    else:
        config_dir.mkdir(parents=True, exist_ok=True)
        (config_dir / "data").mkdir(exist_ok=True)
        (config_dir / "logs").mkdir(exist_ok=True)

    config_path = config_dir / "config.yaml"
    if config_path.exists() and not overwrite:
        raise ConfigError(
            f"Configuration file already exists: {config_path}",
            config_file=str(config_path),
        )

    with config_path.open("w") as f:
        yaml.dump(
            get_default_config().model_dump(mode="json"),
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    return config_path


def _format_validation_errors(error: PydanticValidationError) -> str:
    lines = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"])
        lines.append(f"  - {loc}: {item['msg']}")
    return "\n".join(lines)


def load_config(config_path: Path | None = None) -> ConnectorConfig:
    """Load and validate connector configuration from YAML.

    Args:
        config_path: Path to the config file. See resolve_config_path().

    Returns:
        Validated ConnectorConfig instance.

    Raises:
        ConfigError: If the file doesn't exist, is malformed, or fails validation.
    """
    config_path = resolve_config_path(config_path)

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}. "
            "Run `tabletrace config init` to create a default configuration.",
            config_file=str(config_path),
        )

    try:
        with config_path.open() as f:
            config_dict: dict[str, Any] | None = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse configuration file: {e}",
            config_file=str(config_path),
            details={"yaml_error": str(e)},
        ) from e

    try:
        return ConnectorConfig.model_validate(config_dict or {})
    except PydanticValidationError as e:
        raise ConfigError(
            "Configuration validation failed:\n" + _format_validation_errors(e),
            config_file=str(config_path),
            details={"validation_errors": e.errors(include_url=False)},
        ) from e
