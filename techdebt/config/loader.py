"""Configuration loading for a scan run.

Resolution order (later overrides earlier):
1. Built-in defaults
2. Project config (`<root>/.techdebt.json`, or an explicit `--config` file)
3. Explicit overrides from the command line

A missing project config means defaults. A malformed one is an error,
never a silent fallback.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import InvalidConfigError
from .models import ScanConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".techdebt.json"


def _describe_validation_error(error: ValidationError) -> str:
    """Render the first pydantic error as `location: message`."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "config"
    return f"{location}: {first.get('msg', 'invalid value')}"


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read and parse a JSON config file.

    Args:
        path: Path to the config file

    Returns:
        Parsed top-level object

    Raises:
        InvalidConfigError: If the file can't be read or isn't a JSON object
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfigError(
            f"Malformed config file {path}: {e}", config_file=str(path)
        ) from e
    except OSError as e:
        raise InvalidConfigError(
            f"Could not read config file {path}: {e}", config_file=str(path)
        ) from e

    if not isinstance(data, dict):
        raise InvalidConfigError(
            f"Config file {path} must contain a JSON object",
            config_file=str(path),
        )
    return data


def load_scan_config(
    root: Path,
    config_path: Path | None = None,
    **overrides: Any,
) -> ScanConfig:
    """Resolve the configuration for a scan of `root`.

    Args:
        root: Scan root; `.techdebt.json` is looked up here
        config_path: Explicit config file, which must exist
        **overrides: Field values that take precedence over the file

    Returns:
        Frozen ScanConfig

    Raises:
        InvalidConfigError: On a missing explicit file, malformed JSON or
            values that fail validation
    """
    data: dict[str, Any] = {}
    source: Path | None = None

    if config_path is not None:
        if not config_path.is_file():
            raise InvalidConfigError(
                f"Config file not found: {config_path}", config_file=str(config_path)
            )
        source = config_path
    elif (root / CONFIG_FILENAME).is_file():
        source = root / CONFIG_FILENAME

    if source is not None:
        data = _read_config_file(source)
        logger.debug(f"Loaded {len(data)} config keys from {source}")

    for key, value in overrides.items():
        if value is None:
            continue
        field_info = ScanConfig.model_fields.get(key)
        # File keys are camelCase aliases; overrides must land on the same key
        data[field_info.alias or key if field_info else key] = value

    try:
        return ScanConfig.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigError(
            f"Invalid configuration: {_describe_validation_error(e)}",
            config_file=str(source) if source else None,
        ) from e
