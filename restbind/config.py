"""Generator configuration for restbind.

Options come from three places, lowest precedence first: the defaults
below, a TOML file (``restbind.toml`` or ``[tool.restbind]`` in
``pyproject.toml``), and the protoc parameter string or CLI flags.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TRANSPORT_MODULE = "restbind.runtime"
DEFAULT_FILE_SUFFIX = "_pb2_rest.py"

# Parameter keys consumed by the plugin itself rather than the generator.
_PLUGIN_KEYS = {"config"}


class GeneratorConfig(BaseModel):
    """Settings fixed once per generator run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    use_generic_streams: bool = True
    transport_module: str = DEFAULT_TRANSPORT_MODULE
    file_suffix: str = DEFAULT_FILE_SUFFIX

    @field_validator("transport_module")
    @classmethod
    def _check_transport_module(cls, value: str) -> str:
        if not value or not all(part.isidentifier() for part in value.split(".")):
            raise ValueError(f"'{value}' is not a dotted module path")
        return value

    @field_validator("file_suffix")
    @classmethod
    def _check_file_suffix(cls, value: str) -> str:
        if not value.endswith(".py") or "/" in value:
            raise ValueError(f"'{value}' must be a file name suffix ending in .py")
        return value

    def merged(self, overrides: Mapping[str, Any]) -> "GeneratorConfig":
        """Return a copy with ``overrides`` applied and validated."""
        return build_config({**self.model_dump(), **overrides})


def build_config(values: Mapping[str, Any]) -> GeneratorConfig:
    try:
        return GeneratorConfig(**values)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigError(f"Invalid generator options: {problems}") from exc


def parse_parameter(parameter: str) -> Dict[str, str]:
    """Split a protoc parameter string ``k=v,k2=v2`` into a dict."""
    result: Dict[str, str] = {}
    if not parameter:
        return result
    for part in parameter.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" in part:
            key, value = part.split("=", 1)
            result[key.strip()] = value.strip()
        else:
            result[part] = "true"
    return result


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read generator options from a TOML file."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}", path=str(path))
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}", path=str(path)) from exc
    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("restbind", {})
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a table of options in {path}", path=str(path))
    logger.debug("Loaded generator options from %s: %s", path, sorted(data))
    return data


def config_from_parameter(
    parameter: str, base: Optional[GeneratorConfig] = None
) -> GeneratorConfig:
    """Resolve the configuration for a plugin run.

    A ``config=<path>`` entry in the parameter string names a TOML file whose
    options sit between the defaults and the remaining parameter entries.
    """
    params = parse_parameter(parameter)
    config = base or GeneratorConfig()
    config_path = params.get("config")
    if config_path:
        config = config.merged(load_config_file(Path(config_path)))
    overrides = {key: value for key, value in params.items() if key not in _PLUGIN_KEYS}
    if overrides:
        config = config.merged(overrides)
    return config


__all__ = [
    "DEFAULT_TRANSPORT_MODULE",
    "DEFAULT_FILE_SUFFIX",
    "GeneratorConfig",
    "build_config",
    "parse_parameter",
    "load_config_file",
    "config_from_parameter",
]
