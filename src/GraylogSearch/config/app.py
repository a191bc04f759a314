from __future__ import annotations

"""Root configuration and YAML loading entrypoints."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from GraylogSearch.config.graylog import GraylogConfig, check_graylog, load_graylog
from GraylogSearch.config.output import OutputConfig, check_output, load_output
from GraylogSearch.config.runtime import RuntimeConfig, check_runtime, load_runtime

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    graylog: GraylogConfig
    output: OutputConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Load then validate every section of a merged mapping."""
    runtime = load_runtime(raw)
    graylog = load_graylog(raw)
    output = load_output(raw)

    check_runtime(runtime)
    check_graylog(graylog)
    check_output(output)

    return AppConfig(runtime=runtime, graylog=graylog, output=output)


def load_config(path: Path) -> AppConfig:
    """Load one YAML file without merging defaults."""
    return parse_config_dict(parse_yaml(path.read_text(encoding="utf-8")))


def load_config_with_defaults(
    config_path: Path,
    default_path: Path = DEFAULT_CONFIG_PATH,
    *,
    defaults_text: str | None = None,
) -> AppConfig:
    """Load an override file deep-merged over the defaults.

    Args:
        config_path: Override YAML file.
        default_path: Defaults YAML file.
        defaults_text: Defaults YAML text used instead of reading `default_path`.

    Returns:
        Parsed and validated configuration.
    """
    if defaults_text is None:
        if config_path == default_path or not default_path.exists():
            return load_config(config_path)
        defaults_text = default_path.read_text(encoding="utf-8")
    base = parse_yaml(defaults_text)
    override = parse_yaml(config_path.read_text(encoding="utf-8"))
    return parse_config_dict(merge_config_dicts(base, override))


def parse_yaml(text: str) -> dict[str, Any]:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings; override values win."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
