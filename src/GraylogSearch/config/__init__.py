from __future__ import annotations

"""Public configuration API for GraylogSearch."""

from GraylogSearch.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from GraylogSearch.config.graylog import GraylogConfig
from GraylogSearch.config.output import OutputConfig
from GraylogSearch.config.runtime import RuntimeConfig

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "RuntimeConfig",
    "GraylogConfig",
    "OutputConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
