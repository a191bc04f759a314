from __future__ import annotations

"""Typed accessors shared by the config section loaders.

Each helper raises `ValueError` for missing values and `TypeError` for values
of the wrong YAML type, naming the full ``section.key`` path.
"""

from typing import Any, Mapping


def get_section(raw: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """Return a top-level section, or ``{}`` for an absent optional one.

    Args:
        raw: Root configuration mapping.
        key: Section name.
        required: Whether the section must exist.

    Raises:
        ValueError: If a required section is missing.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config: {key}")
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{key} must be an object")
    return section


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    """Return a required field value from a section.

    Args:
        section: Section mapping.
        field: Field name in section.
        config_key: Full ``section.key`` path for error messages.

    Returns:
        Raw field value.

    Raises:
        ValueError: If the field is missing.
    """
    if field not in section:
        raise ValueError(f"Missing required config: {config_key}")
    return section[field]


def expect_str(value: Any, config_key: str) -> str:
    """Validate and return a string value.

    Raises:
        TypeError: If the value is not a string.
    """
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string")
    return value


def expect_optional_str(value: Any, config_key: str) -> str | None:
    """Accept a string or null; blank strings become None."""
    if value is None:
        return None
    text = expect_str(value, config_key).strip()
    return text or None


def expect_bool(value: Any, config_key: str) -> bool:
    """Validate and return a boolean value."""
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be a boolean")
    return value


def expect_int(value: Any, config_key: str) -> int:
    """Validate and return an integer value (YAML booleans are rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{config_key} must be an integer")
    return value


def expect_float(value: Any, config_key: str) -> float:
    """Validate a number (excluding bool) and return it as float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{config_key} must be a number")
    return float(value)


def expect_str_list(value: Any, config_key: str) -> list[str]:
    """Validate a list of strings.

    Args:
        value: Raw YAML value.
        config_key: Full ``section.key`` path for error messages.

    Returns:
        A new list holding the strings.

    Raises:
        TypeError: If the value is not a list or holds a non-string item.
    """
    if not isinstance(value, list):
        raise TypeError(f"{config_key} must be a list")
    for idx, item in enumerate(value):
        if not isinstance(item, str):
            raise TypeError(f"{config_key}[{idx}] must be a string")
    return list(value)
