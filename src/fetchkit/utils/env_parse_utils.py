# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import os
from typing import Optional, overload

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


def get_env_bool(var_name: str, default: bool) -> bool:
    """Read a boolean flag, raising :class:`ValueError` for anything unknown"""
    value = os.getenv(var_name)
    if value is None:
        return default
    value_lower = value.strip().lower()
    if value_lower in TRUE_VALUES:
        return True
    if value_lower in FALSE_VALUES:
        return False
    raise ValueError(f"{var_name} must be a boolean, got {value!r}")


def get_env_float(var_name: str, default: float, *, positive: bool = False) -> float:
    value = os.getenv(var_name)
    if value is None:
        return default
    try:
        number = float(value)
    except ValueError as err:
        raise ValueError(f"{var_name} must be a number, got {value!r}") from err
    if positive and number <= 0:
        raise ValueError(f"{var_name} must be a positive number, got {value!r}")
    return number


@overload
def get_env_str(var_name: str, default: None = None) -> Optional[str]: ...


@overload
def get_env_str(var_name: str, default: str) -> str: ...


def get_env_str(var_name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(var_name)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_env_dict(
    var_name: str, item_separator: str = ",", key_value_separator: str = "="
) -> dict[str, str]:
    """
    Read ``name=value`` pairs such as ``X-A=1,X-B=2``.

    Blank items are skipped. An item without a separator or without a name
    raises :class:`ValueError` instead of being dropped silently.
    """
    value = os.getenv(var_name, "")
    result: dict[str, str] = {}
    for item in value.split(item_separator):
        item = item.strip()
        if not item:
            continue
        key, sep, val = item.partition(key_value_separator)
        if not sep or not key.strip():
            raise ValueError(
                f"{var_name} items must look like name{key_value_separator}value,"
                f" got {item!r}"
            )
        result[key.strip()] = val.strip()
    return result
