"""YAML persistence for run parameters and front-end preferences."""

from __future__ import annotations

import os
from typing import Any, Dict, Tuple, Union

import numpy as np
import yaml

from .conversions import LEGACY_ALIASES, parameters_from_mapping
from .models import DEFAULT_PARAMETERS, FIELD_NAMES, RunParameters

PathLike = Union[str, "os.PathLike[str]"]


class SettingsError(ValueError):
    """Raised when a settings document cannot be read."""


class NumpySafeDumper(yaml.SafeDumper):
    def represent_data(self, data):
        if isinstance(data, (np.integer, np.floating)):
            return super().represent_data(data.item())
        return super().represent_data(data)


def settings_payload(params: RunParameters, window: bool = False) -> Dict[str, Any]:
    return {"parameters": params.to_dict(), "ui": {"window": bool(window)}}


def dump_settings(params: RunParameters, window: bool = False) -> str:
    return yaml.dump(
        settings_payload(params, window),
        sort_keys=False,
        allow_unicode=True,
        Dumper=NumpySafeDumper,
    )


def load_settings(text: str) -> Tuple[RunParameters, bool]:
    """Parse a settings document into ``(parameters, window)``.

    Both the sectioned layout written by :func:`dump_settings` and a flat
    mapping of the parameter fields are accepted. Derived ``time_*`` values
    are ignored; estimates are always recomputed.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SettingsError(f"malformed settings document: {e}")
    if data is None:
        return DEFAULT_PARAMETERS, False
    if not isinstance(data, dict):
        raise SettingsError("settings document must be a mapping.")

    if "parameters" in data:
        section = data.get("parameters") or {}
        if not isinstance(section, dict):
            raise SettingsError("'parameters' section must be a mapping.")
    elif any(key in data for key in (*FIELD_NAMES, *LEGACY_ALIASES)):
        section = data
    else:
        section = {}

    ui = data.get("ui") or {}
    if not isinstance(ui, dict):
        raise SettingsError("'ui' section must be a mapping.")
    window = ui.get("window", data.get("window", False))
    if not isinstance(window, bool):
        raise SettingsError(f"'window' must be true or false, got {window!r}.")

    return parameters_from_mapping(section), window


def save_settings(path: PathLike, params: RunParameters, window: bool = False) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_settings(params, window))


def read_settings(path: PathLike) -> Tuple[RunParameters, bool]:
    if not os.path.exists(path):
        return DEFAULT_PARAMETERS, False
    with open(path, "rb") as f:
        raw = f.read()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SettingsError(f"{os.fspath(path)}: settings file is not UTF-8 ({e}).")
    return load_settings(text)
