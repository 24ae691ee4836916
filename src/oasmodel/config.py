"""Defaults for the ``oasmodel`` command line.

``oasmodel convert`` needs a target version and an output text format when
the flags are omitted. They are looked up in layers, each overriding the
one before:

1. built-in :class:`~oasmodel.settings.GlobalConfig` defaults;
2. the user file ``config.json`` in :func:`get_config_dir`;
3. ``oasmodel.json`` in the working directory, for per-repository defaults;
4. ``OASMODEL_TARGET_VERSION`` / ``OASMODEL_FORMAT``;
5. ``--to`` / ``--format``.

The library never reads any of this: readers and writers are configured
through :class:`~oasmodel.settings.ReaderSettings` and
:class:`~oasmodel.settings.WriterSettings` arguments.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from oasmodel.exceptions import ConfigError
from oasmodel.settings import GlobalConfig

_APP_NAME = "oasmodel"
_USER_FILE = "config.json"
_PROJECT_FILE = "oasmodel.json"

ENV_TARGET_VERSION = "OASMODEL_TARGET_VERSION"
ENV_FORMAT = "OASMODEL_FORMAT"


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def get_config_dir() -> Path:
    """Directory holding the user config file, created on first use.

    ``$XDG_CONFIG_HOME/oasmodel`` (``~/.config/oasmodel`` when unset) on
    Linux and the BSDs, ``~/.oasmodel`` elsewhere.
    """
    if _is_xdg_platform():
        xdg_home = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg_home) if xdg_home else Path.home() / ".config"
        directory = base / _APP_NAME
    else:
        directory = Path.home() / f".{_APP_NAME}"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never observe a half-written file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, scratch = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(scratch, path)
    except BaseException:
        Path(scratch).unlink(missing_ok=True)
        raise


def _read_json_layer(path: Path, label: str) -> Optional[dict[str, Any]]:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{label.capitalize()} config at {path} must be a JSON object")
    return data


def load_global_config() -> GlobalConfig:
    """Read the user config file.

    Returns:
        The stored settings, or the defaults when there is no file yet.

    Raises:
        ConfigError: If the file is not a JSON object of valid settings.
    """
    path = get_config_dir() / _USER_FILE
    data = _read_json_layer(path, "global")
    if data is None:
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    text = json.dumps(config.model_dump(mode="json"), indent=2)
    _atomic_write(get_config_dir() / _USER_FILE, text + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./oasmodel.json``, or ``None`` when the directory has none.

    Keys that are not settings are ignored later, by :func:`resolve_config`.
    """
    return _read_json_layer(Path.cwd() / _PROJECT_FILE, "project")


def resolve_config(
    cli_target_version: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Merge every configuration layer into the settings for one command.

    Args:
        cli_target_version: ``--to`` value, a label such as ``2.0`` or ``3.1``.
        cli_format: ``--format`` value, ``json`` or ``yaml`` in any case.

    Raises:
        ConfigError: If a layer cannot be read or the merged values are
            invalid (an unsupported version label, an unknown format).
    """
    merged = load_global_config().model_dump(mode="json")

    project = load_project_config() or {}
    merged.update((key, value) for key, value in project.items() if key in GlobalConfig.model_fields)

    overrides = (
        ("target_version", os.environ.get(ENV_TARGET_VERSION) or None),
        ("format", os.environ.get(ENV_FORMAT) or None),
        ("target_version", cli_target_version),
        ("format", cli_format),
    )
    for key, value in overrides:
        if value is not None:
            merged[key] = value.lower() if key == "format" else value

    try:
        return GlobalConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
