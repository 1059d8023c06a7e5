"""
    Find and load configuration files:
    - at specified locations (`--config-file`)
    - `config.json` within the user's asmmap config directory
"""
import os
import pathlib
from typing import Any

from pydantic import ValidationError

from .logger import DiagnosticsLogger
from .configuration import RootConfiguration

USER_CONFIG_FILE_NAME = "config.json"

def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result

def load_config_file(config_path: pathlib.Path, root_config: RootConfiguration, log: DiagnosticsLogger) -> RootConfiguration:
    """Load the JSON config file at `config_path` on top of `root_config`.
    Fields absent from the file keep their current values. If the file can't be read
    or fails validation the error is logged and `root_config` is returned unchanged."""
    log.info("loading-config-file", "loading configuration file", config_path)
    try:
        file_data = config_path.read_text(encoding="utf-8")
    except OSError as ex:
        log.error("config-file-unreadable", f"could not read configuration file: {ex}", config_path)
        return root_config

    try:
        overrides = RootConfiguration.model_validate_json(file_data).model_dump(exclude_unset=True)
        # ^^^ validate the file on its own first so that errors point at the file's content
        return RootConfiguration.model_validate(_merge(root_config.model_dump(), overrides))
    except ValidationError as validation_error:
        log.error("invalid-config-file", f"configuration file was not loaded: {str(validation_error)}", config_path)
        return root_config

def locate_user_config_dir(log: DiagnosticsLogger) -> pathlib.Path|None:
    """Compute the location of the user's asmmap config directory.

    If the XDG_CONFIG_HOME environment variable is set and not empty,
    the user config dir must be located at:
        $XDG_CONFIG_HOME/asmmap

    Otherwise ~/.config/asmmap is used.
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", None)
    if xdg_config_home: # set, not empty
        log.detail("using user config dir '$XDG_CONFIG_HOME/asmmap' because the XDG_CONFIG_HOME environment variable is set")
        xdg_config_home_path = pathlib.Path(xdg_config_home)
        if not xdg_config_home_path.is_dir():
            log.warning("bad-xdg-config-home", f"will not load user config. XDG_CONFIG_HOME environment variable is set to '{xdg_config_home}' but this is not an existing directory")
            return None
        result = xdg_config_home_path / "asmmap"
    else:
        log.detail("checking for user config dir at '$HOME/.config/asmmap'")
        result = pathlib.Path.home() / ".config" / "asmmap"

    if result.is_dir():
        log.detail(f"using user config dir '{result}'")
        return result
    log.detail("no user config dir found")
    return None

def default_load_config_files(root_config: RootConfiguration, log: DiagnosticsLogger) -> RootConfiguration:
    """Load the user config file, if there is one."""
    if user_config_dir := locate_user_config_dir(log):
        user_config_path = user_config_dir / USER_CONFIG_FILE_NAME
        if user_config_path.is_file():
            return load_config_file(user_config_path, root_config, log)
        log.detail(f"user config file '{user_config_path}' not found")
    return root_config
