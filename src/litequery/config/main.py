"""
This module contains the default configuration and state values and functions to return
existing config or state instances for a specified config_name.
"""

from __future__ import annotations

import threading

from packaging.version import Version

from .user import UserConfig, _DefaultsType
from ..utils.appdirs import get_conf_path, get_data_path


CONFIG_DIR_NAME = "litequery"


# =============================================================================
#  Defaults
# =============================================================================

DEFAULTS_CONFIG: _DefaultsType = {
    "app": {
        "log_level": 20,  # log level for file and stderr, default: INFO
    },
    "database": {
        "directory": "",  # where database files live, default: platform data dir
        "busy_timeout": 5.0,  # seconds to wait for a locked database file
        "legacy_quoting": False,  # inline quoted values instead of binding them
    },
}

DEFAULTS_STATE: _DefaultsType = {
    "install": {},  # installed_<name> flags for databases copied from a template
}


# If you *change* the default value of an option, do a MINOR version update. If you
# *remove* or *rename* options, do a MAJOR version update.
CONF_VERSION = Version("1.0")


# =============================================================================
# Factories
# =============================================================================


def _get_conf(
    config_name: str,
    config_path: str,
    defaults: _DefaultsType,
    registry: dict[str, UserConfig],
) -> UserConfig:
    try:
        conf = registry[config_name]
    except KeyError:
        try:
            conf = UserConfig(config_path, defaults=defaults, version=CONF_VERSION)
        except OSError:
            conf = UserConfig(
                config_path, defaults=defaults, version=CONF_VERSION, load=False
            )

        registry[config_name] = conf

    return conf


_config_instances: dict[str, UserConfig] = {}
_config_lock = threading.Lock()


def LiteQueryConfig(config_name: str) -> UserConfig:
    """
    Returns an existing config instance or creates a new one.

    :param config_name: Name of the litequery configuration. A new config file will be
        created if none exists for the given config_name.
    :return: Config instance which saves any changes to the drive.
    """
    with _config_lock:
        config_path = get_conf_path(CONFIG_DIR_NAME, f"{config_name}.ini")
        return _get_conf(config_name, config_path, DEFAULTS_CONFIG, _config_instances)


_state_instances: dict[str, UserConfig] = {}
_state_lock = threading.Lock()


def LiteQueryState(config_name: str) -> UserConfig:
    """
    Returns an existing state instance or creates a new one.

    :param config_name: Name of the litequery configuration.
    :return: State instance which saves any changes to the drive.
    """
    with _state_lock:
        state_path = get_data_path(CONFIG_DIR_NAME, f"{config_name}.state")
        return _get_conf(config_name, state_path, DEFAULTS_STATE, _state_instances)
