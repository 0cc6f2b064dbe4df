# -*- coding: utf-8 -*-

import os
from typing import List

from .main import LiteQueryConfig, LiteQueryState, CONFIG_DIR_NAME
from .main import _config_instances, _state_instances
from ..utils.appdirs import get_conf_path


__all__ = [
    "LiteQueryConfig",
    "LiteQueryState",
    "list_configs",
    "remove_configuration",
]


def list_configs() -> List[str]:
    """
    Lists all litequery configs.

    :returns: A list of all currently existing config files.
    """
    configs = []
    for file in os.listdir(get_conf_path(CONFIG_DIR_NAME)):
        if file.endswith(".ini"):
            configs.append(os.path.splitext(os.path.basename(file))[0])

    return configs


def remove_configuration(config_name: str) -> None:
    """
    Removes the config and state files associated with the given configuration. Database
    files are left in place.

    :param config_name: The configuration to remove.
    """
    LiteQueryConfig(config_name).cleanup()
    LiteQueryState(config_name).cleanup()

    _config_instances.pop(config_name, None)
    _state_instances.pop(config_name, None)
