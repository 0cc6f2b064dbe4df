"""
This module contains functions to retrieve platform dependent locations for config
files, database files and logs. It supports macOS and Linux.
"""

# system imports
import os
import platform
from os import path as osp
from typing import Optional


__all__ = [
    "get_home_dir",
    "get_conf_path",
    "get_data_path",
    "get_cache_path",
    "get_log_path",
]


def to_full_path(
    path: str, subfolder: Optional[str], filename: Optional[str], create: bool
) -> str:
    if subfolder:
        path = osp.join(path, subfolder)
    if create:
        os.makedirs(path, exist_ok=True)
    if filename:
        path = osp.join(path, filename)
    return path


def get_home_dir() -> str:
    """
    Returns the user home directory, as reported by ``osp.expanduser("~")``.
    """
    path = osp.expanduser("~")

    if osp.isdir(path):
        return path
    raise RuntimeError(
        "Please set the environment variable HOME to your user/home directory."
    )


def _platform_dir(darwin: str, xdg_env: str, fallback: str) -> str:
    if platform.system() == "Darwin":
        return osp.join(get_home_dir(), "Library", darwin)
    elif platform.system() == "Linux":
        return os.environ.get(xdg_env, osp.join(get_home_dir(), fallback))
    else:
        raise RuntimeError("Platform not supported")


def get_conf_path(
    subfolder: Optional[str] = None, filename: Optional[str] = None, create: bool = True
) -> str:
    """
    Returns the default config path for the platform. This will be:

        - macOS: "~/Library/Application Support/<subfolder>/<filename>"
        - Linux: "$XDG_CONFIG_HOME/<subfolder>/<filename>"
        - fallback: "~/.config/<subfolder>/<filename>"

    :param subfolder: The subfolder for the app.
    :param filename: The filename to append for the app.
    :param create: If ``True``, the folder ``subfolder`` will be created on-demand.
    """
    conf_path = _platform_dir("Application Support", "XDG_CONFIG_HOME", ".config")
    return to_full_path(conf_path, subfolder, filename, create)


def get_data_path(
    subfolder: Optional[str] = None, filename: Optional[str] = None, create: bool = True
) -> str:
    """
    Returns the default path for database files and state for the platform:

        - macOS: "~/Library/Application Support/<subfolder>/<filename>"
        - Linux: "$XDG_DATA_HOME/<subfolder>/<filename>"
        - fallback: "~/.local/share/<subfolder>/<filename>"

    :param subfolder: The subfolder for the app.
    :param filename: The filename to append for the app.
    :param create: If ``True``, the folder ``subfolder`` will be created on-demand.
    """
    data_path = _platform_dir(
        "Application Support", "XDG_DATA_HOME", osp.join(".local", "share")
    )
    return to_full_path(data_path, subfolder, filename, create)


def get_cache_path(
    subfolder: Optional[str] = None, filename: Optional[str] = None, create: bool = True
) -> str:
    """
    Returns the default cache path for the platform:

        - macOS: "~/Library/Caches/<subfolder>/<filename>"
        - Linux: "$XDG_CACHE_HOME/<subfolder>/<filename>"
        - fallback: "~/.cache/<subfolder>/<filename>"
    """
    cache_path = _platform_dir("Caches", "XDG_CACHE_HOME", ".cache")
    return to_full_path(cache_path, subfolder, filename, create)


def get_log_path(
    subfolder: Optional[str] = None, filename: Optional[str] = None, create: bool = True
) -> str:
    """
    Returns the default log path for the platform. On Linux, logs are kept in the cache
    directory.
    """
    if platform.system() == "Darwin":
        log_path = osp.join(get_home_dir(), "Library", "Logs")
    else:
        log_path = get_cache_path(create=False)

    return to_full_path(log_path, subfolder, filename, create)
