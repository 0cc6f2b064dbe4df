"""
This module provides INI file backed configuration and state management. Options are
typed by their default values: anything which is not a string is stored as its
``repr`` and read back with :func:`ast.literal_eval`.
"""

from __future__ import annotations

import ast
import os
import os.path as osp
import copy
import logging
import configparser as cp
from threading import RLock
from typing import Any, Dict

from packaging.version import Version


logger = logging.getLogger(__name__)

_DefaultsType = Dict[str, Dict[str, Any]]


class NoDefault:
    pass


class DefaultsConfig(cp.ConfigParser):
    """
    ConfigParser without interpolation which knows the file it is saved to.
    """

    def __init__(self, path: str) -> None:
        super().__init__(interpolation=None)
        self._path = path
        self._dirname = osp.dirname(path)

    def _set(self, section: str, option: str, value: Any) -> None:
        if not self.has_section(section):
            self.add_section(section)
        if not isinstance(value, str):
            value = repr(value)

        super().set(section, option, value)

    def save(self) -> None:
        """Save config into the associated file."""
        os.makedirs(self._dirname, exist_ok=True)

        with open(self.config_path, "w", encoding="utf-8") as configfile:
            self.write(configfile)

    @property
    def config_path(self) -> str:
        """The ini file where this configuration is stored."""
        return self._path


class UserConfig(DefaultsConfig):
    """
    Config file with typed defaults and a version number. This class is safe to use
    from different threads but must not be used from different processes.

    :param path: Configuration file will be saved to this path.
    :param defaults: Dictionary of sections with options and their default values.
    :param load: Whether to load existing values from ``path``.
    :param version: Version of the configuration file.

    .. note:: The ``get`` and ``set`` signatures differ from the reimplemented
        ConfigParser methods.
    """

    DEFAULT_SECTION_NAME = "main"

    def __init__(
        self,
        path: str,
        defaults: _DefaultsType | None = None,
        load: bool = True,
        version: Version = Version("0.0.0"),
    ) -> None:
        super().__init__(path=path)

        self._lock = RLock()
        self.default_config = self._set_defaults(version, defaults)
        self.reset_to_defaults(save=False)

        if load:
            self._load_from_ini(self.config_path)

            try:
                old_version = self.get_version()
            except cp.NoOptionError:
                old_version = version

            if version != old_version:
                logger.debug(
                    "Updating %s from version %s to %s",
                    self.config_path,
                    old_version,
                    version,
                )
                self.set_version(version, save=False)

            self.save()

    def _set_defaults(
        self, version: Version, defaults: _DefaultsType | None
    ) -> _DefaultsType:
        defaults = copy.deepcopy(defaults) if defaults else {}
        defaults.setdefault(UserConfig.DEFAULT_SECTION_NAME, {})
        defaults[UserConfig.DEFAULT_SECTION_NAME]["version"] = str(version)
        return defaults

    def _load_from_ini(self, path: str) -> None:
        with self._lock:
            try:
                self.read(path, encoding="utf-8")
            except cp.MissingSectionHeaderError:
                logger.error("File contains no section headers: %s", path)

    # --- Public API -------------------------------------------------------------------

    def get_version(self) -> Version:
        """
        :returns: Configuration (not application!) version.
        """
        with self._lock:
            return Version(self.get(UserConfig.DEFAULT_SECTION_NAME, "version"))

    def set_version(self, version: Version, save: bool = True) -> None:
        with self._lock:
            self.set(
                UserConfig.DEFAULT_SECTION_NAME, "version", str(version), save=save
            )

    def reset_to_defaults(self, section: str | None = None, save: bool = True) -> None:
        """
        Reset config to default values.

        :param section: The section to reset. If not given, reset all sections.
        :param save: Whether to save the changes to the drive.
        """
        with self._lock:
            for sec, options in self.default_config.items():
                if section is None or section == sec:
                    for option, value in options.items():
                        self._set(sec, option, value)
            if save:
                self.save()

    def get_default(self, section: str, option: str) -> Any:
        """
        :returns: Default value for ``option`` in ``section`` or :class:`NoDefault`.
        """
        with self._lock:
            return self.default_config.get(section, {}).get(option, NoDefault)

    def get(self, section: str, option: str, default: Any = NoDefault) -> Any:  # type: ignore
        """
        Get an option.

        :param section: Config section to search in.
        :param option: Config option to get.
        :param default: Default value to fall back to if not present.
        :returns: Config value.
        :raises cp.NoSectionError: if the section does not exist.
        :raises cp.NoOptionError: if the option does not exist and no default is given.
        """
        with self._lock:
            if not self.has_section(section):
                if default is NoDefault:
                    raise cp.NoSectionError(section)
                self.add_section(section)

            if not self.has_option(section, option):
                if default is NoDefault:
                    raise cp.NoOptionError(option, section)
                return default

            raw_value: str = super().get(section, option, raw=True)
            default_value = self.get_default(section, option)
            value: Any

            if isinstance(default_value, str):
                value = raw_value
            else:
                try:
                    value = ast.literal_eval(raw_value)
                except (SyntaxError, ValueError):
                    value = raw_value

            if default_value is not NoDefault and type(default_value) is not type(
                value
            ):
                logger.error(
                    f"Inconsistent config type for [{section}][{option}]. "
                    f"Expected {default_value.__class__.__name__} but "
                    f"got {value.__class__.__name__}."
                )

            return value

    def set(self, section: str, option: str, value: Any, save: bool = True) -> None:  # type: ignore
        """
        Set an ``option`` on a given ``section``. Options without a default take the
        type of the first value which is set.

        :param section: Config section.
        :param option: Config option to set.
        :param value: Config value.
        :param save: Whether to save the changes to the drive.
        :raises ValueError: if the type of ``value`` does not match the default.
        """
        with self._lock:
            default_value = self.get_default(section, option)

            if default_value is NoDefault:
                default_value = value
                self.default_config.setdefault(section, {})[option] = value

            if isinstance(default_value, float) and isinstance(value, int):
                value = float(value)

            if type(default_value) is not type(value):
                raise ValueError(
                    f"Inconsistent type for config value [{section}][{option}]. "
                    f"Expected {default_value.__class__.__name__} but "
                    f"got {value.__class__.__name__}."
                )

            self._set(section, option, value)

            if save:
                self.save()

    def remove_option(self, section: str, option: str, save: bool = True) -> bool:  # type: ignore
        with self._lock:
            res = super().remove_option(section, option)
            if save:
                self.save()
            return res

    def cleanup(self) -> None:
        """Remove the config file and reset to defaults."""
        with self._lock:
            self.reset_to_defaults(save=False)
            try:
                os.remove(self.config_path)
            except FileNotFoundError:
                pass
