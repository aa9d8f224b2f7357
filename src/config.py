#!/usr/bin/env python3
"""
config.py - Configuration loading and validation
設定ファイルの読み込みと検証

The configuration is a JSON file (config.json). A default copy is installed in
the data directory and copied to the per-user config directory on first run.

設定はJSONファイル（config.json）。デフォルトはデータディレクトリにあり、
初回起動時にユーザー設定ディレクトリへコピーされる。

    {
      "toggle_key": "zenkaku-hankaku",     zenkaku-hankaku | ctrl-space | alt-tilde
      "system_dict_path": "",              empty = default location
      "auto_learn": true,                  learn from committed candidates
      "keybind_preset": "none",            none | minimal | emacs
      "keybind": {"ctrl_j": "commit"},     per-key overrides of the preset
      "logging_level": "WARNING"
    }

Keybind command names: commit, cancel, next, prev, backspace, convert, none.

Recoverable problems (missing keys, values of the wrong JSON type) are fixed
with the default value and logged. Values that cannot mean anything (unknown
toggle key, preset or command name, malformed JSON) raise ConfigParseError.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import orjson

from henkan import Command
from key_mapping import (
    CTRL_BINDABLE_KEYS,
    KeybindPreset,
    ToggleKey,
    ctrl_key_config_from_preset,
)

logger = logging.getLogger(__name__)

NAME_TO_LOGGING_LEVEL = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

DEFAULT_CONFIG = {
    'toggle_key': 'zenkaku-hankaku',
    'system_dict_path': '',
    'auto_learn': True,
    'keybind_preset': 'none',
    'keybind': {},
    'logging_level': 'WARNING',
}


class ConfigError(Exception):
    """The configuration file could not be read or written."""


class ConfigParseError(ConfigError):
    """The configuration file was read but its content is invalid."""


@dataclass
class Config:
    toggle_key: ToggleKey = ToggleKey.ZENKAKU_HANKAKU
    system_dict_path: Optional[str] = None  # None = default location
    auto_learn: bool = True
    keybind_preset: KeybindPreset = KeybindPreset.NONE
    # {letter: Command or None}; the preset with per-key overrides applied
    keybind: dict = field(default_factory=lambda: ctrl_key_config_from_preset(KeybindPreset.NONE))
    logging_level: str = 'WARNING'
    # user-specified overrides, kept so that save_config() can write them back
    keybind_overrides: dict = field(default_factory=dict)

    def to_dict(self):
        return {
            'toggle_key': self.toggle_key.value,
            'system_dict_path': self.system_dict_path or '',
            'auto_learn': self.auto_learn,
            'keybind_preset': self.keybind_preset.value,
            'keybind': dict(self.keybind_overrides),
            'logging_level': self.logging_level,
        }


def parse_toggle_key(value):
    try:
        return ToggleKey(value)
    except ValueError:
        raise ConfigParseError(f'Unknown toggle_key: {value!r}') from None


def parse_preset(value):
    try:
        return KeybindPreset(value)
    except ValueError:
        raise ConfigParseError(
            f'Unknown keybind_preset: {value!r} (one of none, minimal, emacs)') from None


def parse_command(value):
    """
    Parse a keybind command name.

    Returns:
        Command, or None for "none" (the key is left to the application)
    """
    if value == 'none':
        return None
    try:
        return Command(value)
    except ValueError:
        raise ConfigParseError(f'Unknown keybind command: {value!r}') from None


def _check_types(config_data):
    """Fill in missing keys and replace values of the wrong type with defaults."""
    for k, default in DEFAULT_CONFIG.items():
        if k not in config_data:
            logger.debug(f'The key "{k}" was not found in config.json. Using the default value')
            config_data[k] = default
        elif type(config_data[k]) != type(default):
            logger.warning(f'Type mismatch found for the key "{k}" in config.json. '
                           f'Replacing the value of this key with the default value')
            config_data[k] = default
    return config_data


def parse_config(config_data):
    """
    Build a Config from decoded JSON data.

    Args:
        config_data: dict decoded from config.json

    Returns:
        Config

    Raises:
        ConfigParseError: A value is not one of the accepted names
    """
    if not isinstance(config_data, dict):
        raise ConfigParseError('config.json must contain a JSON object')
    config_data = _check_types(dict(config_data))

    config = Config()
    config.toggle_key = parse_toggle_key(config_data['toggle_key'])
    config.system_dict_path = config_data['system_dict_path'] or None
    config.auto_learn = config_data['auto_learn']
    config.keybind_preset = parse_preset(config_data['keybind_preset'])

    level = config_data['logging_level']
    if level not in NAME_TO_LOGGING_LEVEL:
        logger.warning(f'Specified logging level {level} is not recognized. Using the default WARNING level.')
        level = 'WARNING'
    config.logging_level = level

    # the preset is the base, individual keys override it
    config.keybind = ctrl_key_config_from_preset(config.keybind_preset)
    for name, value in config_data['keybind'].items():
        if not name.startswith('ctrl_') or name[len('ctrl_'):] not in CTRL_BINDABLE_KEYS:
            logger.warning(f'Ignoring unknown keybind "{name}"')
            continue
        if not isinstance(value, str):
            raise ConfigParseError(f'Keybind "{name}" must be a command name, got {value!r}')
        config.keybind[name[len('ctrl_'):]] = parse_command(value)
        config.keybind_overrides[name] = value

    return config


def load_config(path):
    """
    Load config.json. A missing file gives the default configuration.

    Raises:
        ConfigError: The file exists but could not be read
        ConfigParseError: The file is not valid JSON or holds invalid values
    """
    if not os.path.exists(path):
        logger.info(f'config.json not found, using defaults: {path}')
        return Config()
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        logger.error(f'Error reading {path}: {e}')
        raise ConfigError(f'Failed to read {path}: {e}') from e

    try:
        config_data = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise ConfigParseError(f'Malformed JSON in {path}: {e}') from e

    config = parse_config(config_data)
    logger.info(f'config.json loaded: {path}')
    return config


def save_config(config, path):
    """
    Write config (a Config or a plain dict) as indented UTF-8 JSON.

    Raises:
        ConfigError: The file could not be written
    """
    config_data = config.to_dict() if isinstance(config, Config) else config
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, 'wb') as f:
            f.write(orjson.dumps(config_data, option=orjson.OPT_INDENT_2))
    except OSError as e:
        logger.error(f'Error saving config.json to {path}: {e}')
        raise ConfigError(f'Failed to write {path}: {e}') from e
    logger.info(f'Configuration saved successfully to {path}')
