#!/usr/bin/env python3
# tests/test_config.py - Unit tests for config.json loading and saving

import pytest
import os
import sys
import json
import typing

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import (
    DEFAULT_CONFIG,
    Config,
    ConfigError,
    ConfigParseError,
    load_config,
    parse_command,
    parse_config,
    save_config,
)
from henkan import Command
from key_mapping import KeybindPreset, ToggleKey

DATA_CONFIG = os.path.join(os.path.dirname(__file__), '..', 'data', 'config.json')


def write_config(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False)


class TestDefaults:
    """Test suite for the default configuration"""

    def test_default_values(self):
        config = Config()
        assert config.toggle_key is ToggleKey.ZENKAKU_HANKAKU
        assert config.system_dict_path is None
        assert config.auto_learn is True
        assert config.keybind_preset is KeybindPreset.NONE
        assert all(command is None for command in config.keybind.values())
        assert config.logging_level == 'WARNING'

    def test_system_dict_path_is_optional(self):
        hints = typing.get_type_hints(Config)
        assert hints['system_dict_path'] == typing.Optional[str]

    def test_installed_config_matches_defaults(self):
        with open(DATA_CONFIG, encoding='utf-8') as f:
            assert json.load(f) == DEFAULT_CONFIG

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(str(tmp_path / 'config.json')) == Config()


class TestParseConfig:
    """Test suite for parse_config()"""

    def test_full_config(self):
        config = parse_config({
            'toggle_key': 'ctrl-space',
            'system_dict_path': '/usr/share/skk/SKK-JISYO.L',
            'auto_learn': False,
            'keybind_preset': 'minimal',
            'keybind': {},
            'logging_level': 'DEBUG',
        })
        assert config.toggle_key is ToggleKey.CTRL_SPACE
        assert config.system_dict_path == '/usr/share/skk/SKK-JISYO.L'
        assert config.auto_learn is False
        assert config.keybind_preset is KeybindPreset.MINIMAL
        assert config.keybind['j'] is Command.COMMIT
        assert config.logging_level == 'DEBUG'

    def test_missing_keys_use_defaults(self):
        assert parse_config({}) == Config()

    def test_alt_tilde(self):
        assert parse_config({'toggle_key': 'alt-tilde'}).toggle_key is ToggleKey.ALT_TILDE

    def test_empty_system_dict_path_is_none(self):
        assert parse_config({'system_dict_path': ''}).system_dict_path is None

    def test_type_mismatch_uses_default(self, caplog):
        config = parse_config({'auto_learn': 'yes', 'keybind': []})
        assert config.auto_learn is True
        assert config.keybind == Config().keybind
        assert 'Type mismatch' in caplog.text

    def test_unknown_toggle_key(self):
        with pytest.raises(ConfigParseError):
            parse_config({'toggle_key': 'invalid-key'})

    def test_unknown_preset(self):
        with pytest.raises(ConfigParseError):
            parse_config({'keybind_preset': 'vim'})

    def test_overrides_applied_on_top_of_preset(self):
        config = parse_config({
            'keybind_preset': 'emacs',
            'keybind': {'ctrl_n': 'none', 'ctrl_g': 'commit'},
        })
        assert config.keybind['n'] is None
        assert config.keybind['g'] is Command.COMMIT
        assert config.keybind['p'] is Command.PREV_CANDIDATE

    def test_unknown_keybind_name_ignored(self):
        config = parse_config({'keybind': {'ctrl_x': 'commit', 'alt_j': 'commit'}})
        assert config.keybind == Config().keybind

    def test_unknown_command(self):
        with pytest.raises(ConfigParseError):
            parse_config({'keybind': {'ctrl_j': 'explode'}})

    def test_non_string_command(self):
        with pytest.raises(ConfigParseError):
            parse_config({'keybind': {'ctrl_j': 1}})

    def test_unknown_logging_level_falls_back(self):
        assert parse_config({'logging_level': 'LOUD'}).logging_level == 'WARNING'

    def test_not_an_object(self):
        with pytest.raises(ConfigParseError):
            parse_config(['toggle_key'])


class TestParseCommand:
    """Test suite for parse_command()"""

    @pytest.mark.parametrize('name, command', [
        ('commit', Command.COMMIT),
        ('cancel', Command.CANCEL),
        ('next', Command.NEXT_CANDIDATE),
        ('prev', Command.PREV_CANDIDATE),
        ('backspace', Command.BACKSPACE),
        ('convert', Command.CONVERT),
        ('none', None),
    ])
    def test_command_names(self, name, command):
        assert parse_command(name) is command

    def test_unknown(self):
        with pytest.raises(ConfigParseError):
            parse_command('Commit')


class TestLoadConfig:
    """Test suite for load_config()"""

    def test_load_file(self, tmp_path):
        path = tmp_path / 'config.json'
        write_config(path, {'keybind_preset': 'emacs', 'auto_learn': False})
        config = load_config(str(path))
        assert config.keybind_preset is KeybindPreset.EMACS
        assert config.auto_learn is False

    def test_malformed_json(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('{"toggle_key": ', encoding='utf-8')
        with pytest.raises(ConfigParseError):
            load_config(str(path))

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ConfigError) as excinfo:
            load_config(str(tmp_path))
        assert not isinstance(excinfo.value, ConfigParseError)


class TestSaveConfig:
    """Test suite for save_config()"""

    def test_save_creates_directory(self, tmp_path):
        path = tmp_path / 'nested' / 'config.json'
        save_config(Config(), str(path))
        assert path.exists()

    def test_save_and_load(self, tmp_path):
        path = str(tmp_path / 'config.json')
        config = parse_config({
            'toggle_key': 'alt-tilde',
            'system_dict_path': '~/SKK-JISYO.L',
            'keybind_preset': 'minimal',
            'keybind': {'ctrl_n': 'next'},
        })
        save_config(config, path)
        assert load_config(path) == config

    def test_save_dict_with_unicode(self, tmp_path):
        path = tmp_path / 'config.json'
        save_config({'system_dict_path': '/home/ユーザー/辞書.txt'}, str(path))
        with open(path, encoding='utf-8') as f:
            assert json.load(f) == {'system_dict_path': '/home/ユーザー/辞書.txt'}
        assert '辞書' in path.read_text(encoding='utf-8')

    def test_save_formats_with_indent(self, tmp_path):
        path = tmp_path / 'config.json'
        save_config(Config(), str(path))
        assert '\n  "toggle_key"' in path.read_text(encoding='utf-8')

    def test_save_to_directory_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            save_config(Config(), str(tmp_path))
