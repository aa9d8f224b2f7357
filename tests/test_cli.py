#!/usr/bin/env python3
# tests/test_cli.py - Tests for the japinput-cli command-line demo

import pytest
import os
import sys
import io
import json

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import japinput_cli
from dictionary import Dictionary
from henkan import ConversionEngine
from user_dictionary import UserDictionary

FIXTURE_DICT = os.path.join(os.path.dirname(__file__), 'fixtures', 'test_dict.txt')


class TestConvertLine:
    """Test suite for convert_line()"""

    def test_with_dictionary(self):
        engine = ConversionEngine(Dictionary.load(FIXTURE_DICT))
        result = japinput_cli.convert_line(engine, 'kanji')
        assert result == {
            'input': 'kanji',
            'hiragana': 'かんじ',
            'katakana': 'カンジ',
            'candidates': ['漢字', '感じ', '幹事'],
            'committed': '漢字',
        }

    def test_no_candidates(self):
        engine = ConversionEngine(Dictionary.load(FIXTURE_DICT))
        result = japinput_cli.convert_line(engine, 'ra-men')
        assert result['hiragana'] == 'らーめん'
        assert result['katakana'] == 'ラーメン'
        assert result['candidates'] == []
        assert result['committed'] == 'らーめん'

    def test_without_dictionary(self):
        result = japinput_cli.convert_line(ConversionEngine(), 'kan')
        assert result['hiragana'] == 'かん'
        assert result['candidates'] == []
        assert result['committed'] == 'かん'

    def test_learning_through_user_dictionary(self):
        engine = ConversionEngine(Dictionary.load(FIXTURE_DICT), UserDictionary())
        japinput_cli.convert_line(engine, 'nihon')
        assert engine.user_dictionary.lookup('にほん') == ['日本']


class TestMain:
    """Test suite for main()"""

    def test_positional_text(self, capsys):
        assert japinput_cli.main(['--dict', FIXTURE_DICT, 'kanji']) == 0
        out = capsys.readouterr().out
        assert 'かんじ' in out
        assert 'カンジ' in out
        assert '漢字 / 感じ / 幹事' in out

    def test_no_candidates_output(self, capsys):
        japinput_cli.main(['--dict', FIXTURE_DICT, 'aiueo'])
        assert '(none)' in capsys.readouterr().out

    def test_json_output(self, capsys):
        japinput_cli.main(['--dict', FIXTURE_DICT, '--json', 'kanji', 'nihon'])
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first['candidates'] == ['漢字', '感じ', '幹事']
        assert json.loads(lines[1])['committed'] == '日本'

    def test_stdin_until_empty_line(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'stdin', io.StringIO('kanji\n\nnihon\n'))
        japinput_cli.main(['--dict', FIXTURE_DICT, '--json'])
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])['input'] == 'kanji'

    def test_user_dictionary_saved_on_exit(self, tmp_path, capsys):
        user_dict = tmp_path / 'user_dict.txt'
        japinput_cli.main(['--dict', FIXTURE_DICT, '--user-dict', str(user_dict), 'kanji'])
        assert user_dict.exists()
        assert UserDictionary.load(str(user_dict)).lookup('かんじ') == ['漢字']

    def test_user_dictionary_reorders_next_run(self, tmp_path, capsys):
        user_dict = tmp_path / 'user_dict.txt'
        user_dict.write_text('かんじ /幹事/\n', encoding='utf-8')
        japinput_cli.main(['--dict', FIXTURE_DICT, '--user-dict', str(user_dict), '--json', 'kanji'])
        result = json.loads(capsys.readouterr().out)
        assert result['candidates'] == ['幹事', '漢字', '感じ']
        assert result['committed'] == '幹事'

    def test_auto_learn_off_skips_user_dictionary(self, tmp_path, capsys):
        config = tmp_path / 'config.json'
        config.write_text('{"auto_learn": false}', encoding='utf-8')
        user_dict = tmp_path / 'user_dict.txt'
        japinput_cli.main(['--dict', FIXTURE_DICT, '--user-dict', str(user_dict),
                           '--config', str(config), 'kanji'])
        assert not user_dict.exists()

    def test_system_dict_path_from_config(self, tmp_path, capsys):
        config = tmp_path / 'config.json'
        config.write_text(json.dumps({'system_dict_path': FIXTURE_DICT}), encoding='utf-8')
        japinput_cli.main(['--config', str(config), '--json', 'kanji'])
        assert json.loads(capsys.readouterr().out)['committed'] == '漢字'

    def test_broken_config_falls_back_to_defaults(self, tmp_path, capsys):
        config = tmp_path / 'config.json'
        config.write_text('{', encoding='utf-8')
        assert japinput_cli.main(['--config', str(config), '--dict', FIXTURE_DICT, 'kanji']) == 0

    def test_prefix_lookup(self, capsys):
        assert japinput_cli.main(['--dict', FIXTURE_DICT, '--prefix', 'にほん']) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ['にほん /日本/二本/', 'にほんご /日本語/']

    def test_prefix_lookup_json(self, capsys):
        japinput_cli.main(['--dict', FIXTURE_DICT, '--prefix', 'かんこ', '--json'])
        assert json.loads(capsys.readouterr().out) == {'reading': 'かんこく', 'candidates': ['韓国', '勧告']}

    def test_prefix_without_dictionary(self, capsys):
        assert japinput_cli.main(['--prefix', 'かん']) == 1
