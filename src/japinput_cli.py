#!/usr/bin/env python3
"""
japinput_cli.py - Command-line demo and batch converter
コマンドラインのデモ兼バッチ変換ツール

================================================================================
OVERVIEW / 概要
================================================================================

Runs the same conversion engine as the input method, without IBus. Each input
line is typed into the engine character by character, converted, and the first
candidate is committed (so the user dictionary learns from it).

IBusなしでIMEと同じ変換エンジンを動かす。各行を1文字ずつエンジンに入力し、
変換して第1候補を確定する（ユーザー辞書はこれを学習する）。

================================================================================
USAGE / 使用方法
================================================================================

    # Interactive: type romaji, an empty line quits
    # 対話モード: ローマ字を入力、空行で終了
    japinput-cli --dict SKK-JISYO.L

    # Convert arguments, one line each, with learning
    # 引数を1行ずつ変換（学習あり）
    japinput-cli --dict SKK-JISYO.L --user-dict ~/user_dict.txt kanji nihon

    # Machine-readable output (one JSON object per line)
    # 機械可読な出力（1行1JSONオブジェクト）
    japinput-cli --dict SKK-JISYO.L --json kanji

    # List dictionary entries whose reading starts with a prefix
    # 読みの前方一致で辞書を検索
    japinput-cli --dict SKK-JISYO.L --prefix かん

================================================================================
"""

import argparse
import sys
import os
import logging

import orjson

# Add src directory to path if needed
src_dir = os.path.dirname(os.path.abspath(__file__))
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from config import Config, ConfigError, load_config
from dictionary import Dictionary, DictionaryIOError
from henkan import Command, ConversionEngine, InsertChar
from romaji import to_katakana
from user_dictionary import UserDictionary

logger = logging.getLogger(__name__)


def setup_logging(verbose=False):
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format='%(asctime)s %(levelname)-8s %(message)s',
        datefmt='%H:%M:%S'
    )


def convert_line(engine, line):
    """
    Type one line into the engine and commit the result.

    When any dictionary is attached the line is converted and the first
    candidate committed; otherwise the kana is committed as is.

    Returns:
        dict: {'input', 'hiragana', 'katakana', 'candidates', 'committed'}
    """
    for ch in line:
        engine.process(InsertChar(ch))

    candidates = []
    if engine.dictionary is not None or engine.user_dictionary is not None:
        output = engine.process(Command.CONVERT)
        if engine.candidates is not None:
            hiragana = engine.reading
            candidates = list(engine.candidates)
            committed = engine.process(Command.COMMIT).committed
        else:
            # no candidates: the kana was committed by the conversion itself
            hiragana = output.committed
            committed = output.committed
    else:
        hiragana = engine.process(Command.COMMIT).committed
        committed = hiragana

    return {
        'input': line,
        'hiragana': hiragana,
        'katakana': to_katakana(hiragana),
        'candidates': candidates,
        'committed': committed,
    }


def print_result(result, as_json=False):
    if as_json:
        print(orjson.dumps(result).decode('utf-8'))
        return
    print(f"  hiragana:   {result['hiragana']}")
    print(f"  katakana:   {result['katakana']}")
    if result['candidates']:
        print(f"  candidates: {' / '.join(result['candidates'])}")
    else:
        print("  candidates: (none)")
    print(f"  committed:  {result['committed']}")
    print()


def iter_input_lines(texts):
    """Yield the positional texts, or stdin lines until the first empty one."""
    if texts:
        yield from texts
        return
    for line in sys.stdin:
        line = line.rstrip('\r\n')
        if not line:
            break
        yield line


def cmd_prefix(dictionary, prefix, as_json=False):
    """
    List dictionary entries whose reading starts with prefix.
    前方一致で辞書エントリを一覧表示。
    """
    if dictionary is None:
        print("ERROR: --prefix needs a dictionary (--dict or system_dict_path)", file=sys.stderr)
        return 1
    for reading, candidates in dictionary.lookup_prefix(prefix):
        if as_json:
            print(orjson.dumps({'reading': reading, 'candidates': candidates}).decode('utf-8'))
        else:
            print(f"{reading} /{'/'.join(candidates)}/")
    return 0


def _load_dictionaries(args, config):
    dict_path = args.dict or (config.system_dict_path and os.path.expanduser(config.system_dict_path))
    dictionary = None
    if dict_path:
        try:
            dictionary = Dictionary.load(dict_path)
            print(f"Dictionary loaded: {dict_path}", file=sys.stderr)
        except DictionaryIOError as e:
            print(f"ERROR: Failed to load dictionary: {e}", file=sys.stderr)

    user_dictionary = None
    if args.user_dict and config.auto_learn:
        try:
            user_dictionary = UserDictionary.load(args.user_dict)
            print(f"User dictionary loaded: {args.user_dict}", file=sys.stderr)
        except DictionaryIOError as e:
            print(f"ERROR: Failed to load user dictionary: {e}", file=sys.stderr)
    return dictionary, user_dictionary


def main(argv=None):
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog='japinput-cli',
        description="Romaji to kana-kanji conversion demo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  japinput-cli --dict SKK-JISYO.L
  japinput-cli --dict SKK-JISYO.L --user-dict user_dict.txt kanji nihon
  japinput-cli --dict SKK-JISYO.L --json kanji
  japinput-cli --dict SKK-JISYO.L --prefix かん
"""
    )
    parser.add_argument('text', nargs='*', help='Romaji to convert (default: read stdin lines)')
    parser.add_argument('-d', '--dict', help='SKK system dictionary (UTF-8 or EUC-JP)')
    parser.add_argument('-u', '--user-dict', help='User dictionary; created or updated on exit')
    parser.add_argument('-c', '--config', help='config.json (system_dict_path and auto_learn are used)')
    parser.add_argument('-p', '--prefix', help='List entries whose reading starts with PREFIX')
    parser.add_argument('--json', action='store_true', help='Print one JSON object per result')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging on stderr')

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    config = Config()
    if args.config:
        try:
            config = load_config(args.config)
        except ConfigError as e:
            logger.error(f'{e}; using the default configuration')

    dictionary, user_dictionary = _load_dictionaries(args, config)

    if args.prefix is not None:
        return cmd_prefix(dictionary, args.prefix, args.json)

    engine = ConversionEngine(dictionary, user_dictionary)
    interactive = not args.text and sys.stdin.isatty()
    if interactive and not args.json:
        print("japinput - romaji to kana conversion demo")
        print("Type romaji and press Enter. An empty line quits.")
        print()

    for line in iter_input_lines(args.text):
        print_result(convert_line(engine, line), args.json)

    if user_dictionary is not None and user_dictionary.is_dirty():
        try:
            user_dictionary.save(args.user_dict)
            print(f"User dictionary saved: {args.user_dict}", file=sys.stderr)
        except DictionaryIOError as e:
            print(f"ERROR: Failed to save user dictionary: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
