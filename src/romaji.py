#!/usr/bin/env python3
"""
romaji.py - Romaji to hiragana transliteration
ローマ字→ひらがな変換

================================================================================
OVERVIEW / 概要
================================================================================

This module turns a string of romaji into hiragana. It is used both in batch
mode (convert a whole string at once) and incrementally by InputBuffer, which
re-runs the conversion on its pending romaji every time a key is typed.

このモジュールはローマ字文字列をひらがなに変換する。一括変換と、
InputBuffer による逐次変換（キー入力ごとに保留中のローマ字を再変換）の
両方で使われる。

================================================================================
LONGEST MATCH WITH DEFERRAL / 最長一致と確定の保留
================================================================================

The buffer is compared against every pattern of the table:

    buffer is a strict prefix of some pattern  → PARTIAL (wait)
    buffer equals a pattern                    → FULL    (emit kana)
    otherwise                                  → NONE    (fallback)

PARTIAL always wins over FULL. This is why "n" is never confirmed as "ん"
right away: "na", "ni", "nya", ... are still possible.

バッファがより長いパターンの接頭辞であれば、完全一致よりも待機を優先する。

    "k"   → PARTIAL
    "ka"  → FULL "か"
    "kq"  → NONE  → "kq" is emitted verbatim

================================================================================
SPECIAL CASES / 特殊処理
================================================================================

    "nn"            → "ん", and the second "n" stays pending  (konnichiwa)
    "kk", "tt", ... → "っ" + the consonant stays pending      (kitte)
    "n" + consonant → "ん" + retry the rest exactly once      (kanta)

"n" and "nn" are deliberately NOT part of the table.
「n」「nn」はテーブルに含めず、convert() の中で特別に処理する。

================================================================================
"""

import logging
from collections import namedtuple
from enum import Enum

logger = logging.getLogger(__name__)

VOWELS = frozenset('aiueo')

TransliterationRule = namedtuple('TransliterationRule', ['pattern', 'kana'])

# Matching scans the whole table, so the declaration order carries no meaning.
ROMAJI_TABLE = tuple(TransliterationRule(pattern, kana) for pattern, kana in (
    # ─── 3-letter entries ───
    ('sha', 'しゃ'), ('shi', 'し'), ('shu', 'しゅ'), ('sho', 'しょ'),
    ('chi', 'ち'), ('cha', 'ちゃ'), ('chu', 'ちゅ'), ('cho', 'ちょ'),
    ('tsu', 'つ'),
    ('kya', 'きゃ'), ('kyu', 'きゅ'), ('kyo', 'きょ'),
    ('gya', 'ぎゃ'), ('gyu', 'ぎゅ'), ('gyo', 'ぎょ'),
    ('nya', 'にゃ'), ('nyu', 'にゅ'), ('nyo', 'にょ'),
    ('hya', 'ひゃ'), ('hyu', 'ひゅ'), ('hyo', 'ひょ'),
    ('bya', 'びゃ'), ('byu', 'びゅ'), ('byo', 'びょ'),
    ('pya', 'ぴゃ'), ('pyu', 'ぴゅ'), ('pyo', 'ぴょ'),
    ('mya', 'みゃ'), ('myu', 'みゅ'), ('myo', 'みょ'),
    ('rya', 'りゃ'), ('ryu', 'りゅ'), ('ryo', 'りょ'),
    ('jya', 'じゃ'), ('jyu', 'じゅ'), ('jyo', 'じょ'),
    ('dya', 'ぢゃ'), ('dyu', 'ぢゅ'), ('dyo', 'ぢょ'),
    # small kana (x-prefix) / 小文字かな
    ('xya', 'ゃ'), ('xyu', 'ゅ'), ('xyo', 'ょ'), ('xtu', 'っ'), ('xwa', 'ゎ'),
    # small kana (l-prefix, alias of x)
    ('lya', 'ゃ'), ('lyu', 'ゅ'), ('lyo', 'ょ'), ('ltu', 'っ'), ('lwa', 'ゎ'),
    # ─── 2-letter entries ───
    ('ka', 'か'), ('ki', 'き'), ('ku', 'く'), ('ke', 'け'), ('ko', 'こ'),
    ('sa', 'さ'), ('si', 'し'), ('su', 'す'), ('se', 'せ'), ('so', 'そ'),
    ('ta', 'た'), ('ti', 'ち'), ('tu', 'つ'), ('te', 'て'), ('to', 'と'),
    ('na', 'な'), ('ni', 'に'), ('nu', 'ぬ'), ('ne', 'ね'), ('no', 'の'),
    ('ha', 'は'), ('hi', 'ひ'), ('hu', 'ふ'), ('fu', 'ふ'), ('he', 'へ'), ('ho', 'ほ'),
    ('ma', 'ま'), ('mi', 'み'), ('mu', 'む'), ('me', 'め'), ('mo', 'も'),
    ('ya', 'や'), ('yu', 'ゆ'), ('yo', 'よ'),
    ('ra', 'ら'), ('ri', 'り'), ('ru', 'る'), ('re', 'れ'), ('ro', 'ろ'),
    ('wa', 'わ'), ('wi', 'ゐ'), ('we', 'ゑ'), ('wo', 'を'),
    ('ga', 'が'), ('gi', 'ぎ'), ('gu', 'ぐ'), ('ge', 'げ'), ('go', 'ご'),
    ('za', 'ざ'), ('zi', 'じ'), ('zu', 'ず'), ('ze', 'ぜ'), ('zo', 'ぞ'),
    ('da', 'だ'), ('di', 'ぢ'), ('du', 'づ'), ('de', 'で'), ('do', 'ど'),
    ('ba', 'ば'), ('bi', 'び'), ('bu', 'ぶ'), ('be', 'べ'), ('bo', 'ぼ'),
    ('pa', 'ぱ'), ('pi', 'ぴ'), ('pu', 'ぷ'), ('pe', 'ぺ'), ('po', 'ぽ'),
    ('ja', 'じゃ'), ('ji', 'じ'), ('ju', 'じゅ'), ('jo', 'じょ'),
    ('fa', 'ふぁ'), ('fi', 'ふぃ'), ('fe', 'ふぇ'), ('fo', 'ふぉ'),
    ('va', 'ゔぁ'), ('vi', 'ゔぃ'), ('vu', 'ゔ'), ('ve', 'ゔぇ'), ('vo', 'ゔぉ'),
    ('xa', 'ぁ'), ('xi', 'ぃ'), ('xu', 'ぅ'), ('xe', 'ぇ'), ('xo', 'ぉ'),
    ('la', 'ぁ'), ('li', 'ぃ'), ('lu', 'ぅ'), ('le', 'ぇ'), ('lo', 'ぉ'),
    # ─── 1-letter entries ───
    ('a', 'あ'), ('i', 'い'), ('u', 'う'), ('e', 'え'), ('o', 'お'),
    # long vowel mark and punctuation / 長音記号・句読点
    ('-', 'ー'), (',', '、'), ('.', '。'),
))

ConversionResult = namedtuple('ConversionResult', ['output', 'pending'])


class MatchKind(Enum):
    FULL = 'full'
    PARTIAL = 'partial'
    NONE = 'none'


class RomajiProcessor:
    """
    Stateless romaji→hiragana converter over a fixed rule table.
    固定ルールテーブルによるローマ字→ひらがな変換器（状態を持たない）。

    The rule table is turned into two lookup structures at construction time:

        _exact    : {pattern: kana}
        _prefixes : every strict prefix of every pattern

    so that match() answers in O(1) while keeping the semantics of a full
    table scan.
    """

    def __init__(self, rules=ROMAJI_TABLE):
        self._exact = {}
        self._prefixes = set()
        for rule in rules:
            if not rule.pattern or not rule.kana:
                logger.warning(f'Skipping empty transliteration rule: {rule}')
                continue
            self._exact[rule.pattern] = rule.kana
            for i in range(1, len(rule.pattern)):
                self._prefixes.add(rule.pattern[:i])

    def match(self, buffer):
        """
        Match the buffer against the rule table.

        Args:
            buffer: Romaji under disambiguation (already lower-cased)

        Returns:
            tuple: (MatchKind, kana) where kana is only set for MatchKind.FULL
        """
        if buffer in self._prefixes:
            return MatchKind.PARTIAL, None
        kana = self._exact.get(buffer)
        if kana is not None:
            return MatchKind.FULL, kana
        return MatchKind.NONE, None

    def convert(self, text):
        """
        Convert a whole romaji string.
        ローマ字文字列を一括変換する。

        Args:
            text: Romaji input (case-insensitive)

        Returns:
            ConversionResult: (output, pending) where output is the confirmed
                              kana and pending the romaji still waiting for
                              more input.

        Example:
            >>> RomajiProcessor().convert('nippon')
            ConversionResult(output='にっぽ', pending='n')
        """
        output = []
        buffer = ''
        for ch in text.lower():
            buffer = self._step(output, buffer, ch)
        return ConversionResult(''.join(output), buffer)

    def _step(self, output, buffer, ch):
        """Consume one character; appends confirmed kana to output and returns the new buffer."""
        # "nn": the first n becomes ん, the second one stays for the next mora
        if buffer == 'n' and ch == 'n':
            output.append('ん')
            return 'n'

        # sokuon: the same consonant typed twice
        if len(buffer) == 1 and ch == buffer and ch not in VOWELS:
            output.append('っ')
            buffer = ''

        buffer += ch
        kind, kana = self.match(buffer)
        if kind is MatchKind.FULL:
            output.append(kana)
            return ''
        if kind is MatchKind.PARTIAL:
            return buffer

        if len(buffer) >= 2 and buffer.startswith('n'):
            # "n" + something that cannot follow it: confirm ん and retry once
            output.append('ん')
            buffer = buffer[1:]
            kind, kana = self.match(buffer)
            if kind is MatchKind.FULL:
                output.append(kana)
                return ''
            if kind is MatchKind.PARTIAL:
                return buffer

        # unmatched characters (latin, symbols) pass through as they are
        output.append(buffer)
        return ''


_default_processor = RomajiProcessor()


def convert(text):
    """Convert romaji with the default rule table. See RomajiProcessor.convert()."""
    return _default_processor.convert(text)


def to_katakana(text):
    """
    Convert hiragana to katakana.
    ひらがなをカタカナに変換する。

    Hiragana U+3041 (ぁ) .. U+3096 (ゖ) is shifted by 0x60 into the katakana
    block. Everything else (ー, ASCII, punctuation, kanji) is kept as is.

    Example:
        >>> to_katakana('らーめん')
        'ラーメン'
    """
    return ''.join(
        chr(ord(c) + 0x60) if 0x3041 <= ord(c) <= 0x3096 else c
        for c in text
    )
