#!/usr/bin/env python3
# dictionary.py - SKK system dictionary (SKK形式システム辞書)

import logging
import os
import re

logger = logging.getLogger(__name__)

# Reading and candidates are separated by the first space or tab
_SEPARATOR = re.compile(r'[ \t]')


class DictionaryIOError(OSError):
    """Raised when a dictionary file exists but cannot be read or written."""


def decode_dictionary_bytes(data):
    """
    Decode the raw bytes of a dictionary file.

    SKK dictionaries are distributed either in UTF-8 or in the legacy EUC-JP
    encoding. The whole file is decoded as UTF-8 if that succeeds, otherwise
    the whole file is decoded as EUC-JP (never a mix of both).

    Args:
        data: bytes read from the file

    Returns:
        tuple: (text, encoding_name)
    """
    try:
        return data.decode('utf-8'), 'utf-8'
    except UnicodeDecodeError:
        return data.decode('euc_jp', errors='replace'), 'euc-jp'


def parse_skk_dictionary_line(line, strip_annotations=True):
    """
    Parse a single line from an SKK dictionary file.

    SKK format: reading /candidate1/candidate2;annotation/.../
    Example: あやこ /亜矢子/彩子/

    Args:
        line: A single line from the SKK dictionary
        strip_annotations: Drop everything from the first ';' of a candidate

    Returns:
        tuple: (reading, candidates_list) or (None, None) if line is invalid/comment
    """
    # Skip empty lines and comments
    line = line.strip()
    if not line or line.startswith(';'):
        return None, None

    # Split on the first space/tab to separate reading from candidates
    parts = _SEPARATOR.split(line, maxsplit=1)
    if len(parts) != 2:
        return None, None

    reading = parts[0].strip()
    candidates_part = parts[1].lstrip()
    if not reading:
        return None, None

    candidates = []
    for candidate in candidates_part.split('/'):
        if not candidate:
            continue
        if strip_annotations:
            # Remove annotation if present (e.g., "候補;注釈" -> "候補")
            candidate = candidate.split(';', 1)[0]
        if candidate:
            candidates.append(candidate)

    if not candidates:
        return None, None

    return reading, candidates


class Dictionary:
    """
    Read-only SKK dictionary mapping a reading to its ordered candidates.

    Several lines sharing a reading accumulate their candidates in file order;
    duplicates across lines are kept as they are. The dictionary is never
    modified after loading, so one instance can be shared freely.
    """

    def __init__(self, entries=None):
        # {reading: [candidate, ...]}
        self._entries = entries if entries is not None else {}

    @classmethod
    def from_lines(cls, lines):
        entries = {}
        for line in lines:
            reading, candidates = parse_skk_dictionary_line(line)
            if reading is None:
                continue
            entries.setdefault(reading, []).extend(candidates)
        return cls(entries)

    @classmethod
    def load(cls, path):
        """
        Load an SKK dictionary file (UTF-8 or EUC-JP, detected per file).

        A missing file yields an empty dictionary. Malformed lines are skipped.

        Args:
            path: Path to the dictionary file

        Returns:
            Dictionary

        Raises:
            DictionaryIOError: The file exists but could not be read
        """
        if not os.path.exists(path):
            logger.warning(f'Dictionary file not found: {path}')
            return cls()
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            logger.error(f'Failed to read dictionary: {path} - {e}')
            raise DictionaryIOError(f'Failed to read dictionary {path}: {e}') from e

        text, encoding = decode_dictionary_bytes(data)
        dictionary = cls.from_lines(text.splitlines())
        logger.info(f'Loaded dictionary: {path} ({encoding}, {len(dictionary)} readings)')
        return dictionary

    def lookup(self, reading):
        """
        Look up the candidates of a reading.

        Returns:
            list or None: A copy of the candidate list, or None if absent
        """
        candidates = self._entries.get(reading)
        if not candidates:
            return None
        return list(candidates)

    def lookup_prefix(self, prefix):
        """
        Find every reading starting with prefix (the prefix itself included).

        Returns:
            list: [(reading, candidates), ...] sorted by reading
        """
        return [
            (reading, list(candidates))
            for reading, candidates in sorted(self._entries.items())
            if reading.startswith(prefix)
        ]

    def get_stats(self):
        return {
            'reading_count': len(self._entries),
            'candidate_count': sum(len(c) for c in self._entries.values()),
        }

    def __len__(self):
        return len(self._entries)

    def __contains__(self, reading):
        return reading in self._entries
