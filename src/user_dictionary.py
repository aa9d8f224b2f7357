#!/usr/bin/env python3
# user_dictionary.py - Learning user dictionary (学習ユーザー辞書)

import logging
import os

from dictionary import DictionaryIOError, parse_skk_dictionary_line

logger = logging.getLogger(__name__)

USER_DICTIONARY_HEADER = ';; japinput user dictionary'


class UserDictionary:
    """
    Mutable reading → candidates store that remembers what the user committed.

    The most recently committed candidate of a reading is always at index 0,
    and a candidate appears at most once per reading. The file format is the
    SKK line format, sorted by reading, so the file stays diff-friendly.

    Attributes:
        dirty: True when there are changes that have not been saved yet
    """

    def __init__(self):
        # {reading: [candidate, ...]}, most recent first
        self._entries = {}
        self.dirty = False

    def record(self, reading, candidate):
        """
        Learn that candidate was committed for reading.

        The candidate is moved (or inserted) to the front of the reading's list.
        """
        candidates = self._entries.setdefault(reading, [])
        if candidate in candidates:
            candidates.remove(candidate)
        candidates.insert(0, candidate)
        self.dirty = True
        logger.debug(f'UserDictionary.record("{reading}", "{candidate}") → {candidates}')

    def lookup(self, reading):
        """
        Returns:
            list or None: A copy of the candidates (most recent first), or None
        """
        candidates = self._entries.get(reading)
        if not candidates:
            return None
        return list(candidates)

    def readings(self):
        return sorted(self._entries)

    def is_dirty(self):
        return self.dirty

    def __len__(self):
        return len(self._entries)

    def __contains__(self, reading):
        return bool(self._entries.get(reading))

    @classmethod
    def load(cls, path):
        """
        Load a user dictionary file. A missing file gives an empty dictionary.

        Raises:
            DictionaryIOError: The file exists but could not be read
        """
        user_dictionary = cls()
        if not os.path.exists(path):
            logger.info(f'User dictionary not found (starting empty): {path}')
            return user_dictionary

        try:
            with open(path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f'Failed to read user dictionary: {path} - {e}')
            raise DictionaryIOError(f'Failed to read user dictionary {path}: {e}') from e

        for line in lines:
            # candidates are stored verbatim, so annotations are not stripped here
            reading, candidates = parse_skk_dictionary_line(line, strip_annotations=False)
            if reading is None:
                continue
            # keep the first occurrence of each candidate
            user_dictionary._entries[reading] = list(dict.fromkeys(candidates))

        logger.info(f'Loaded user dictionary: {path} ({len(user_dictionary)} readings)')
        return user_dictionary

    def save(self, path):
        """
        Write the dictionary to path, creating parent directories as needed.

        Raises:
            DictionaryIOError: The file could not be written
        """
        lines = [USER_DICTIONARY_HEADER]
        for reading in self.readings():
            candidates = self._entries[reading]
            if candidates:
                lines.append(f'{reading} /{"/".join(candidates)}/')

        try:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write('\n'.join(lines) + '\n')
        except OSError as e:
            logger.error(f'Failed to write user dictionary: {path} - {e}')
            raise DictionaryIOError(f'Failed to write user dictionary {path}: {e}') from e

        self.dirty = False
        logger.info(f'User dictionary saved: {path} ({len(self)} readings)')
