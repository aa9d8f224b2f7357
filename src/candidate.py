#!/usr/bin/env python3
# candidate.py - Candidate list with a wrap-around cursor (変換候補リスト)


class CandidateList:
    """
    Ordered, immutable list of conversion candidates plus a selection cursor.

    The cursor starts at 0 and wraps around in both directions. Moving the
    cursor of an empty list is a no-op.
    """

    def __init__(self, candidates):
        self._candidates = tuple(candidates)
        self._index = 0

    @property
    def index(self):
        return self._index

    @property
    def candidates(self):
        return self._candidates

    def current(self):
        """
        Returns:
            str or None: The candidate under the cursor, or None if empty
        """
        if not self._candidates:
            return None
        return self._candidates[self._index]

    def select(self):
        """Return the candidate to commit (same as current())."""
        return self.current()

    def next(self):
        if self._candidates:
            self._index = (self._index + 1) % len(self._candidates)

    def prev(self):
        if self._candidates:
            self._index = (self._index - 1) % len(self._candidates)

    def set_index(self, index):
        """
        Move the cursor to index.

        Returns:
            bool: True if index was valid and the cursor moved there
        """
        if 0 <= index < len(self._candidates):
            self._index = index
            return True
        return False

    def is_empty(self):
        return not self._candidates

    def __len__(self):
        return len(self._candidates)

    def __iter__(self):
        return iter(self._candidates)
