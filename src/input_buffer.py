#!/usr/bin/env python3
# input_buffer.py - Incremental romaji input buffer (逐次ローマ字入力バッファ)

import logging

import romaji

logger = logging.getLogger(__name__)


class InputBuffer:
    """
    Accumulates typed characters into confirmed kana and pending romaji.

    Every feed_char() re-runs the romaji conversion on the pending romaji plus
    the new character, so feeding a string one character at a time and then
    calling flush() gives the same result as the batch romaji.convert().

        >>> buf = InputBuffer()
        >>> for ch in 'kan':
        ...     buf.feed_char(ch)
        >>> buf.output, buf.pending
        ('か', 'n')
        >>> buf.flush()
        >>> buf.output, buf.pending
        ('かん', '')
    """

    def __init__(self, processor=None):
        self._processor = processor if processor is not None else romaji.RomajiProcessor()
        self._output = ''   # confirmed kana
        self._pending = ''  # romaji still under disambiguation

    @property
    def output(self):
        return self._output

    @property
    def pending(self):
        return self._pending

    @property
    def text(self):
        """Confirmed kana followed by the pending romaji, as shown in the preedit."""
        return self._output + self._pending

    def feed_char(self, ch):
        result = self._processor.convert(self._pending + ch)
        self._output += result.output
        self._pending = result.pending

    def flush(self):
        """
        Confirm whatever is pending: a lone "n" becomes "ん", anything else is
        appended verbatim.
        """
        if self._pending == 'n':
            self._output += 'ん'
        else:
            self._output += self._pending
        self._pending = ''

    def backspace(self):
        """
        Remove the last pending character if there is one, otherwise the last
        confirmed kana. Confirmed kana is never expanded back into romaji.
        """
        if self._pending:
            self._pending = self._pending[:-1]
        elif self._output:
            self._output = self._output[:-1]

    def reset(self):
        self._output = ''
        self._pending = ''

    def is_empty(self):
        return not self._output and not self._pending
