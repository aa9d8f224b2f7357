#!/usr/bin/env python3
# henkan.py - Kana to Kanji conversion (変換) engine

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from candidate import CandidateList
from input_buffer import InputBuffer

logger = logging.getLogger(__name__)


class EngineState(Enum):
    DIRECT = 'direct'          # no input in progress
    COMPOSING = 'composing'    # romaji/kana being typed, no candidates
    CONVERTING = 'converting'  # candidate list active


class Command(Enum):
    CONVERT = 'convert'
    NEXT_CANDIDATE = 'next'
    PREV_CANDIDATE = 'prev'
    COMMIT = 'commit'
    CANCEL = 'cancel'
    BACKSPACE = 'backspace'


@dataclass(frozen=True)
class InsertChar:
    char: str


@dataclass
class EngineOutput:
    committed: str = ''   # text to hand over to the application now
    display: str = ''     # text to show as the in-progress composition
    candidate_index: Optional[int] = None  # only set while converting

    def is_empty(self):
        return not self.committed and not self.display


class ConversionEngine:
    """
    State machine driving romaji input, kana-kanji conversion and learning.

    The engine moves between three states:

        DIRECT ──InsertChar──► COMPOSING ──Convert──► CONVERTING
           ▲                      │  ▲                    │
           └──Commit/Cancel───────┘  └──Cancel/Backspace──┤
           ▲                                              │
           └───────────────────Commit─────────────────────┘

    Candidates are the user dictionary's entries (most recent first) followed
    by the system dictionary's entries that are not already listed. Both
    dictionaries are optional; a missing one simply contributes nothing.

    process() never raises and never does I/O. The engine is not thread-safe:
    the host must serialize every call into it.
    """

    def __init__(self, dictionary=None, user_dictionary=None):
        """
        Args:
            dictionary: Read-only system Dictionary, or None
            user_dictionary: UserDictionary that receives learned commits, or None
        """
        self._dictionary = dictionary
        self._user_dictionary = user_dictionary
        self._state = EngineState.DIRECT
        self._input = InputBuffer()
        self._candidates = None  # CandidateList while converting
        self._reading = ''       # kana reading of the current conversion

    @property
    def state(self):
        return self._state

    @property
    def reading(self):
        return self._reading

    @property
    def composition(self):
        """Kana plus pending romaji in the input buffer (the reading while converting)."""
        return self._input.text

    @property
    def candidates(self):
        """
        Returns:
            tuple or None: All candidates while converting, None otherwise
        """
        if self._candidates is None:
            return None
        return self._candidates.candidates

    @property
    def candidate_list(self):
        return self._candidates

    @property
    def dictionary(self):
        return self._dictionary

    @property
    def user_dictionary(self):
        return self._user_dictionary

    def reset(self):
        """Drop any input in progress and go back to DIRECT."""
        self._input.reset()
        self._candidates = None
        self._reading = ''
        self._state = EngineState.DIRECT

    def process(self, command):
        """
        Apply one command and report what should be committed and displayed.

        Args:
            command: InsertChar(char) or a Command member

        Returns:
            EngineOutput
        """
        state = self._state
        if state is EngineState.DIRECT:
            output = self._process_direct(command)
        elif state is EngineState.COMPOSING:
            output = self._process_composing(command)
        else:
            output = self._process_converting(command)
        if self._state is not state:
            logger.debug(f'{state.name} --{command}--> {self._state.name}')
        return output

    # ─── Per-state handlers ───────────────────────────────────────────────

    def _process_direct(self, command):
        if isinstance(command, InsertChar):
            self._input.feed_char(command.char)
            if not self._input.is_empty():
                self._state = EngineState.COMPOSING
            return self._composing_output()
        return EngineOutput()

    def _process_composing(self, command):
        if isinstance(command, InsertChar):
            self._input.feed_char(command.char)
            return self._composing_output()

        if command is Command.CONVERT:
            return self._convert()

        if command is Command.COMMIT:
            self._input.flush()
            committed = self._input.output
            self._input.reset()
            self._state = EngineState.DIRECT
            return EngineOutput(committed=committed)

        if command is Command.CANCEL:
            self._input.reset()
            self._state = EngineState.DIRECT
            return EngineOutput()

        if command is Command.BACKSPACE:
            self._input.backspace()
            if self._input.is_empty():
                self._state = EngineState.DIRECT
            return self._composing_output()

        # candidate navigation has nothing to act on; keep the preedit as is
        return self._composing_output()

    def _process_converting(self, command):
        if command is Command.NEXT_CANDIDATE or command is Command.CONVERT:
            self._candidates.next()
            return self._converting_output()

        if command is Command.PREV_CANDIDATE:
            self._candidates.prev()
            return self._converting_output()

        if command is Command.COMMIT:
            committed = self._commit_candidate()
            self._input.reset()
            self._state = EngineState.DIRECT
            return EngineOutput(committed=committed)

        if command is Command.CANCEL or command is Command.BACKSPACE:
            # back to editing the reading; the flushed kana is still in the buffer
            self._candidates = None
            self._state = EngineState.COMPOSING
            return self._composing_output()

        if isinstance(command, InsertChar):
            committed = self._commit_candidate()
            self._input.reset()
            self._input.feed_char(command.char)
            self._state = EngineState.DIRECT if self._input.is_empty() else EngineState.COMPOSING
            return EngineOutput(committed=committed, display=self._input.text)

        return self._converting_output()

    # ─── Conversion ───────────────────────────────────────────────────────

    def lookup_candidates(self, reading):
        """
        Merge user and system candidates for a reading.

        User dictionary entries come first in their recency order; system
        entries follow unless an equal string is already listed.

        Returns:
            list: Candidates without duplicates (possibly empty)
        """
        merged = []
        seen = set()
        sources = (self._user_dictionary, self._dictionary)
        for source in sources:
            if source is None:
                continue
            for candidate in source.lookup(reading) or ():
                if candidate not in seen:
                    seen.add(candidate)
                    merged.append(candidate)
        return merged

    def _convert(self):
        self._input.flush()
        reading = self._input.output
        self._reading = reading

        merged = self.lookup_candidates(reading)
        if not merged:
            logger.debug(f'ConversionEngine.convert("{reading}") → no candidates, committing kana')
            self._input.reset()
            self._state = EngineState.DIRECT
            return EngineOutput(committed=reading)

        self._candidates = CandidateList(merged)
        self._state = EngineState.CONVERTING
        logger.debug(f'ConversionEngine.convert("{reading}") → {len(merged)} candidates')
        return self._converting_output()

    def _commit_candidate(self):
        """Take the selected candidate, learn it and clear the candidate list."""
        committed = ''
        if self._candidates is not None:
            committed = self._candidates.select() or ''
        self._candidates = None
        if self._user_dictionary is not None and self._reading and committed:
            self._user_dictionary.record(self._reading, committed)
        return committed

    # ─── Output helpers ───────────────────────────────────────────────────

    def _composing_output(self):
        return EngineOutput(display=self._input.text)

    def _converting_output(self):
        if self._candidates is None or self._candidates.is_empty():
            return EngineOutput()
        return EngineOutput(display=self._candidates.current(),
                            candidate_index=self._candidates.index)
