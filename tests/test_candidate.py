#!/usr/bin/env python3
# tests/test_candidate.py - Unit tests for the candidate list cursor

import os
import sys

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from candidate import CandidateList


class TestCandidateList:
    """Test suite for CandidateList"""

    def test_starts_at_first_candidate(self):
        candidates = CandidateList(["漢字", "感じ", "幹事"])
        assert candidates.index == 0
        assert candidates.current() == "漢字"
        assert candidates.select() == "漢字"

    def test_next_wraps_around(self):
        candidates = CandidateList(["漢字", "感じ", "幹事"])
        candidates.next()
        candidates.next()
        assert candidates.current() == "幹事"
        candidates.next()
        assert candidates.index == 0

    def test_prev_wraps_around(self):
        candidates = CandidateList(["漢字", "感じ", "幹事"])
        candidates.prev()
        assert candidates.index == 2
        assert candidates.current() == "幹事"

    def test_next_then_prev_returns(self):
        candidates = CandidateList(["a", "b"])
        candidates.next()
        candidates.prev()
        assert candidates.index == 0

    def test_cursor_always_in_range(self):
        candidates = CandidateList(["a", "b", "c"])
        for _ in range(10):
            candidates.next()
            assert 0 <= candidates.index < len(candidates)
        for _ in range(10):
            candidates.prev()
            assert 0 <= candidates.index < len(candidates)

    def test_empty_list(self):
        candidates = CandidateList([])
        assert candidates.is_empty()
        assert candidates.current() is None
        assert candidates.select() is None
        candidates.next()
        candidates.prev()
        assert candidates.index == 0

    def test_set_index(self):
        candidates = CandidateList(["a", "b", "c"])
        assert candidates.set_index(2)
        assert candidates.current() == "c"
        assert not candidates.set_index(3)
        assert not candidates.set_index(-1)
        assert candidates.index == 2

    def test_candidates_are_read_only(self):
        source = ["a", "b"]
        candidates = CandidateList(source)
        source.append("c")
        assert candidates.candidates == ("a", "b")
        assert list(candidates) == ["a", "b"]
        assert len(candidates) == 2
