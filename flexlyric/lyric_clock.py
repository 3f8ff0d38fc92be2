# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
# Highlight Clock - time anchor for the current (line, word) pair
#
# This file is part of FlexLyric
#
# The clock does not know how long a word is actually sung. Each character
# of the active word lights up CHAR_INTERVAL_MS after the previous one,
# counted from the moment the (line, word) pair was first seen.

import time
from threading import Lock

from lyric_debug import log_debug

CHAR_INTERVAL_MS = 35


def monotonic_ms():
    """Default time source in milliseconds."""
    return time.monotonic() * 1000.0


class HighlightClock:
    """
    Tracks the anchor time of the active highlight unit.

    One instance per render surface. The time source is injectable so
    renders can be replayed deterministically.
    """

    def __init__(self, time_source=None, char_interval_ms=CHAR_INTERVAL_MS):
        """
        :param time_source: callable returning the current time in ms
        :param char_interval_ms: delay between two highlighted characters
        """
        self.time_source = time_source or monotonic_ms
        self.char_interval_ms = float(char_interval_ms)
        self.last_line = -1
        self.last_word = -1
        self.word_length = 0
        self.anchor_time = 0.0
        self._lock = Lock()

    def now(self):
        return self.time_source()

    def reset(self):
        """Forget the active pair; the next update re-anchors."""
        with self._lock:
            self.last_line = -1
            self.last_word = -1
            self.word_length = 0
            self.anchor_time = 0.0

    def _elapsed(self, now):
        # Injected time may run behind the anchor
        return max(0.0, now - self.anchor_time)

    def update(self, line_index, word_index, word_length, now=None):
        """Re-anchor on a new (line, word) pair and return highlighted chars.

        :param line_index: current lyric line
        :param word_index: current unit within the line
        :param word_length: characters in the current unit
        :param now: time in ms, defaults to the time source
        :return: fully highlighted characters, within [0, word_length]
        """
        if now is None:
            now = self.time_source()
        with self._lock:
            if line_index != self.last_line or word_index != self.last_word:
                self.last_line = line_index
                self.last_word = word_index
                self.word_length = word_length
                self.anchor_time = now
                log_debug(f"[Clock] anchor line={line_index} word={word_index} len={word_length}",
                          "trace", "clock")
                return 0
            self.word_length = word_length
            highlighted = int(self._elapsed(now) // self.char_interval_ms)
            return max(0, min(highlighted, word_length))

    def elapsed(self, now=None):
        """Milliseconds since the current anchor."""
        if now is None:
            now = self.time_source()
        with self._lock:
            return self._elapsed(now)

    def blend_fraction(self, now=None):
        """Progress of the boundary character, in [0, 1)."""
        return (self.elapsed(now) % self.char_interval_ms) / self.char_interval_ms
