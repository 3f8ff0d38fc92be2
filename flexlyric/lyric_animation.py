# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
# Lyric Animator - drives repeated renders while a word lights up
#
# This file is part of FlexLyric
#
# Position updates arrive only when the word changes, far slower than the
# per-character sweep. After each (line, word) transition the animator
# keeps rendering at a fixed tick for a bounded window.

import time
from threading import Event, Lock, Thread

from lyric_debug import log_debug

ANIMATION_INTERVAL_MS = 16  # ~60 fps
ANIMATION_DURATION_MS = 500


class LyricAnimator:
    """
    Caller-side scheduler for lyric renders.

    render_callback is never entered twice at the same time, whether it is
    called from on_position() or from the tick thread.
    """

    def __init__(self, render_callback, interval_ms=ANIMATION_INTERVAL_MS,
                 duration_ms=ANIMATION_DURATION_MS):
        self.render_callback = render_callback
        self.interval = max(1, int(interval_ms)) / 1000.0
        self.duration = max(0, int(duration_ms)) / 1000.0
        self.last_line = -1
        self.last_word = -1
        self._render_lock = Lock()
        self._stop_event = None
        self.thread = None

    def render(self):
        with self._render_lock:
            try:
                self.render_callback()
            except Exception as e:
                # A failing key must not kill the tick thread
                log_debug(f"[Animator] render failed: {e}")

    def on_position(self, line_index, word_index):
        """Render now, and start a tick window on a new (line, word) pair."""
        is_new_word = line_index != self.last_line or word_index != self.last_word
        self.last_line = line_index
        self.last_word = word_index

        self.render()

        if is_new_word and word_index is not None and word_index >= 0:
            self.start()

    def start(self):
        """(Re)start the tick window."""
        self.stop()
        stop_event = Event()
        self._stop_event = stop_event
        self.thread = Thread(target=self._run, args=(stop_event,), daemon=True)
        self.thread.start()
        log_debug(f"[Animator] window started line={self.last_line} word={self.last_word}",
                  "trace", "animation")

    def _run(self, stop_event):
        start = time.monotonic()
        while not stop_event.wait(self.interval):
            if time.monotonic() - start >= self.duration:
                break
            self.render()

    def stop(self):
        if self._stop_event:
            self._stop_event.set()
        self._stop_event = None
        self.thread = None

    @property
    def running(self):
        return self.thread is not None and self.thread.is_alive()
