# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
# Lyric Key - renders a lyric key image from player state and key data
#
# This file is part of FlexLyric

from lyric_clock import HighlightClock
from lyric_configfileparser import DEFAULT_HEIGHT, DEFAULT_WIDTH, as_int, options_from_key_data
from lyric_debug import log_debug
from lyric_renderer import LyricRenderer


class LyricKey:
    """
    One lyric key surface with its own highlight clock.

    Returns PNG data URLs ready to be assigned as key image.
    """

    def __init__(self, renderer=None, clock=None, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT):
        self.renderer = renderer or LyricRenderer()
        self.clock = clock or HighlightClock()
        self.default_width = width
        self.height = height

    def key_size(self, key_style=None):
        width = self.default_width
        if isinstance(key_style, dict):
            width = as_int(key_style.get("width"), self.default_width)
        if width <= 0:
            width = self.default_width
        return (width, self.height)

    def render_frame(self, player_state, key_data=None, key_style=None, now=None):
        options = options_from_key_data(key_data)
        return self.renderer.render(self.clock, player_state.position, options,
                                    self.key_size(key_style), player_state.song, now)

    def render(self, player_state, key_data=None, key_style=None, now=None):
        """PNG data URL for the key."""
        frame = self.render_frame(player_state, key_data, key_style, now)
        log_debug(f"[Key] {frame.state} {frame.width}x{frame.height}", "trace", "render")
        return frame.to_data_url()
