# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
# Lyric Renderer - composes one key frame per call
#
# This file is part of FlexLyric
#
# RENDER STATES:
#   no position:  song identity (title + artist/album) or idle placeholder
#   dual line:    current line on top, translation or next line below
#   single line:  current line alone, vertically centered
#
# The renderer holds no timing state of its own. The HighlightClock is
# passed in by the caller, together with "now", so identical inputs give
# identical frames.

import base64
import io

import numpy as np
import pygame as pg
from PIL import Image

from lyric_colors import interpolate_rgb, parse_color
from lyric_configfileparser import DEFAULT_OPTIONS, DEFAULT_WIDTH, DEFAULT_HEIGHT
from lyric_debug import log_debug
from lyric_layout import (
    FontCache, baseline_top, center_top, draw_aligned, draw_text, measure, paint_words
)
from lyric_models import has_text
from lyric_segmenter import split_words

STATE_NO_POSITION = "no_position"
STATE_DUAL_LINE = "dual_line"
STATE_SINGLE_LINE = "single_line"

IDLE_TEXT = "♪ Waiting for playback ♪"
IDLE_FONT_SIZE = 16
TITLE_PREFIX = "♪ "

# Single-line mode draws the current line slightly larger
SINGLE_LINE_FONT_BONUS = 2


# =============================================================================
# Frame - one RGBA raster per render call
# =============================================================================
class Frame:
    """RGBA bitmap produced by a render call."""

    def __init__(self, size, background=(0, 0, 0)):
        self.size = (max(1, int(size[0])), max(1, int(size[1])))
        self.surface = pg.Surface(self.size, pg.SRCALPHA)
        self.surface.fill(tuple(background) + (255,))
        self.state = None

    @property
    def width(self):
        return self.size[0]

    @property
    def height(self):
        return self.size[1]

    def get_at(self, pos):
        """RGBA tuple of one pixel."""
        return tuple(self.surface.get_at(pos))

    def pixels(self):
        """Copy of the frame as a (width, height, 4) uint8 array."""
        rgb = pg.surfarray.array3d(self.surface)
        alpha = pg.surfarray.array_alpha(self.surface)
        return np.dstack((rgb, alpha)).astype(np.uint8)

    def to_image(self):
        return Image.frombytes("RGBA", self.size, pg.image.tobytes(self.surface, "RGBA"))

    def to_png(self):
        """PNG encoded frame."""
        buf = io.BytesIO()
        self.to_image().save(buf, format="PNG")
        return buf.getvalue()

    def to_data_url(self):
        return "data:image/png;base64," + base64.b64encode(self.to_png()).decode("ascii")


# =============================================================================
# LyricRenderer - the compositor
# =============================================================================
class LyricRenderer:
    """
    Paints lyric key frames.

    Usage:
        renderer = LyricRenderer(FontCache())
        clock = HighlightClock()
        frame = renderer.render(clock, position, options, (480, 60), song)
        key_image = frame.to_data_url()
    """

    def __init__(self, fonts=None):
        self.fonts = fonts or FontCache()

    # -------------------------------------------------------------------------
    # State selection
    # -------------------------------------------------------------------------
    @staticmethod
    def select_state(position, options):
        """Pick the render state for a position."""
        if position is None or position.line_index is None or position.line_index < 0:
            return STATE_NO_POSITION
        if not has_text(position.line):
            return STATE_NO_POSITION
        has_translation = options.show_translation and bool(position.line.translated_text)
        if has_translation or has_text(position.next_line):
            return STATE_DUAL_LINE
        return STATE_SINGLE_LINE

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------
    def render(self, clock, position, options=None, size=(DEFAULT_WIDTH, DEFAULT_HEIGHT),
               song=None, now=None):
        """
        Render one frame.

        :param clock: HighlightClock owned by the caller's surface
        :param position: LyricPosition or None
        :param options: RenderOptions, defaults when None
        :param size: (width, height) in device pixels
        :param song: SongInfo shown when there is no position
        :param now: time in ms, defaults to the clock's time source
        :return: Frame
        """
        options = options or DEFAULT_OPTIONS
        if now is None:
            now = clock.now()
        background = parse_color(options.background_color, parse_color(DEFAULT_OPTIONS.background_color))
        frame = Frame(size, background)
        state = self.select_state(position, options)
        frame.state = state
        try:
            if state == STATE_NO_POSITION:
                self._render_song_info(frame, song, options)
            elif state == STATE_DUAL_LINE:
                self._render_dual(frame, clock, position, options, now)
            else:
                self._render_single(frame, clock, position, options, now)
        except (pg.error, ValueError, TypeError, IndexError) as e:
            # Keys have no fallback image: always hand back a frame
            log_debug(f"[Renderer] {state} failed: {e}")
            frame = Frame(size, background)
            frame.state = STATE_NO_POSITION
            self._render_idle(frame, options)
        log_debug(f"[Renderer] {state} {frame.width}x{frame.height}", "trace", "render")
        return frame

    # -------------------------------------------------------------------------
    # Current line
    # -------------------------------------------------------------------------
    def _unit_color_fn(self, clock, position, units, options, now):
        """Per-unit color function, or None when the line is not animated."""
        word_index = position.word_index
        if not options.highlight_word or word_index is None or word_index < 0:
            return None
        if word_index >= len(units):
            return None

        primary = parse_color(options.primary_color)
        highlight = parse_color(options.highlight_color)
        current = units[word_index]
        highlighted = clock.update(position.line_index, word_index, len(current), now)
        boundary = interpolate_rgb(primary, highlight, clock.blend_fraction(now))

        def unit_colors(i, unit):
            if i < word_index:
                return [highlight] * len(unit)
            if i > word_index:
                return [primary] * len(unit)
            colors = []
            for c in range(len(unit)):
                if c < highlighted:
                    colors.append(highlight)
                elif c == highlighted:
                    colors.append(boundary)
                else:
                    colors.append(primary)
            return colors

        return unit_colors

    def _paint_current_line(self, frame, clock, position, options, now, font, top, box):
        text = position.line.original_text
        script, units = split_words(text)
        unit_colors = self._unit_color_fn(clock, position, units, options, now)
        if unit_colors is None:
            highlight = parse_color(options.highlight_color)
            draw_aligned(frame.surface, font, text, highlight, options.primary_align,
                         box[0], box[1], top)
            return
        paint_words(frame.surface, font, units, script, box, top, options.primary_align,
                    unit_colors, parse_color(options.primary_color))

    # -------------------------------------------------------------------------
    # States
    # -------------------------------------------------------------------------
    def _render_dual(self, frame, clock, position, options, now):
        pad = options.padding_horizontal
        box = (pad, max(0, frame.width - pad * 2))

        font = self.fonts.get(options.primary_font_size, bold=True)
        top = baseline_top(font, options.primary_padding_top + options.primary_font_size)
        self._paint_current_line(frame, clock, position, options, now, font, top, box)

        if options.show_translation and position.line.translated_text:
            secondary = position.line.translated_text
        else:
            secondary = position.next_line.original_text
        font2 = self.fonts.get(options.secondary_font_size)
        top2 = baseline_top(font2, options.secondary_padding_top + options.secondary_font_size)
        draw_aligned(frame.surface, font2, secondary, parse_color(options.secondary_color),
                     options.secondary_align, box[0], box[1], top2)

    def _render_single(self, frame, clock, position, options, now):
        pad = options.padding_horizontal
        box = (pad, max(0, frame.width - pad * 2))
        font = self.fonts.get(options.primary_font_size + SINGLE_LINE_FONT_BONUS, bold=True)
        top = center_top(font, frame.height / 2)
        self._paint_current_line(frame, clock, position, options, now, font, top, box)

    def _render_song_info(self, frame, song, options):
        if song is None or not song.song_name:
            self._render_idle(frame, options)
            return
        pad = options.padding_horizontal
        box_width = max(0, frame.width - pad * 2)

        font = self.fonts.get(options.primary_font_size, bold=True)
        top = baseline_top(font, options.primary_padding_top + options.primary_font_size)
        draw_aligned(frame.surface, font, TITLE_PREFIX + song.song_name,
                     parse_color(options.highlight_color), options.primary_align, pad, box_width, top)

        artist_album = song.author_name or ""
        if song.album_name:
            artist_album = f"{artist_album} - {song.album_name}" if artist_album else song.album_name
        if artist_album:
            font2 = self.fonts.get(options.secondary_font_size)
            top2 = baseline_top(font2, options.secondary_padding_top + options.secondary_font_size)
            draw_aligned(frame.surface, font2, artist_album, parse_color(options.secondary_color),
                         options.secondary_align, pad, box_width, top2)

    def _render_idle(self, frame, options):
        font = self.fonts.get(IDLE_FONT_SIZE)
        x = (frame.width - measure(IDLE_TEXT, font)) / 2
        draw_text(frame.surface, font, IDLE_TEXT, parse_color(options.secondary_color),
                  x, center_top(font, frame.height / 2))
