# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
# Layout Engine - fonts, measurement, truncation, alignment
#
# This file is part of FlexLyric
#
# Positions follow canvas conventions (baseline y, left x) and are
# converted to pygame top-left blit coordinates here.

import os

import pygame as pg

from lyric_configfileparser import ALIGN_CENTER, ALIGN_RIGHT
from lyric_debug import log_debug
from lyric_segmenter import joiner

ELLIPSIS = "…"

# Tried in order by SysFont when no font file is configured
FONT_FAMILY = "microsoftyahei,pingfangsc,hiraginosansgb,simhei,notosanscjksc,notosanscjk,droidsansfallback,dejavusans,arial"


# =============================================================================
# Fonts
# =============================================================================
class FontCache:
    """
    Loads and caches pygame fonts by (size, bold).

    Font file lookup follows the screensaver: a configured file under
    font_path wins, else the system font list. family=None selects the
    pygame default font, which keeps measurements stable in tests.
    """

    def __init__(self, font_path="", regular_file=None, bold_file=None, family=FONT_FAMILY):
        if not pg.font.get_init():
            pg.font.init()
        self.font_path = font_path or ""
        self.regular_file = regular_file
        self.bold_file = bold_file
        self.family = family
        self._fonts = {}

    def _file_for(self, bold):
        name = self.bold_file if bold else self.regular_file
        if not name:
            return None
        path = os.path.join(self.font_path, name)
        return path if os.path.exists(path) else None

    def _load(self, size, bold):
        path = self._file_for(bold)
        if path:
            try:
                return pg.font.Font(path, size)
            except (OSError, pg.error) as e:
                log_debug(f"[Fonts] Failed to load '{path}': {e}")
        if self.family:
            return pg.font.SysFont(self.family, size, bold=bold)
        font = pg.font.Font(None, size)
        font.set_bold(bold)
        return font

    def get(self, size, bold=False):
        key = (max(1, int(size)), bool(bold))
        font = self._fonts.get(key)
        if font is None:
            font = self._load(key[0], key[1])
            self._fonts[key] = font
        return font


def load_fonts(font_path, regular_file, bold_file, sizes, family=FONT_FAMILY):
    """Build a FontCache with regular and bold fonts preloaded for sizes."""
    fonts = FontCache(font_path, regular_file, bold_file, family)
    for size in sorted(set(sizes)):
        fonts.get(size)
        fonts.get(size, bold=True)
    log_debug(f"[Fonts] loaded sizes {sorted(set(sizes))} "
              f"(regular={fonts._file_for(False) or 'system'}, bold={fonts._file_for(True) or 'system'})",
              "verbose")
    return fonts


# =============================================================================
# Measurement and alignment
# =============================================================================
def measure(text, font):
    """Pixel width of text in font."""
    if not text:
        return 0
    return font.size(text)[0]


def truncate(text, max_width, font):
    """Shorten text so that it plus an ellipsis fits max_width.

    Text that already fits is returned unchanged. If not even the bare
    ellipsis fits, the empty string is returned.
    """
    if not text:
        return ""
    if measure(text, font) <= max_width:
        return text
    truncated = text
    while truncated:
        truncated = truncated[:-1]
        if measure(truncated + ELLIPSIS, font) <= max_width:
            return truncated + ELLIPSIS
    log_debug(f"[Layout] nothing fits {max_width}px: '{text}'", "trace", "layout")
    return ""


def align_x(align, origin_x, box_width, content_width):
    """Left edge of content inside a box for the given alignment."""
    if align == ALIGN_CENTER:
        return origin_x + (box_width - content_width) / 2
    if align == ALIGN_RIGHT:
        return origin_x + box_width - content_width
    return origin_x


def baseline_top(font, baseline_y):
    """Top of a text blit whose baseline sits at baseline_y."""
    return baseline_y - font.get_ascent()


def center_top(font, center_y):
    """Top of a text blit vertically centered on center_y."""
    return center_y - font.get_height() / 2


def draw_text(surface, font, text, color, x, top):
    """Blit antialiased text; returns the drawn width."""
    if not text:
        return 0
    surf = font.render(text, True, color)
    surface.blit(surf, (round(x), round(top)))
    return surf.get_width()


def draw_aligned(surface, font, text, color, align, origin_x, box_width, top):
    """Truncate, align and draw a static text line."""
    text = truncate(text, box_width, font)
    x = align_x(align, origin_x, box_width, measure(text, font))
    draw_text(surface, font, text, color, x, top)
    return text


# =============================================================================
# Animated word sequence
# =============================================================================
def sequence_width(units, script, font):
    """Width of all units with the synthesized separators."""
    if not units:
        return 0
    sep = joiner(script)
    total = sum(measure(u, font) for u in units)
    return total + measure(sep, font) * (len(units) - 1)


def paint_words(surface, font, units, script, box, top, align, unit_colors, ellipsis_color):
    """
    Paint a unit sequence left to right, one color list per unit.

    When the sequence overflows the box, the widest run of whole units
    that still leaves room for an ellipsis is painted, followed by the
    ellipsis. Separators take the color of the last character of the
    unit on their left.

    :param surface: target surface
    :param font: pygame font
    :param units: segmented units
    :param script: script tag of the units
    :param box: (x, width) of the text box
    :param top: top y of the text blit
    :param align: left, center or right
    :param unit_colors: callable(index, unit) -> list of per-character colors
    :param ellipsis_color: color of the overflow ellipsis
    :return: number of units painted
    """
    x0, box_width = box
    sep = joiner(script)
    sep_width = measure(sep, font)
    total = sequence_width(units, script, font)
    right = x0 + box_width

    widths = [measure(u, font) for u in units]
    starts = []
    x = align_x(align, x0, box_width, min(total, box_width))
    for width in widths:
        starts.append(x)
        x += width + sep_width

    count = len(units)
    ellipsis_x = None
    overflow = next((i for i in range(count) if starts[i] + widths[i] > right), None)
    if overflow is not None:
        ellipsis_width = measure(ELLIPSIS, font)
        count = overflow
        while count > 0 and starts[count] + ellipsis_width > right:
            count -= 1
        if starts[count] + ellipsis_width <= right:
            ellipsis_x = starts[count]
        log_debug(f"[Layout] overflow at unit {overflow}, painting {count}/{len(units)}",
                  "trace", "layout")

    prev_clip = surface.get_clip()
    surface.set_clip(pg.Rect(int(x0), 0, int(box_width), surface.get_height()).clip(prev_clip))
    try:
        for i in range(count):
            unit = units[i]
            colors = unit_colors(i, unit)
            if len(set(colors)) == 1:
                draw_text(surface, font, unit, colors[0], starts[i], top)
            else:
                char_x = starts[i]
                for ch, color in zip(unit, colors):
                    draw_text(surface, font, ch, color, char_x, top)
                    char_x += measure(ch, font)
            if sep and i < len(units) - 1:
                draw_text(surface, font, sep, colors[-1], starts[i] + widths[i], top)
        if ellipsis_x is not None:
            draw_text(surface, font, ELLIPSIS, ellipsis_color, ellipsis_x, top)
    finally:
        surface.set_clip(prev_clip)
    return count
