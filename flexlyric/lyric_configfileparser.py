# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
#
# This file is part of FlexLyric

import os
from collections import namedtuple
from configparser import ConfigParser, Error as ConfigError

from lyric_colors import is_color

FILE_CONFIG = "config.txt"
CURRENT = "current"

FONT_PATH = "font.path"
FONT_REGULAR = "font.regular"
FONT_BOLD = "font.bold"

DEBUG_LEVEL = "debug.level"
DEBUG_TRACE_PREFIX = "debug.trace."

ANIMATION_INTERVAL = "animation.interval"
ANIMATION_DURATION = "animation.duration"

KEY_WIDTH = "key.width"
KEY_HEIGHT = "key.height"

ALIGN_LEFT = "left"
ALIGN_CENTER = "center"
ALIGN_RIGHT = "right"
ALIGNMENTS = (ALIGN_LEFT, ALIGN_CENTER, ALIGN_RIGHT)

DEFAULT_WIDTH = 480
DEFAULT_HEIGHT = 60

# Key data names as sent by the key editor
SHOW_TRANSLATION = "showTranslation"
HIGHLIGHT_WORD = "highlightWord"
BACKGROUND_COLOR = "backgroundColor"
PRIMARY_ALIGN = "primaryAlign"
PRIMARY_FONT_SIZE = "primaryFontSize"
PRIMARY_COLOR = "primaryColor"
HIGHLIGHT_COLOR = "highlightColor"
PRIMARY_PADDING_TOP = "primaryPaddingTop"
SECONDARY_ALIGN = "secondaryAlign"
SECONDARY_FONT_SIZE = "secondaryFontSize"
SECONDARY_COLOR = "secondaryColor"
SECONDARY_PADDING_TOP = "secondaryPaddingTop"
PADDING_HORIZONTAL = "paddingHorizontal"

RenderOptions = namedtuple("RenderOptions", [
    "show_translation", "highlight_word", "background_color",
    "primary_align", "primary_font_size", "primary_color", "highlight_color",
    "primary_padding_top",
    "secondary_align", "secondary_font_size", "secondary_color",
    "secondary_padding_top",
    "padding_horizontal",
])

DEFAULT_OPTIONS = RenderOptions(
    show_translation=True,
    highlight_word=True,
    background_color="#1a1a1a",
    primary_align=ALIGN_LEFT,
    primary_font_size=18,
    primary_color="#FFFFFF",
    highlight_color="#E60026",
    primary_padding_top=5,
    secondary_align=ALIGN_LEFT,
    secondary_font_size=13,
    secondary_color="#888888",
    secondary_padding_top=28,
    padding_horizontal=10,
)


def as_int(val, default=0):
    """Safely convert value to integer."""
    if val is None or isinstance(val, bool):
        return default
    try:
        if isinstance(val, (int, float)):
            return int(val)
        if isinstance(val, str):
            val = val.strip()
            if not val:
                return default
            return int(float(val))
        return int(val)
    except (TypeError, ValueError, OverflowError):
        return default


def as_bool(val, default=False):
    """Key editor booleans: only an explicit false switches a default off."""
    if val is None:
        return default
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        v = val.strip().lower()
        if v in ("false", "0", "no", "off"):
            return False
        if v in ("true", "1", "yes", "on"):
            return True
        return default
    if isinstance(val, (int, float)):
        return val != 0
    return default


def _align(val, default):
    if isinstance(val, str) and val.strip().lower() in ALIGNMENTS:
        return val.strip().lower()
    return default


def _color(val, default):
    return val.strip() if isinstance(val, str) and is_color(val) else default


def _size(val, default, minimum=1):
    size = as_int(val, default)
    return size if size >= minimum else default


def options_from_key_data(data=None, defaults=DEFAULT_OPTIONS):
    """Build RenderOptions from key data, each invalid value falls back to its default.

    :param data: dict as stored on the key, may be None
    :param defaults: RenderOptions used for missing or invalid values
    """
    d = data if isinstance(data, dict) else {}
    return RenderOptions(
        show_translation=as_bool(d.get(SHOW_TRANSLATION), defaults.show_translation),
        highlight_word=as_bool(d.get(HIGHLIGHT_WORD), defaults.highlight_word),
        background_color=_color(d.get(BACKGROUND_COLOR), defaults.background_color),
        primary_align=_align(d.get(PRIMARY_ALIGN), defaults.primary_align),
        primary_font_size=_size(d.get(PRIMARY_FONT_SIZE), defaults.primary_font_size),
        primary_color=_color(d.get(PRIMARY_COLOR), defaults.primary_color),
        highlight_color=_color(d.get(HIGHLIGHT_COLOR), defaults.highlight_color),
        primary_padding_top=_size(d.get(PRIMARY_PADDING_TOP), defaults.primary_padding_top, 0),
        secondary_align=_align(d.get(SECONDARY_ALIGN), defaults.secondary_align),
        secondary_font_size=_size(d.get(SECONDARY_FONT_SIZE), defaults.secondary_font_size),
        secondary_color=_color(d.get(SECONDARY_COLOR), defaults.secondary_color),
        secondary_padding_top=_size(d.get(SECONDARY_PADDING_TOP), defaults.secondary_padding_top, 0),
        padding_horizontal=_size(d.get(PADDING_HORIZONTAL), defaults.padding_horizontal, 0),
    )


class Lyric_ConfigFileParser(object):
    """ Configuration file parser """

    def __init__(self, path=None):
        """ Initializer

        :param path: config file, defaults to config.txt in the working directory
        """
        self.path = path or os.path.join(os.getcwd(), FILE_CONFIG)
        self.config = {}
        c = ConfigParser()
        try:
            c.read(self.path, encoding="utf-8")
        except ConfigError:
            c = ConfigParser()

        try:
            self.config[FONT_PATH] = c.get(CURRENT, FONT_PATH)
        except ConfigError:
            self.config[FONT_PATH] = ""
        try:
            self.config[FONT_REGULAR] = c.get(CURRENT, FONT_REGULAR)
        except ConfigError:
            self.config[FONT_REGULAR] = None
        try:
            self.config[FONT_BOLD] = c.get(CURRENT, FONT_BOLD)
        except ConfigError:
            self.config[FONT_BOLD] = None

        try:
            self.config[DEBUG_LEVEL] = c.get(CURRENT, DEBUG_LEVEL).strip().lower()
        except ConfigError:
            self.config[DEBUG_LEVEL] = "off"

        trace = {}
        if c.has_section(CURRENT):
            for key in c.options(CURRENT):
                if not key.startswith(DEBUG_TRACE_PREFIX):
                    continue
                try:
                    trace[key[len(DEBUG_TRACE_PREFIX):]] = c.getboolean(CURRENT, key)
                except ValueError:
                    trace[key[len(DEBUG_TRACE_PREFIX):]] = False
        self.config[DEBUG_TRACE_PREFIX] = trace

        try:
            self.config[ANIMATION_INTERVAL] = c.getint(CURRENT, ANIMATION_INTERVAL)
        except (ConfigError, ValueError):
            self.config[ANIMATION_INTERVAL] = 16
        try:
            self.config[ANIMATION_DURATION] = c.getint(CURRENT, ANIMATION_DURATION)
        except (ConfigError, ValueError):
            self.config[ANIMATION_DURATION] = 500

        try:
            self.config[KEY_WIDTH] = c.getint(CURRENT, KEY_WIDTH)
        except (ConfigError, ValueError):
            self.config[KEY_WIDTH] = DEFAULT_WIDTH
        try:
            self.config[KEY_HEIGHT] = c.getint(CURRENT, KEY_HEIGHT)
        except (ConfigError, ValueError):
            self.config[KEY_HEIGHT] = DEFAULT_HEIGHT

        if self.config[ANIMATION_INTERVAL] <= 0:
            self.config[ANIMATION_INTERVAL] = 16
        if self.config[ANIMATION_DURATION] < 0:
            self.config[ANIMATION_DURATION] = 500
        if self.config[KEY_WIDTH] <= 0:
            self.config[KEY_WIDTH] = DEFAULT_WIDTH
        if self.config[KEY_HEIGHT] <= 0:
            self.config[KEY_HEIGHT] = DEFAULT_HEIGHT

    def get(self, key, default=None):
        return self.config.get(key, default)
