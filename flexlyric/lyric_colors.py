# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
# Color helpers - parsing and linear blending
#
# This file is part of FlexLyric

import math
import re

import pygame as pg

WHITE = (255, 255, 255)

HEX_DIGITS = re.compile("[0-9a-fA-F]{6}")


def _clamp(v):
    return max(0, min(255, int(v)))


def _parse_hex(text):
    hex_part = text[1:]
    if len(hex_part) == 3:
        hex_part = "".join(c * 2 for c in hex_part)
    if not HEX_DIGITS.fullmatch(hex_part):
        raise ValueError(f"bad color '{text}'")
    return (int(hex_part[0:2], 16), int(hex_part[2:4], 16), int(hex_part[4:6], 16))


def parse_color(val, default=WHITE):
    """Convert various color formats to RGB tuple, clamped to 0-255.

    Accepts '#RRGGBB', '#RGB', 'r,g,b', tuples/lists and pygame.Color.
    Anything unparsable returns default.
    """
    try:
        if isinstance(val, pg.Color):
            return (_clamp(val.r), _clamp(val.g), _clamp(val.b))
        if isinstance(val, (tuple, list)) and len(val) >= 3:
            return (_clamp(val[0]), _clamp(val[1]), _clamp(val[2]))
        if isinstance(val, str):
            val = val.strip()
            if val.startswith("#"):
                return _parse_hex(val)
            parts = [p.strip() for p in val.split(",")]
            if len(parts) >= 3:
                return (_clamp(parts[0]), _clamp(parts[1]), _clamp(parts[2]))
    except (TypeError, ValueError):
        pass
    return default


def is_color(val):
    """True if val parses as a color on its own."""
    return parse_color(val, default=None) is not None


def to_hex(rgb):
    return "#{:02X}{:02X}{:02X}".format(*rgb)


def _round_half_up(v):
    return int(math.floor(v + 0.5))


def interpolate_rgb(color_a, color_b, t):
    """Blend two colors channel by channel.

    :param color_a: start color (any format parse_color accepts)
    :param color_b: end color
    :param t: progress, clamped to [0, 1]
    :return: (r, g, b)
    """
    a = parse_color(color_a)
    b = parse_color(color_b)
    t = max(0.0, min(1.0, float(t)))
    return tuple(_round_half_up(ca + (cb - ca) * t) for ca, cb in zip(a, b))


def interpolate(color_a, color_b, t):
    """Same as interpolate_rgb but returns '#RRGGBB' text."""
    return to_hex(interpolate_rgb(color_a, color_b, t))
