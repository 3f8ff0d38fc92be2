import numpy as np

import lyric_renderer
from lyric_colors import parse_color
from lyric_configfileparser import DEFAULT_OPTIONS
from lyric_layout import baseline_top, center_top
from lyric_models import LyricLine, LyricPosition, SongInfo
from lyric_renderer import (
    STATE_DUAL_LINE, STATE_NO_POSITION, STATE_SINGLE_LINE, Frame, LyricRenderer
)
from lyric_segmenter import segment

HIGHLIGHT = parse_color(DEFAULT_OPTIONS.highlight_color)
PRIMARY = parse_color(DEFAULT_OPTIONS.primary_color)
BACKGROUND = parse_color(DEFAULT_OPTIONS.background_color)


def has_color(frame, rgb):
    px = frame.pixels()
    return bool(np.any(np.all(px[:, :, :3] == np.array(rgb, dtype=np.uint8), axis=2)))


def blank(frame):
    px = frame.pixels()
    return bool(np.all(px[:, :, :3] == np.array(BACKGROUND, dtype=np.uint8)))


def position(text, word_index=None, translation=None, next_text=None, line_index=0):
    next_line = LyricLine(next_text) if next_text else None
    return LyricPosition(line_index, word_index, LyricLine(text, translation), next_line)


# -----------------------------------------------------------------------------
# State selection
# -----------------------------------------------------------------------------
def test_no_position_states():
    select = LyricRenderer.select_state
    assert select(None, DEFAULT_OPTIONS) == STATE_NO_POSITION
    assert select(position("hi", line_index=-1), DEFAULT_OPTIONS) == STATE_NO_POSITION
    assert select(position("hi", line_index=None), DEFAULT_OPTIONS) == STATE_NO_POSITION
    assert select(LyricPosition(0, 0, None), DEFAULT_OPTIONS) == STATE_NO_POSITION
    assert select(position(""), DEFAULT_OPTIONS) == STATE_NO_POSITION


def test_dual_and_single_line_states():
    select = LyricRenderer.select_state
    no_translation = DEFAULT_OPTIONS._replace(show_translation=False)
    assert select(position("hi", translation="salut"), DEFAULT_OPTIONS) == STATE_DUAL_LINE
    assert select(position("hi", next_text="there"), DEFAULT_OPTIONS) == STATE_DUAL_LINE
    assert select(position("hi", translation="salut"), no_translation) == STATE_SINGLE_LINE
    assert select(position("hi"), DEFAULT_OPTIONS) == STATE_SINGLE_LINE


# -----------------------------------------------------------------------------
# Frames
# -----------------------------------------------------------------------------
def test_frame_size_and_png(renderer, clock):
    frame = renderer.render(clock, position("I love you", 1), size=(300, 50))
    assert (frame.width, frame.height) == (300, 50)
    assert frame.pixels().shape == (300, 50, 4)
    assert frame.to_png().startswith(b"\x89PNG")
    assert frame.to_data_url().startswith("data:image/png;base64,")


def test_frames_are_fresh_per_call(renderer, clock):
    first = renderer.render(clock, position("I love you", 1))
    second = renderer.render(clock, position("I love you", 1))
    assert first is not second
    assert first.surface is not second.surface


def test_identical_inputs_give_identical_frames(renderer, clock, fake_time):
    pos = position("I love you", 2, next_text="forever")
    fake_time.advance(50)
    first = renderer.render(clock, pos, now=2000.0)
    second = renderer.render(clock, pos, now=2000.0)
    assert np.array_equal(first.pixels(), second.pixels())


def test_line_without_timing_uses_highlight_color(renderer, clock):
    frame = renderer.render(clock, position("I love you"))
    assert frame.state == STATE_SINGLE_LINE
    assert has_color(frame, HIGHLIGHT)
    assert not has_color(frame, PRIMARY)
    # The clock is untouched when nothing animates
    assert clock.last_line == -1


def test_disabled_word_highlight_is_static(renderer, clock):
    options = DEFAULT_OPTIONS._replace(highlight_word=False)
    frame = renderer.render(clock, position("I love you", 1), options)
    assert has_color(frame, HIGHLIGHT)
    assert not has_color(frame, PRIMARY)
    assert clock.last_line == -1


def test_word_index_past_the_end_is_static(renderer, clock):
    frame = renderer.render(clock, position("I love you", 7))
    assert has_color(frame, HIGHLIGHT)
    assert clock.last_line == -1


def test_first_word_at_its_anchor_is_not_highlighted(renderer, clock):
    frame = renderer.render(clock, position("I love you", 0))
    assert has_color(frame, PRIMARY)
    assert not has_color(frame, HIGHLIGHT)


def test_previous_words_are_highlighted(renderer, clock):
    frame = renderer.render(clock, position("I love you", 2))
    assert has_color(frame, HIGHLIGHT)
    assert has_color(frame, PRIMARY)


def test_current_word_sweeps_toward_highlight(renderer, clock, fake_time):
    options = DEFAULT_OPTIONS
    pos = position("I love you", 2)
    units = segment(pos.line.original_text)

    colors = renderer._unit_color_fn(clock, pos, units, options, clock.now())
    assert colors(0, "I") == [HIGHLIGHT]
    assert colors(1, "love") == [HIGHLIGHT] * 4
    assert colors(2, "you") == [PRIMARY] * 3

    fake_time.advance(35 + 17.5)
    colors = renderer._unit_color_fn(clock, pos, units, options, clock.now())
    you = colors(2, "you")
    assert you[0] == HIGHLIGHT
    assert you[1] not in (HIGHLIGHT, PRIMARY)
    assert you[2] == PRIMARY

    fake_time.advance(3 * 35)
    colors = renderer._unit_color_fn(clock, pos, units, options, clock.now())
    assert colors(2, "you") == [HIGHLIGHT] * 3


def test_later_words_keep_primary_color(renderer, clock):
    pos = position("I love you", 0)
    units = segment(pos.line.original_text)
    colors = renderer._unit_color_fn(clock, pos, units, DEFAULT_OPTIONS, clock.now())
    assert colors(1, "love") == [PRIMARY] * 4
    assert colors(2, "you") == [PRIMARY] * 3


def test_dual_line_draws_secondary_color(renderer, clock):
    frame = renderer.render(clock, position("你好世界", 1, translation="hello world"))
    assert frame.state == STATE_DUAL_LINE
    assert not blank(frame)


def test_song_identity_without_position(renderer, clock):
    song = SongInfo("Blue", "Artist", "Album")
    frame = renderer.render(clock, None, song=song)
    assert frame.state == STATE_NO_POSITION
    assert has_color(frame, HIGHLIGHT)


def test_idle_placeholder_without_song(renderer, clock):
    frame = renderer.render(clock, None)
    assert frame.state == STATE_NO_POSITION
    assert not blank(frame)
    assert not has_color(frame, HIGHLIGHT)


def test_malformed_background_falls_back(renderer, clock):
    options = DEFAULT_OPTIONS._replace(background_color="not a color")
    frame = renderer.render(clock, None, options)
    assert frame.get_at((0, 0))[:3] == BACKGROUND


def test_custom_background(renderer, clock):
    options = DEFAULT_OPTIONS._replace(background_color="#102030")
    frame = renderer.render(clock, position("I love you", 0), options)
    assert frame.get_at((0, 0)) == (16, 32, 48, 255)


def test_oversized_content_still_renders(renderer, clock):
    text = " ".join(["supercalifragilistic"] * 30)
    for word_index in (None, 0, 25):
        frame = renderer.render(clock, position(text, word_index, translation=text), size=(120, 40))
        assert frame.state == STATE_DUAL_LINE
        assert not blank(frame)


def test_tiny_frame_still_renders(renderer, clock):
    frame = renderer.render(clock, position("I love you", 1), size=(0, 0))
    assert (frame.width, frame.height) == (1, 1)


def test_frame_background_fill():
    frame = Frame((4, 3), (1, 2, 3))
    assert frame.get_at((3, 2)) == (1, 2, 3, 255)


# -----------------------------------------------------------------------------
# Line placement
# -----------------------------------------------------------------------------
def _record_aligned(monkeypatch):
    texts = []
    real_draw = lyric_renderer.draw_aligned

    def recording_draw(surface, font, text, *args):
        texts.append(text)
        return real_draw(surface, font, text, *args)

    monkeypatch.setattr(lyric_renderer, "draw_aligned", recording_draw)
    return texts


def _record_paint(monkeypatch):
    calls = []
    real_paint = lyric_renderer.paint_words

    def recording_paint(surface, font, units, script, box, top, *args):
        calls.append((font, top, box))
        return real_paint(surface, font, units, script, box, top, *args)

    monkeypatch.setattr(lyric_renderer, "paint_words", recording_paint)
    return calls


def test_translation_wins_over_next_line(renderer, clock, monkeypatch):
    texts = _record_aligned(monkeypatch)
    renderer.render(clock, position("I love you", 0, translation="je t'aime", next_text="forever"))
    assert texts == ["je t'aime"]


def test_next_line_when_translation_is_hidden(renderer, clock, monkeypatch):
    texts = _record_aligned(monkeypatch)
    options = DEFAULT_OPTIONS._replace(show_translation=False)
    frame = renderer.render(clock, position("I love you", 0, translation="je t'aime",
                                            next_text="forever"), options)
    assert frame.state == STATE_DUAL_LINE
    assert texts == ["forever"]


def test_dual_line_sits_on_the_primary_baseline(renderer, fonts, clock, monkeypatch):
    calls = _record_paint(monkeypatch)
    renderer.render(clock, position("I love you", 0, next_text="forever"))
    font, top, box = calls[0]
    size = DEFAULT_OPTIONS.primary_font_size
    assert font is fonts.get(size, bold=True)
    assert top == baseline_top(font, DEFAULT_OPTIONS.primary_padding_top + size)
    pad = DEFAULT_OPTIONS.padding_horizontal
    assert box == (pad, 480 - 2 * pad)


def test_single_line_is_vertically_centered(renderer, fonts, clock, monkeypatch):
    calls = _record_paint(monkeypatch)
    frame = renderer.render(clock, position("I love you", 0), size=(480, 60))
    assert frame.state == STATE_SINGLE_LINE
    font, top, _ = calls[0]
    assert font is fonts.get(DEFAULT_OPTIONS.primary_font_size + 2, bold=True)
    assert top == center_top(font, 30)

