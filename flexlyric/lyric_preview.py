#!/usr/bin/env python3
# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
#
# This file is part of FlexLyric
"""
FlexLyric Preview

Renders lyric key frames to PNG files without a device attached.

Usage:
    flexlyric-preview --text "I love you" --word-index 2 -o key.png
    flexlyric-preview --text "你好世界" --translation "Hello world" -o key.png
    flexlyric-preview --text "I love you" --word-index 2 --frames 8 -o sweep.png
    flexlyric-preview --text "I love you" --word-index 2 --animate -o live.png
    flexlyric-preview --song "Title" --artist "Artist" -o idle.png

--frames steps a virtual clock by --tick per frame. --animate replays the
player messages in real time: every render of the animation window
(animation.interval / animation.duration in config.txt) becomes a frame.
"""

import argparse
import os
import sys

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from lyric_animation import LyricAnimator
from lyric_clock import CHAR_INTERVAL_MS, HighlightClock
from lyric_configfileparser import (
    Lyric_ConfigFileParser, ANIMATION_DURATION, ANIMATION_INTERVAL, DEBUG_LEVEL,
    DEBUG_TRACE_PREFIX, FONT_PATH, FONT_REGULAR, FONT_BOLD, KEY_WIDTH, KEY_HEIGHT,
    options_from_key_data
)
from lyric_debug import init_debug, log_debug
from lyric_key import LyricKey
from lyric_layout import load_fonts
from lyric_models import LyricLine, LyricPosition, SongInfo
from lyric_renderer import IDLE_FONT_SIZE, SINGLE_LINE_FONT_BONUS, LyricRenderer
from lyric_state import (
    CHANGED_POSITION, CURRENT_LYRIC_UPDATE, FULL_STATE, PLAYING, PlayerState
)


def build_position(args):
    if args.text is None:
        return None
    line = LyricLine(args.text, args.translation)
    next_line = LyricLine(args.next_line) if args.next_line else None
    return LyricPosition(args.line_index, args.word_index, line, next_line)


def player_messages(args):
    """Player push messages equivalent to the command line."""
    song = None
    if args.song:
        song = {"songName": args.song, "authorName": args.artist, "albumName": args.album}
    messages = [{"type": FULL_STATE, "data": {"song": song, "playState": PLAYING}}]
    if args.text is not None:
        data = {
            "lineIndex": args.line_index,
            "wordIndex": args.word_index,
            "line": {"originalLyric": args.text, "translatedLyric": args.translation},
        }
        if args.next_line:
            data["nextLine"] = {"originalLyric": args.next_line}
        messages.append({"type": CURRENT_LYRIC_UPDATE, "data": data})
    return messages


def frame_paths(output, count):
    if count <= 1:
        return [output]
    root, ext = os.path.splitext(output)
    return [f"{root}_{i:03d}{ext or '.png'}" for i in range(count)]


def write_png(path, frame):
    with open(path, 'wb') as f:
        f.write(frame.to_png())


def run_animation(key, messages, key_data, output, interval_ms, duration_ms):
    """
    Feed messages through a PlayerState and a LyricAnimator.

    Every render the animator triggers is written as <output>_NNN.png.

    :return: list of written paths
    """
    state = PlayerState()
    root, ext = os.path.splitext(output)
    written = []

    def render():
        path = f"{root}_{len(written):03d}{ext or '.png'}"
        write_png(path, key.render_frame(state, key_data))
        written.append(path)

    animator = LyricAnimator(render, interval_ms, duration_ms)
    for message in messages:
        changed = state.apply(message)
        if changed == CHANGED_POSITION and state.position is not None:
            animator.on_position(state.position.line_index, state.position.word_index)
        elif changed is not None:
            animator.render()

    thread = animator.thread
    if thread is not None:
        thread.join()
    animator.stop()
    return written


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Render lyric key frames to PNG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--text', help='Current lyric line')
    parser.add_argument('--translation', help='Translation of the current line')
    parser.add_argument('--next-line', help='Next lyric line')
    parser.add_argument('--line-index', type=int, default=0)
    parser.add_argument('--word-index', type=int, default=-1,
                        help='Active word, negative for no word timing')
    parser.add_argument('--song', help='Song title shown when there is no lyric')
    parser.add_argument('--artist', default='')
    parser.add_argument('--album', default='')
    parser.add_argument('--width', type=int, help='Key width in pixels')
    parser.add_argument('--height', type=int, help='Key height in pixels')
    parser.add_argument('--option', action='append', default=[], metavar='NAME=VALUE',
                        help='Key option, e.g. primaryAlign=center (repeatable)')
    parser.add_argument('--frames', type=int, default=1,
                        help='Number of frames, one per tick after the word starts')
    parser.add_argument('--tick', type=float, default=CHAR_INTERVAL_MS,
                        help='Milliseconds between frames (default: %(default)s)')
    parser.add_argument('--animate', action='store_true',
                        help='Replay the word in real time through the animation window')
    parser.add_argument('--config', help='Path to config.txt')
    parser.add_argument('--output', '-o', default='lyric.png')
    args = parser.parse_args(argv)

    cfg = Lyric_ConfigFileParser(args.config)
    init_debug(cfg.get(DEBUG_LEVEL), cfg.get(DEBUG_TRACE_PREFIX))

    key_data = {}
    for item in args.option:
        name, sep, value = item.partition('=')
        if not sep:
            parser.error(f"--option expects NAME=VALUE, got '{item}'")
        key_data[name.strip()] = value
    options = options_from_key_data(key_data)

    size = (args.width or cfg.get(KEY_WIDTH), args.height or cfg.get(KEY_HEIGHT))
    sizes = (options.primary_font_size, options.primary_font_size + SINGLE_LINE_FONT_BONUS,
             options.secondary_font_size, IDLE_FONT_SIZE)
    fonts = load_fonts(cfg.get(FONT_PATH), cfg.get(FONT_REGULAR), cfg.get(FONT_BOLD), sizes)
    renderer = LyricRenderer(fonts)

    if args.animate:
        key = LyricKey(renderer, HighlightClock(), size[0], size[1])
        paths = run_animation(key, player_messages(args), key_data, args.output,
                              cfg.get(ANIMATION_INTERVAL), cfg.get(ANIMATION_DURATION))
        if not paths:
            print(f"ERROR: no frames written for {args.output}")
            return 1
        print(f"  {len(paths)} frames: {paths[0]} .. {paths[-1]}")
        log_debug(f"[Preview] animation wrote {len(paths)} frames", "verbose")
        return 0

    # Frames are rendered against a virtual clock starting at 0 ms
    virtual_now = [0.0]
    clock = HighlightClock(time_source=lambda: virtual_now[0])

    position = build_position(args)
    song = SongInfo(args.song, args.artist, args.album) if args.song else None

    for i, path in enumerate(frame_paths(args.output, args.frames)):
        virtual_now[0] = i * args.tick
        frame = renderer.render(clock, position, options, size, song)
        try:
            write_png(path, frame)
        except OSError as e:
            print(f"ERROR: cannot write {path}: {e}")
            return 1
        print(f"  {path} ({frame.state}, t={virtual_now[0]:.0f}ms)")
        log_debug(f"[Preview] wrote {path}", "verbose")
    return 0


if __name__ == '__main__':
    sys.exit(main())
