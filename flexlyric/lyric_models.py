# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
#
# This file is part of FlexLyric

from collections import namedtuple

# A lyric line never changes once received
LyricLine = namedtuple("LyricLine", ["original_text", "translated_text"])
LyricLine.__new__.__defaults__ = (None,)

# word_index None or negative: no word-level timing for this line
LyricPosition = namedtuple("LyricPosition", ["line_index", "word_index", "line", "next_line"])
LyricPosition.__new__.__defaults__ = (None,)

SongInfo = namedtuple("SongInfo", ["song_name", "author_name", "album_name"])
SongInfo.__new__.__defaults__ = ("", "")


def has_text(line):
    """True if line carries original text."""
    return line is not None and bool(line.original_text)
