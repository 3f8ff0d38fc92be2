# Copyright 2024 PeppyMeter for Volumio by 2aCD
# Copyright 2025 Volumio 4 adaptation by Just a Nerd
# Player State - folds pushed player messages into one state object
#
# This file is part of FlexLyric
#
# The transport delivering the messages lives elsewhere; this module only
# understands already decoded message dicts: {"type": ..., "data": {...}}

from lyric_configfileparser import as_int
from lyric_debug import log_debug
from lyric_models import LyricLine, LyricPosition, SongInfo

# Message types
FULL_STATE = "FullState"
SONG_UPDATE = "SongUpdate"
PLAY_STATE_UPDATE = "PlayStateUpdate"
TIMELINE_UPDATE = "TimelineUpdate"
PLAY_MODE_UPDATE = "PlayModeUpdate"
LYRIC_UPDATE = "LyricUpdate"
CURRENT_LYRIC_UPDATE = "CurrentLyricUpdate"

# What a message invalidates
CHANGED_ALL = "all"
CHANGED_TIMELINE = "timeline"
CHANGED_LYRICS = "lyrics"
CHANGED_POSITION = "position"

PLAYING = "Playing"


def _text(val):
    return val if isinstance(val, str) and val else None


def line_from_message(data):
    """LyricLine from {"originalLyric", "translatedLyric"}, None if absent."""
    if not isinstance(data, dict):
        return None
    return LyricLine(_text(data.get("originalLyric")), _text(data.get("translatedLyric")))


def position_from_message(data):
    """LyricPosition from a CurrentLyricUpdate payload, None if unusable."""
    if not isinstance(data, dict):
        return None
    line_index = as_int(data.get("lineIndex"), None)
    if line_index is None:
        return None
    return LyricPosition(
        line_index=line_index,
        word_index=as_int(data.get("wordIndex"), None),
        line=line_from_message(data.get("line")),
        next_line=line_from_message(data.get("nextLine")),
    )


def song_from_message(data):
    """SongInfo from a song payload, None if no song is loaded."""
    if not isinstance(data, dict):
        return None
    return SongInfo(
        song_name=data.get("songName") or "",
        author_name=data.get("authorName") or "",
        album_name=data.get("albumName") or "",
    )


class PlayerState:
    """
    Latest known player state as far as the lyric key is concerned.

    apply() returns which part of the display needs a redraw so the caller
    can refresh only the keys that depend on it. Timeline, play mode and
    lyric sheet payloads only feed other panels; they are acknowledged
    with their scope but not kept.
    """

    def __init__(self):
        self.song = None
        self.play_state = "Stopped"
        self.position = None

    @property
    def is_playing(self):
        return self.play_state == PLAYING

    def apply(self, message):
        """
        Fold one message into the state.

        :param message: decoded {"type": ..., "data": ...} dict
        :return: CHANGED_* scope, or None for unknown messages
        """
        if not isinstance(message, dict):
            return None
        kind = message.get("type")
        data = message.get("data") or {}

        if kind == FULL_STATE:
            self.song = song_from_message(data.get("song"))
            self.play_state = data.get("playState") or self.play_state
            changed = CHANGED_ALL
        elif kind == SONG_UPDATE:
            self.song = song_from_message(data)
            changed = CHANGED_ALL
        elif kind == PLAY_STATE_UPDATE:
            self.play_state = data.get("status") or self.play_state
            changed = CHANGED_ALL
        elif kind == TIMELINE_UPDATE:
            changed = CHANGED_TIMELINE
        elif kind == PLAY_MODE_UPDATE:
            changed = CHANGED_ALL
        elif kind == LYRIC_UPDATE:
            changed = CHANGED_LYRICS
        elif kind == CURRENT_LYRIC_UPDATE:
            self.position = position_from_message(data)
            changed = CHANGED_POSITION
        else:
            log_debug(f"[State] ignored message type '{kind}'", "verbose")
            return None

        log_debug(f"[State] {kind} -> {changed}", "trace", "state")
        return changed
